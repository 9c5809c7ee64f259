#!/bin/env python3
# -*- coding: utf-8 -*-

from setuptools import setup, find_packages

setup(
  name="wishgui", version="0.1.0",
  python_requires=">=3.6",
  author="duangsuse", author_email="fedora-opensuse@outlook.com",
  description="Simple GUI windows for Python, drawn by a Tcl/Tk wish subprocess",
  long_description="""
wishgui starts the "wish" interpreter and talks Tcl to it over pipes: build a window from a list of rows,
then read() gives the clicked widget's name with the current text of every input and slider
""",

  packages=find_packages(exclude=["tests"]),
  extras_require={"test": ["pytest"]})
