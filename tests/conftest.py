import queue
import re
import threading

import pytest

from wishgui.utils import IdGen
from wishgui.wish import Bridge, start

QUERY = re.compile(r"\[(\.[\w.]+) get\b")

class FakeStdin:
  def __init__(self, wish):
    self._wish = wish
    self.closed = False
  def write(self, data:bytes):
    if self.closed: raise BrokenPipeError(32, "Broken pipe")
    self._wish._command(data.decode("utf-8")[:-1])
    return len(data)
  def flush(self): pass
  def close(self): self.closed = True

class FakeStdout:
  def __init__(self): self._lines = queue.Queue()
  def readline(self) -> bytes: return self._lines.get()
  def put(self, text:str): self._lines.put(text.encode("utf-8") + b"\n")
  def close(self): self._lines.put(b"")

class FakeWish:
  '''Popen look-alike: answers "[<id> get" queries from [values], [emit] writes a line as wish would'''
  def __init__(self):
    self.argv = None
    self.commands = []
    self.values = {}
    self.returncode = None
    self.stdin = FakeStdin(self)
    self.stdout = FakeStdout()
  def spawn(self, argv, **kwargs):
    self.argv = argv
    return self

  def _command(self, cmd):
    self.commands.append(cmd)
    mch = QUERY.search(cmd)
    if mch != None:
      value = self.values.get(mch.group(1), "")
      if "string map" in cmd: value = value.replace("\\", "\\\\").replace("\n", "\\n")
      self.stdout.put(value)
  def emit(self, line:str): self.stdout.put(line)

  def poll(self): return self.returncode
  def kill(self):
    if self.returncode == None:
      self.returncode = -9
      self.stdout.close()
  def wait(self, timeout=None): return self.returncode
  def die(self, code):
    self.returncode = code
    self.stdout.close()

@pytest.fixture
def fake():
  return FakeWish()

@pytest.fixture
def bridge(fake):
  b = start(spawn=fake.spawn, ids=IdGen(), read_timeout=5)
  yield b
  b.stop()

@pytest.fixture(autouse=True)
def noBridgeLeft():
  yield
  if Bridge.current != None:
    Bridge.current.stop()
