from typing import List, Optional, Tuple

from .wish import Bridge, start
from .utils import ROOT, ReadTimeout
from .protocol import QUIT, CB_SEP, tclQuote, escapedGet, unescapeReply
from . import widgets

UNKNOWN_NAME = "None"
BOOL_SEP = ":::"

class Window:
  '''
  A window built from a layout, read() gives (event, values):
  - event is the name of the clicked button / radio, "<name>:::true" for checkboxes, "Quit" when closed
  - values has one string per input then per slider, in layout order, queried on every read
  '''
  def __init__(self, bridge:Bridge, title:str="", parent:str=ROOT):
    self.bridge = bridge
    self.parent = parent
    self.names = {} # widget id: name
    self.inputs:List[str] = []
    self.sliders:List[str] = []
    self._radioVars = {}
    self._rows = 0
    self._title = ""
    if title: self.title = title

  @property
  def title(self) -> str: return self._title
  @title.setter
  def title(self, v):
    self._title = v
    self.bridge.send("wm title %s %s" %(self.parent, tclQuote(v)))

  def registerName(self, wid:str, name:str):
    self.names.setdefault(wid, name)
  def radioVariable(self, group:str) -> str:
    var = self._radioVars.get(group)
    if var == None:
      var = self._radioVars[group] = self.bridge.nextVariable()
      self.bridge.send("set %s {}" %var)
    return var

  def addRows(self, layout):
    '''create widgets of [layout] rows, below those added before'''
    for row in layout:
      for (col, x) in enumerate(row): widgets.create(self, x, self._rows, col)
      self._rows += 1
    return self

  def nameOf(self, event:str) -> str:
    if CB_SEP in event:
      (wid, value) = event.split(CB_SEP, 1)
      return self.names.get(wid.strip(), UNKNOWN_NAME) + BOOL_SEP + value.strip()
    return self.names.get(event, UNKNOWN_NAME)

  def values(self) -> List[str]:
    '''current text of every input, then value of every slider'''
    res = [unescapeReply(self.bridge.sendAndReply(escapedGet("%s get 1.0 {end - 1 chars}" %wid))) for wid in self.inputs]
    res += [self.bridge.sendAndReply("puts [%s get] ; flush stdout" %wid) for wid in self.sliders]
    return res

  def read(self, timeout:Optional[float]=None) -> Tuple[str, List[str]]:
    '''
    one event and the current values, ("", [""]) if the line carried no event or [timeout] passed.
    Values are queried right after the event line, so a line wish prints on its own schedule
    ([Bridge.after] timers, [Bridge.bind] scripts, slider with on_slide) landing in between is taken
    as a value and its handler doesn't run: use [Bridge.mainloop] for programs driven by those
    '''
    try: event = self.bridge.nextEvent(timeout)
    except ReadTimeout: event = None
    if event == None: return ("", [""])
    if event == QUIT: return (QUIT, [])
    return (self.nameOf(event), self.values())

  def close(self):
    '''ends wish, and this program'''
    self.bridge.terminate()

def build(title:str, layout, bridge:Optional[Bridge]=None, **kwargs) -> Window:
  '''build [layout] in the main window of [bridge] (by default a new one, kwargs go to [start])'''
  return Window(bridge or start(**kwargs), title).addRows(layout)
