'''
Layout elements: text, button, checkBox, radio, input, slider, separator.
A layout is a list of rows, each a list of elements. [ui.build] walks it and places every element with grid.

Common kwargs: size=(w,h), color=(fg,bg) as Tk color names, pad=(x,y)
- slider range is inclusive: (0, 100) or range(0, 100+1) are the same
- radios in the same row share a variable, unless group= is given
'''
from typing import NamedTuple, Optional, Tuple, Callable

from .protocol import tclQuote

HORIZONTAL = "horizontal"
VERTICAL = "vertical"
DEFAULT_PAD = (10, 4)
DEFAULT_RANGE = (0, 100)
INPUT_SIZE = (10, 1)

class Kind:
  text = "text"; button = "button"; checkBox = "checkbox"; radio = "radio"
  input = "input"; slider = "slider"; separator = "separator"

class Element(NamedTuple("Element", [("kind", str), ("name", str), ("size", Tuple[int, int]),
    ("color", Tuple[Optional[str], Optional[str]]), ("pad", Tuple[int, int]), ("range", Tuple[float, float]),
    ("group", Optional[str]), ("on_event", Optional[Callable])])):
  '''name is the label text, the input placeholder, or the slider/separator orientation'''

def _element(kind, name, size=(0, 0), color=(None, None), pad=DEFAULT_PAD, range=(0, 0), group=None, on_event=None):
  return Element(kind, str(name), tuple(size), tuple(color), tuple(pad), tuple(range), group, on_event)

def _orient(o):
  if o not in (HORIZONTAL, VERTICAL): raise ValueError("unknown orientation: %r" %o)
  return o
def _inclusive(rng):
  if isinstance(rng, range): return (rng.start, rng.stop-1)
  (first, last) = rng
  return (first, last)

def text(name, **kwargs): return _element(Kind.text, name, **kwargs)
def button(name, on_click=None, **kwargs): return _element(Kind.button, name, on_event=on_click, **kwargs)
def checkBox(name, on_toggle=None, **kwargs): return _element(Kind.checkBox, name, on_event=on_toggle, **kwargs)
def radio(name, group=None, on_click=None, **kwargs): return _element(Kind.radio, name, group=group, on_event=on_click, **kwargs)
def input(placeholder="", **kwargs): return _element(Kind.input, placeholder, **kwargs)
def slider(orient=HORIZONTAL, range=DEFAULT_RANGE, on_slide=None, **kwargs):
  return _element(Kind.slider, _orient(orient), range=_inclusive(range), on_event=on_slide, **kwargs)
def separator(orient=HORIZONTAL, **kwargs): return _element(Kind.separator, _orient(orient), **kwargs)

#v Tk commands for each kind. win is a [ui.Window]
def _puts(line): return '{puts "%s" ; flush stdout}' %line

def _createText(win, x):
  wid = win.bridge.nextId(win.parent)
  # family of the default font, at a new size
  font = " -font [list [font actual TkDefaultFont -family] %d]" %((x.size[0] + x.size[1]) // 2) if x.size[0] and x.size[1] else ""
  win.bridge.send("label %s -text %s%s" %(wid, tclQuote(x.name), font))
  return wid

def _sized(x):
  (w, h) = x.size
  return (" -width %d" %w if w else "") + (" -height %d" %h if h else "")

def _createButton(win, x):
  wid = win.bridge.nextId(win.parent)
  win.bridge.send("button %s -text %s%s -command %s" %(wid, tclQuote(x.name), _sized(x), _puts("clicked %s" %wid)))
  win.registerName(wid, x.name)
  if x.on_event != None: win.bridge.addCallback0(wid, x.on_event)
  return wid

def _createCheckBox(win, x):
  wid = win.bridge.nextId(win.parent)
  var = win.bridge.nextVariable()
  win.bridge.send("checkbutton %s -text %s%s -variable %s -command %s" %(wid, tclQuote(x.name), _sized(x), var, _puts("cb1b-%s-$%s" %(wid, var))))
  win.registerName(wid, x.name)
  if x.on_event != None: win.bridge.addCallbackBool(wid, x.on_event)
  return wid

def _createRadio(win, x, row):
  wid = win.bridge.nextId(win.parent)
  var = win.radioVariable(x.group if x.group != None else "row%d" %row)
  win.bridge.send("radiobutton %s -text %s%s -variable %s -value %s -command %s" %(wid, tclQuote(x.name), _sized(x), var, tclQuote(x.name), _puts("cb1-%s-$%s" %(wid, var))))
  win.registerName(wid, x.name)
  if x.on_event != None: win.bridge.addCallback0(wid, x.on_event)
  return wid

def _createInput(win, x):
  wid = win.bridge.nextId(win.parent)
  (w, h) = (x.size[0] or INPUT_SIZE[0], x.size[1] or INPUT_SIZE[1])
  win.bridge.send("text %s -width %d -height %d" %(wid, w, h))
  if x.name != "": win.bridge.send("%s insert 1.0 %s" %(wid, tclQuote(x.name)))
  win.inputs.append(wid)
  return wid

def _createSlider(win, x):
  wid = win.bridge.nextId(win.parent)
  (first, last) = x.range
  length = " -length %d" %x.size[0] if x.size[0] else ""
  command = " -command {scale_value %s}" %wid if x.on_event != None else ""
  win.bridge.send("scale %s -orient %s -from %s -to %s%s%s" %(wid, x.name, first, last, length, command))
  if x.on_event != None: win.bridge.addCallbackFloat(wid, x.on_event)
  win.sliders.append(wid)
  return wid

def _createSeparator(win, x):
  wid = win.bridge.nextId(win.parent)
  win.bridge.send("ttk::separator %s -orient %s" %(wid, x.name))
  return wid

ACTIVE_COLORED = {Kind.button, Kind.checkBox, Kind.radio}
def configureColors(win, wid, x):
  (fg, bg) = x.color
  active = x.kind in ACTIVE_COLORED
  opts = []
  if fg != None:
    opts += ["-foreground", tclQuote(fg)] + (["-activeforeground", tclQuote(fg)] if active else [])
  if bg != None:
    opts += ["-background", tclQuote(bg)] + (["-activebackground", tclQuote(bg)] if active else [])
  if opts: win.bridge.send("%s configure %s" %(wid, " ".join(opts)))

def create(win, x:Element, row:int, col:int) -> str:
  '''create and grid [x], returns its widget id'''
  if x.kind == Kind.radio: wid = _createRadio(win, x, row)
  else: wid = _creators[x.kind](win, x)
  if x.kind != Kind.separator: configureColors(win, wid, x)
  sticky = {HORIZONTAL: " -sticky ew", VERTICAL: " -sticky ns"}.get(x.name, "") if x.kind == Kind.separator else ""
  win.bridge.send("grid %s -row %d -column %d -padx %d -pady %d%s" %(wid, row, col, x.pad[0], x.pad[1], sticky))
  return wid

_creators = {
  Kind.text: _createText, Kind.button: _createButton, Kind.checkBox: _createCheckBox,
  Kind.input: _createInput, Kind.slider: _createSlider, Kind.separator: _createSeparator
}
