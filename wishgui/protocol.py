'''
Line protocol spoken with wish. Outbound lines are Tcl commands, inbound lines are one of:

- clicked <id>             button commands, [after] timers
- cb1b-<id>-<0|1>          checkbutton toggles
- cb1f-<id>-<value>        scale moves (see the scale_value proc)
- cb1-<id>[-<arg>]         generic one-argument commands
- event <key> <fields...>  [bind] scripts, key is widget id + pattern
- font <font actual ...>   font chooser result (see the font_choice proc)
- exit                     the window close button

anything else is [Unrecognized], [decode] never raises.
'''
import re
from typing import NamedTuple, Optional, List

QUIT = "Quit"
CB_SEP = "-cbsep-"

class TkEvent(NamedTuple("TkEvent", [("x", int), ("y", int), ("root_x", int), ("root_y", int),
    ("height", int), ("width", int), ("key_code", int), ("key_symbol", str), ("mouse_wheel_delta", int), ("char", str)])):
  '''fields of a [bind] %-substitution, 0 / "" where Tk gives "??"'''
class TkFont(NamedTuple("TkFont", [("family", str), ("size", int), ("weight", str), ("slant", str),
    ("underline", bool), ("overstrike", bool)])):
  def __str__(self):
    return "{%s} %d %s %s%s%s" %(self.family, self.size, self.weight, self.slant,
      " underline" if self.underline else "", " overstrike" if self.overstrike else "")

class Clicked(NamedTuple("Clicked", [("wid", str)])): pass
class Toggled(NamedTuple("Toggled", [("wid", str), ("value", bool)])): pass
class Slid(NamedTuple("Slid", [("wid", str), ("value", float)])): pass
class Callback(NamedTuple("Callback", [("wid", str), ("arg", Optional[str])])): pass
class BoundEvent(NamedTuple("BoundEvent", [("key", str), ("event", TkEvent)])): pass
class FontChosen(NamedTuple("FontChosen", [("font", TkFont)])): pass
class Unrecognized(NamedTuple("Unrecognized", [("line", str)])): pass
class Exit(NamedTuple("Exit", [])):
  def __repr__(self): return "Exit"
EXIT = Exit()

EVENT_FIELDS = "%x %y %X %Y %h %w %k %K %D %A" # %A last: may be empty or a space

def splitItems(text:str) -> List[str]:
  '''Splits tcl string where items can be single words or grouped in {..}'''
  result = []
  remaining = text.strip()
  while remaining:
    start = remaining.find("{")
    if start == -1:
      result.extend(remaining.split()); break
    result.extend(remaining[:start].split())
    end = remaining.find("}", start)
    if end == -1: break # unbalanced, keep what we have
    result.append(remaining[start+1:end])
    remaining = remaining[end+1:].strip()
  return result

def _int(s, default=0):
  try: return int(s)
  except ValueError: return default

def parseFont(text:str) -> TkFont:
  '''from [font actual] output: -family {DejaVu Sans} -size 12 -weight normal ...'''
  items = splitItems(text)
  opts = dict(zip(items[0::2], items[1::2]))
  return TkFont(family=opts.get("-family", ""), size=_int(opts.get("-size", "0")),
    weight=opts.get("-weight", "normal"), slant=opts.get("-slant", "roman"),
    underline=opts.get("-underline", "0") == "1", overstrike=opts.get("-overstrike", "0") == "1")

def parseEvent(fields:List[str]) -> TkEvent:
  fields = fields + [""] * (10 - len(fields))
  (x, y, rx, ry, h, w, k, ksym, delta, char) = fields[:10]
  return TkEvent(_int(x), _int(y), _int(rx), _int(ry), _int(h), _int(w), _int(k),
    "" if ksym == "??" else ksym, _int(delta), "" if char == "??" else char)

def decode(line):
  '''classify one line read from wish'''
  if isinstance(line, bytes):
    try: line = line.decode("utf-8")
    except UnicodeDecodeError: return Unrecognized(repr(line))
  text = line.rstrip("\r\n")
  if text.startswith("clicked"):
    wid = text[len("clicked"):].strip()
    return Clicked(wid) if wid else Unrecognized(text)
  if text.startswith("cb1b"):
    parts = text.split("-")
    if len(parts) < 3 or not parts[1].strip(): return Unrecognized(text)
    return Toggled(parts[1].strip(), parts[2].strip() == "1")
  if text.startswith("cb1"):
    parts = text.split("-", 2) # values like -5.0 keep their sign
    if len(parts) < 2 or not parts[1].strip(): return Unrecognized(text)
    (wid, arg) = (parts[1].strip(), parts[2].strip() if len(parts) > 2 else None)
    if text.startswith("cb1f") and arg != None:
      try: return Slid(wid, float(arg))
      except ValueError: pass
    return Callback(wid, arg)
  if text.startswith("event "):
    parts = text.split(" ", 11)
    if len(parts) < 2 or not parts[1]: return Unrecognized(text)
    return BoundEvent(parts[1], parseEvent(parts[2:]))
  if text.startswith("font "):
    return FontChosen(parseFont(text[len("font "):]))
  if text.startswith("exit"): return EXIT
  return Unrecognized(text)

def logicalId(event) -> Optional[str]:
  '''the string [Window.read] resolves: widget id, id-cbsep-true/false or Quit. None for no event'''
  if isinstance(event, Toggled): return "%s%s%s" %(event.wid, CB_SEP, "true" if event.value else "false")
  if isinstance(event, (Clicked, Slid, Callback)): return event.wid
  if isinstance(event, Exit): return QUIT
  return None

_TCL_SPECIAL = re.compile(r'([\\"\[\]$])')
def tclQuote(text) -> str:
  '''any string as one double-quoted tcl word'''
  return '"%s"' %_TCL_SPECIAL.sub(r"\\\1", str(text)).replace("\n", "\\n")

_REPLY_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
def escapedGet(getter:str) -> str:
  '''puts a value on one line: backslash and newline escaped, see [unescapeReply]'''
  return r"puts [string map [list \\ {\\} \n {\n}] [%s]] ; flush stdout" %getter
def unescapeReply(reply:str) -> str:
  return _REPLY_ESCAPE.sub(lambda m: "\n" if m.group(1) == "n" else m.group(1), reply)
