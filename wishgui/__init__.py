'''
wishgui drives a Tcl/Tk "wish" interpreter as a subprocess, over a line protocol on its stdin/stdout.
use build(title, layout) / Window.read() from wishgui.ui ; text()/button()/input()/... from wishgui.widgets

  import wishgui.widgets as _
  from wishgui import build

  win = build("Window Title", [[_.text("What's your name?")], [_.input()], [_.button("Ok")]])
  (event, values) = win.read()
  print("Hello %s!" %values[0])
  win.close()

Common knowledges on the bridge:
- there's one wish per program: start() twice is a StartupError, Bridge.current is the running one
- commands are queued, a writer thread sends them in order; send() never waits for wish
- a query (sendAndReply) reads the next line as its answer, so only one thread should read
- read() re-queries every input and slider, values keep the layout order whatever widget fired
- unknown widget ids read as "None", closing the window reads as "Quit"
- close() kills wish and exits the program; Bridge.stop() only kills wish

Low-level API, for commands not wrapped here:
- every widget has an id like .r3, Bridge.nextId(parent) makes new ones, nextVariable() gives ::var4
- Bridge.send(tcl) / Bridge.sendAndReply("puts [...] ; flush stdout")
- Bridge.addCallback0/Bool/Float/Event(id, op) handlers run from Bridge.poll(), they stay armed after firing
- Bridge.after(msec, op) runs once, Bridge.bind(id, "<Button-1>", op) gets a TkEvent
'''

__all__ = ["ui", "widgets", "wish", "protocol", "utils"]
from .utils import WishError, StartupError, ProtocolError, ReadTimeout, Cancelled, WriteError, BridgeClosed
from .wish import Bridge, start, traceWith
from .ui import Window, build
