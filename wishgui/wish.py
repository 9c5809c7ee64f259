'''
The wish process bridge: one [Bridge] owns the subprocess, a writer thread for its stdin and a reader thread for its stdout.

  bridge = start()      # or start("tclkit"), start(["wish8.6", "-name", "demo"])
  bridge.send("label .r1 -text hello ; grid .r1")
  bridge.sendAndReply("puts [winfo screenwidth .] ; flush stdout")
  bridge.mainloop()

- at most one bridge per process, [Bridge.current]
- [send] only enqueues, the writer keeps program order
- [sendAndReply] takes the very next line as the reply, there's no correlation id
- [poll] is the single decode step: every line is decoded once, dispatched to the callback registries, and returned
- closing the main window makes wish print "exit": the bridge stops and reads give "Quit" from then on
'''
import logging
import os
import queue
import subprocess
import sys
import threading
import time

from typing import Callable, Optional

from .utils import ids as defaultIds, IdGen, CallbackRegistry, FutureResult, ROOT
from .utils import WishError, StartupError, ProtocolError, ReadTimeout, Cancelled, WriteError, BridgeClosed
from .utils import MSG_BRIDGE_RUNNING, MSG_START_FAILED, MSG_BRIDGE_CLOSED, MSG_NO_REPLY, MSG_WISH_DIED, MSG_READ_TIMEOUT, MSG_CANCELLED, MSG_QUERY_FAILED
from .protocol import decode, logicalId, EVENT_FIELDS, EXIT
from .protocol import Clicked, Toggled, Slid, Callback, BoundEvent, FontChosen, Exit, Unrecognized

log = logging.getLogger(__name__)

DEFAULT_WISH = "wish"
ENV_WISH = "WISHGUI_WISH"
ENV_TRACE = "WISHGUI_TRACE"
INIT_PACKAGES = ("Plotchart",)
CANCEL_POLL_SEC = 0.05
EXIT_WAIT_SEC = 2
FONT_KEY = "font"

# close button prints 'exit', so python can close connection
PROC_CLOSE_TRAP = "wm protocol . WM_DELETE_WINDOW { puts stdout {exit} ; flush stdout }"
PROC_FONT_CHOICE = """proc font_choice {w font args} {
  set res {font }
  append res [font actual $font]
  puts $res
  flush stdout
}"""
PROC_SCALE_VALUE = """proc scale_value {w value args} {
  puts cb1f-$w-$value
  flush stdout
}"""

def initCommands(packages=INIT_PACKAGES):
  cmds = ["catch {package require %s}" %pkg for pkg in packages]
  cmds += [PROC_CLOSE_TRAP, "option add *tearOff 0", PROC_FONT_CHOICE, PROC_SCALE_VALUE,
    "fconfigure stdout -encoding utf-8", "fconfigure stdin -encoding utf-8"]
  return cmds

_STOP = object()
_EOF = object()

class CommandChannel:
  '''the only writer of wish's stdin. [send] enqueues, a daemon thread writes lines in FIFO order'''
  def __init__(self, stream, encoding="utf-8", on_failure:Optional[Callable[[WriteError], None]]=None):
    self._stream = stream
    self._encoding = encoding
    self.on_failure = on_failure
    self._queue = queue.Queue() # str | FutureResult | _STOP
    self._closed = False
    self.failure:Optional[WriteError] = None
    self._thread = threading.Thread(target=self._drain, name="wish-writer", daemon=True)
    self._thread.start()

  def send(self, command:str):
    if self.failure != None: raise self.failure
    if self._closed: raise BridgeClosed(MSG_BRIDGE_CLOSED)
    self._queue.put(command)
  def flush(self, timeout=None):
    '''wait until every command sent so far is written'''
    future = FutureResult()
    self._queue.put(future)
    return future.getValue(timeout)
  def close(self):
    if self._closed: return
    self._closed = True
    self._queue.put(_STOP)
  @property
  def isClosed(self): return self._closed

  def _drain(self):
    while True:
      item = self._queue.get()
      if item is _STOP: break
      if isinstance(item, FutureResult):
        if self.failure != None: item.setError(self.failure)
        else: item.setValue(None)
        continue
      if self.failure != None: continue # pipe is gone, nothing more can be delivered
      try:
        self._stream.write((item + "\n").encode(self._encoding))
        self._stream.flush()
      except (OSError, ValueError) as ex:
        failure = WriteError("writing to wish failed: %s" %ex)
        failure.__cause__ = ex
        self.failure = failure
        log.error("wish stdin failed, the bridge can no longer control wish: %s", ex)
        if self.on_failure != None: self.on_failure(failure)

class LineReader:
  '''the only reader of wish's stdout, lines are queued so a read can time out or be cancelled'''
  def __init__(self, stream):
    self._stream = stream
    self._lines = queue.Queue() # bytes | WishError | _EOF
    self._eof = False
    self._thread = threading.Thread(target=self._pump, name="wish-reader", daemon=True)
    self._thread.start()

  def _pump(self):
    try:
      while True:
        raw = self._stream.readline()
        if not raw: break
        self._lines.put(raw)
    except (OSError, ValueError) as ex: log.debug("wish stdout closed: %s", ex)
    finally: self._lines.put(_EOF)

  def interrupt(self, error:WishError):
    '''make the pending (or next) [readLine] raise [error]'''
    self._lines.put(error)

  @property
  def isAtEnd(self): return self._eof
  def readLine(self, timeout:Optional[float]=None, cancel:Optional[threading.Event]=None):
    '''next line, None at end of stream. raise [ReadTimeout] / [Cancelled], or the error given to [interrupt]'''
    if self._eof: return None
    deadline = None if timeout == None else time.monotonic() + timeout
    while True:
      if cancel != None and cancel.is_set(): raise Cancelled(MSG_CANCELLED)
      wait = CANCEL_POLL_SEC if cancel != None else None
      if deadline != None:
        remaining = max(0, deadline - time.monotonic())
        wait = remaining if wait == None else min(wait, remaining)
      try: item = self._lines.get(timeout=wait) # a queued line is taken even when [timeout] is 0
      except queue.Empty:
        if deadline != None and time.monotonic() >= deadline: raise ReadTimeout(MSG_READ_TIMEOUT %timeout)
        continue
      if item is _EOF:
        self._eof = True
        return None
      if isinstance(item, WishError): raise item
      return item

class Bridge:
  '''a running wish: send commands, ask for values, read events. Use [start] to create'''
  current:"Optional[Bridge]" = None
  _start_lock = threading.Lock()

  def __init__(self, process, name=DEFAULT_WISH, ids:Optional[IdGen]=None, trace=False, read_timeout:Optional[float]=None):
    self.process = process
    self.name = name
    self.ids = ids or defaultIds
    self.trace = trace
    self.read_timeout = read_timeout
    self.root = ROOT
    self.callbacks0 = CallbackRegistry("callback0")
    self.callbacksBool = CallbackRegistry("callback1bool")
    self.callbacksFloat = CallbackRegistry("callback1float")
    self.callbacksEvent = CallbackRegistry("callback1event")
    self.callbacksFont = CallbackRegistry("callback1font")
    self._reader = LineReader(process.stdout)
    self._channel = CommandChannel(process.stdin, on_failure=self._reader.interrupt)
    self._closed:Optional[WishError] = None # why reads fail after the bridge is done
    self._exited = False

  @classmethod
  def isRunning(cls) -> bool:
    return cls.current != None and not cls.current.isClosed
  @property
  def isClosed(self): return self._closed != None or self._exited
  def _log(self, fmt, *args):
    log.log(logging.INFO if self.trace else logging.DEBUG, fmt, *args)

  # -- ids
  def nextId(self, parent:str=ROOT) -> str: return self.ids.nextId(parent)
  def nextVariable(self) -> str: return self.ids.nextVariable()

  # -- commands
  def send(self, command:str):
    '''Sends a tcl command to wish, which must be valid tcl'''
    if self.isClosed: raise BridgeClosed(MSG_BRIDGE_CLOSED)
    self._log("wish: %s", command)
    self._channel.send(command)
  def flush(self, timeout=None): self._channel.flush(timeout)

  def _readLine(self, timeout, cancel=None):
    if self._channel.failure != None: raise self._channel.failure
    return self._reader.readLine(self.read_timeout if timeout == None else timeout, cancel)

  def sendAndReply(self, command:str, timeout:Optional[float]=None) -> str:
    '''
    Sends a tcl command that prints one line, returns that line trimmed.
    A query without its reply ends the bridge, a late reply would answer the next query
    '''
    self.send(command)
    try:
      raw = self._readLine(timeout)
      if raw == None: raise ProtocolError(MSG_NO_REPLY %command)
      try: reply = raw.decode("utf-8").strip()
      except UnicodeDecodeError as ex: raise ProtocolError(MSG_NO_REPLY %command) from ex
    except ProtocolError as ex:
      reason = ProtocolError(MSG_QUERY_FAILED %(command, ex))
      reason.__cause__ = ex
      self._shutdown(reason)
      raise
    self._log("---: %s", reply)
    return reply

  # -- callbacks
  def addCallback0(self, wid:str, op:Callable[[], None], once=None): self.callbacks0.register(wid, op, once)
  def addCallbackBool(self, wid:str, op:Callable[[bool], None]): self.callbacksBool.register(wid, op)
  def addCallbackFloat(self, wid:str, op:Callable[[float], None]): self.callbacksFloat.register(wid, op)
  def addCallbackEvent(self, wid:str, pattern:str, op): self.callbacksEvent.register(wid+pattern, op)
  def addCallbackFont(self, op): self.callbacksFont.register(FONT_KEY, op)

  def after(self, msec:int, op:Callable[[], None]) -> "Timeout": return Timeout(self, msec, op)
  def bind(self, wid:str, pattern:str, op):
    '''calls op(TkEvent) on [pattern] like <Button-1>, <Key>; wid may also be a bind tag such as "all"'''
    key = wid+pattern
    self.addCallbackEvent(wid, pattern, op)
    self.send('bind %s %s {puts "event %s %s" ; flush stdout}' %(wid, pattern, key, EVENT_FIELDS))
  def chooseFont(self, op, parent:str=ROOT):
    '''shows the font chooser, op(TkFont) on each choice'''
    self.addCallbackFont(op)
    self.send("tk fontchooser configure -parent %s -command {font_choice %s}" %(parent, parent))
    self.send("tk fontchooser show")

  def dispatch(self, event) -> bool:
    '''fire the registered handler of a decoded event, False if there is none'''
    if isinstance(event, Clicked): return self.callbacks0.fire(event.wid)
    if isinstance(event, Toggled): return self.callbacksBool.fire(event.wid, event.value)
    if isinstance(event, Slid): return self.callbacksFloat.fire(event.wid, event.value)
    if isinstance(event, Callback): return self.callbacks0.fire(event.wid)
    if isinstance(event, BoundEvent): return self.callbacksEvent.fire(event.key, event.event)
    if isinstance(event, FontChosen): return self.callbacksFont.fire(FONT_KEY, event.font)
    return False

  # -- event loop
  def poll(self, timeout:Optional[float]=None, cancel:Optional[threading.Event]=None):
    '''read and decode one line, run its handler, return the decoded event'''
    if self._exited: return EXIT
    if self._closed != None: raise self._closed
    raw = self._readLine(timeout, cancel)
    if raw == None:
      try: code = self.process.wait(EXIT_WAIT_SEC)
      except subprocess.TimeoutExpired: code = None
      self._shutdown(ProtocolError(MSG_WISH_DIED %code))
      raise self._closed
    event = decode(raw)
    if isinstance(event, Unrecognized):
      log.debug("ignored line from wish: %r", event.line)
      return event
    self._log("---: %s", raw.decode("utf-8", "replace").rstrip())
    if isinstance(event, Exit):
      self._exited = True
      self.stop()
      return event
    self.dispatch(event)
    return event
  def nextEvent(self, timeout:Optional[float]=None, cancel:Optional[threading.Event]=None) -> Optional[str]:
    '''one read: widget id, "<id>-cbsep-true/false" or "Quit". None if the line carried no event'''
    return logicalId(self.poll(timeout, cancel))
  def mainloop(self):
    '''Loops while GUI events occur, until the window is closed'''
    while not isinstance(self.poll(), Exit): pass

  # -- lifecycle
  def _shutdown(self, reason:WishError):
    if self._closed == None: self._closed = reason
    self._channel.close()
    if self.process.poll() == None:
      self.process.kill()
      self.process.wait()
    with Bridge._start_lock:
      if Bridge.current is self: Bridge.current = None
  def stop(self):
    '''kill wish, keep this program running'''
    self._shutdown(BridgeClosed(MSG_BRIDGE_CLOSED))
  def terminate(self, exit_program=True):
    '''Used to cleanly end the wish process and current python program'''
    self.stop()
    if exit_program: sys.exit(0)

class Timeout:
  '''runs op once after [msec], unless cancelled'''
  def __init__(self, bridge:Bridge, msec:int, op):
    self.bridge = bridge
    self.op = op
    self.key = "after%d" %bridge.ids.nextNumber()
    bridge.addCallback0(self.key, op, once=True)
    bridge.send("set ::%s [after %d {puts {clicked %s} ; flush stdout}]" %(self.key, msec, self.key))

  def cancel(self):
    """Prevent this timeout from running as scheduled."""
    if self.bridge.callbacks0.take(self.key) == None: return
    self.bridge.send("after cancel $::%s" %self.key)

def enableTrace():
  '''print the wish traffic to stdout, unless the wishgui logger is already set up'''
  logger = logging.getLogger("wishgui")
  if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
  if logger.level == logging.NOTSET or logger.level > logging.INFO: logger.setLevel(logging.INFO)

def start(wish=None, trace:Optional[bool]=None, read_timeout:Optional[float]=None, ids:Optional[IdGen]=None,
    spawn=subprocess.Popen) -> Bridge:
  '''
  Creates a connection with the given wish/tclkit program (default "wish" or $WISHGUI_WISH).
  raise [StartupError] when the program can't start, or a bridge is already running
  '''
  wish = wish or os.environ.get(ENV_WISH) or DEFAULT_WISH
  argv = [wish] if isinstance(wish, str) else list(wish)
  if trace == None: trace = os.environ.get(ENV_TRACE, "") not in ("", "0")
  with Bridge._start_lock:
    if Bridge.isRunning(): raise StartupError(MSG_BRIDGE_RUNNING %argv[0])
    try: process = spawn(argv, stdin=subprocess.PIPE, stdout=subprocess.PIPE)
    except (OSError, ValueError) as ex: raise StartupError(MSG_START_FAILED %argv[0]) from ex
    bridge = Bridge(process, argv[0], ids, trace, read_timeout)
    Bridge.current = bridge
  if trace: enableTrace()
  for cmd in initCommands(): bridge.send(cmd)
  return bridge

def traceWith(wish=None, **kwargs) -> Bridge:
  '''[start] with the wish traffic shown on stdout'''
  return start(wish, trace=True, **kwargs)
