import threading
import traceback
import sys

from typing import Callable, Optional

MSG_BRIDGE_RUNNING = "do not start %s twice, a bridge is already running"
MSG_START_FAILED = "failed to start %s process"
MSG_BRIDGE_CLOSED = "wish bridge is closed"
MSG_NO_REPLY = "eval-wish failed to get a result for: %s"
MSG_WISH_DIED = "wish exited unexpectedly (code %s)"
MSG_READ_TIMEOUT = "no line from wish within %.3gs"
MSG_CANCELLED = "read cancelled"
MSG_QUERY_FAILED = "query %r got no reply (%s), replies can no longer be matched to queries"
ROOT = "."

class WishError(Exception):
  '''Reports an error in interacting with the wish program'''
class StartupError(WishError): pass
class ProtocolError(WishError): pass
class ReadTimeout(ProtocolError): pass
class Cancelled(WishError): pass
class WriteError(WishError): pass
class BridgeClosed(WriteError): pass

class IdGen:
  '''Tk widget / variable names from one locked counter: .r1, .r1.r2, ::var3'''
  def __init__(self):
    self._lock = threading.Lock()
    self._n = 0
  def nextNumber(self) -> int:
    with self._lock:
      self._n += 1
      return self._n
  def nextId(self, parent:str=ROOT) -> str:
    n = self.nextNumber()
    return ".r%d" %n if parent in (ROOT, "") else "%s.r%d" %(parent, n)
  def nextVariable(self) -> str: return "::var%d" %self.nextNumber()
  def current(self) -> int:
    with self._lock: return self._n

ids = IdGen() # process-wide default

ONE_SHOT_MARK = "after"

class CallbackRegistry:
  """Handlers keyed by widget id (or id+pattern). Use [register] / [take] or [fire]"""
  def __init__(self, name=""):
    self.name = name
    self._lock = threading.RLock()
    self._callbacks = {} # key: (op, once, stack_info)

  def register(self, key:str, op:Callable, once:Optional[bool]=None):
    """Arm [op] for [key], replacing any handler already there. [once] defaults to "after" in key"""
    stack_info = "".join(traceback.format_list(traceback.extract_stack()[:-1]))
    if once == None: once = ONE_SHOT_MARK in key
    with self._lock: self._callbacks[key] = (op, once, stack_info)

  def take(self, key:str) -> Optional[Callable]:
    '''remove and return the handler of [key], None if not armed'''
    with self._lock: entry = self._callbacks.pop(key, None)
    return entry[0] if entry != None else None
  def __contains__(self, key):
    with self._lock: return key in self._callbacks
  def __len__(self):
    with self._lock: return len(self._callbacks)
  def keys(self):
    with self._lock: return list(self._callbacks)
  def clear(self):
    with self._lock: self._callbacks.clear()

  def fire(self, key:str, *args) -> bool:
    """Run the handler of [key] and re-arm it, unless it is one-shot or it was replaced while running.
    Errors are printed, the handler stays armed. Returns False if nothing was armed"""
    with self._lock: entry = self._callbacks.pop(key, None)
    if entry == None: return False
    (op, once, stack_info) = entry
    try: op(*args)
    except Exception:
      # it's important that this does NOT call sys.stderr.write directly
      # because sys.stderr is None when running in windows, None.write is error
      (trace, rest) = traceback.format_exc().split("\n", 1)
      print(trace, file=sys.stderr)
      print(stack_info+rest, end="", file=sys.stderr)
    if not once:
      with self._lock: self._callbacks.setdefault(key, entry)
    return True

class FutureResult:
  '''pending operation result, use [getValue] / [getValueOr] to wait'''
  def __init__(self):
    self._cond = threading.Event()
    self._value = None
    self._error = None

  def setValue(self, value):
    self._value = value
    self._cond.set()

  def setError(self, exc):
    self._error = exc
    self._cond.set()

  @property
  def isDone(self): return self._cond.is_set()
  def getValueOr(self, on_error, timeout=None):
    if not self._cond.wait(timeout): raise TimeoutError("result not ready in %ss" %timeout)
    if self._error != None: on_error(self._error)
    return self._value
  def getValue(self, timeout=None): return self.getValueOr(FutureResult.rethrow, timeout)
  @staticmethod
  def rethrow(ex): raise ex
