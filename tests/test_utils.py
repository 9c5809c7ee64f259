import threading

import pytest

from wishgui.utils import IdGen, CallbackRegistry, FutureResult

def test_ids_are_tk_paths():
  ids = IdGen()
  assert ids.nextId(".") == ".r1"
  assert ids.nextId(".r1") == ".r1.r2"
  assert ids.nextVariable() == "::var3"
  assert ids.nextId("") == ".r4"
  assert ids.current() == 4

def test_ids_never_repeat_across_threads():
  ids = IdGen()
  got = []
  lock = threading.Lock()
  def take():
    mine = [ids.nextId() for _ in range(500)] + [ids.nextVariable() for _ in range(500)]
    with lock: got.extend(mine)
  threads = [threading.Thread(target=take) for _ in range(8)]
  for t in threads: t.start()
  for t in threads: t.join()
  assert len(got) == 8000
  assert len(set(int(s.rsplit("r", 1)[-1]) for s in got)) == 8000
  assert ids.current() == 8000

def test_fired_handler_stays_armed():
  calls = []
  reg = CallbackRegistry()
  reg.register(".r1", lambda: calls.append(1))
  assert reg.fire(".r1")
  assert reg.fire(".r1")
  assert calls == [1, 1]
  assert ".r1" in reg

def test_after_key_fires_once():
  calls = []
  reg = CallbackRegistry()
  reg.register("after5", lambda: calls.append(1))
  assert reg.fire("after5")
  assert "after5" not in reg
  assert not reg.fire("after5")
  assert calls == [1]

def test_explicit_once_flag():
  reg = CallbackRegistry()
  reg.register(".r2", lambda: None, once=True)
  reg.register("after7", lambda: None, once=False)
  reg.fire(".r2"); reg.fire("after7")
  assert ".r2" not in reg
  assert "after7" in reg

def test_replacement_made_while_firing_wins():
  reg = CallbackRegistry()
  calls = []
  def second(): calls.append("second")
  def first():
    calls.append("first")
    reg.register(".r1", second)
  reg.register(".r1", first)
  reg.fire(".r1"); reg.fire(".r1")
  assert calls == ["first", "second"]

def test_handler_error_is_printed_and_handler_kept(capsys):
  reg = CallbackRegistry()
  def broken(value): raise ValueError("bad %s" %value)
  reg.register(".r1", broken)
  assert reg.fire(".r1", True)
  err = capsys.readouterr().err
  assert "Traceback" in err
  assert "ValueError: bad True" in err
  assert ".r1" in reg

def test_take_removes():
  reg = CallbackRegistry()
  op = lambda: None
  reg.register(".r1", op)
  assert reg.take(".r1") is op
  assert reg.take(".r1") is None
  assert len(reg) == 0

def test_future_result():
  future = FutureResult()
  threading.Timer(0.01, future.setValue, (3,)).start()
  assert future.getValue(timeout=5) == 3
  failed = FutureResult()
  failed.setError(KeyError("k"))
  with pytest.raises(KeyError): failed.getValue()
  with pytest.raises(TimeoutError): FutureResult().getValue(timeout=0.01)
