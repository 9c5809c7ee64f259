import pytest

import wishgui.widgets as _
from wishgui import build
from wishgui.ui import Window
from wishgui.wish import Bridge

def layout():
  return [
    [_.text("What's your name?")],                  # .r1
    [_.input(), _.input("placeholder")],            # .r2 .r3
    [_.slider(range=range(0, 10+1))],               # .r4
    [_.button("Ok"), _.checkBox("Agree")],          # .r5 .r6 (::var7)
    [_.radio("Radior"), _.radio("Mr_Sandman")],     # .r8 (::var9) .r10
    [_.separator()]                                 # .r11
  ]

@pytest.fixture
def win(bridge, fake):
  w = build("Window Title", layout(), bridge=bridge)
  fake.values = {".r2": "alice", ".r3": "bob", ".r4": "4"}
  return w

def sentAfterInit(bridge, fake):
  bridge.flush()
  return [cmd for cmd in fake.commands if not cmd.startswith(("catch", "proc", "wm protocol", "option", "fconfigure"))]

def test_build_commands(win, bridge, fake):
  sent = sentAfterInit(bridge, fake)
  assert sent[0] == 'wm title . "Window Title"'
  assert 'label .r1 -text "What\'s your name?"' in sent
  assert "grid .r1 -row 0 -column 0 -padx 10 -pady 4" in sent
  assert "text .r2 -width 10 -height 1" in sent
  assert '.r3 insert 1.0 "placeholder"' in sent
  assert "grid .r3 -row 1 -column 1 -padx 10 -pady 4" in sent
  assert "scale .r4 -orient horizontal -from 0 -to 10" in sent
  assert 'button .r5 -text "Ok" -command {puts "clicked .r5" ; flush stdout}' in sent
  assert 'checkbutton .r6 -text "Agree" -variable ::var7 -command {puts "cb1b-.r6-$::var7" ; flush stdout}' in sent
  assert "set ::var9 {}" in sent
  assert 'radiobutton .r10 -text "Mr_Sandman" -variable ::var9 -value "Mr_Sandman" -command {puts "cb1-.r10-$::var9" ; flush stdout}' in sent
  assert "ttk::separator .r11 -orient horizontal" in sent
  assert "grid .r11 -row 5 -column 0 -padx 10 -pady 4 -sticky ew" in sent

def test_registries_of_window(win):
  assert win.names == {".r5": "Ok", ".r6": "Agree", ".r8": "Radior", ".r10": "Mr_Sandman"}
  assert win.inputs == [".r2", ".r3"]
  assert win.sliders == [".r4"]

def test_read_click(win, fake):
  fake.emit("clicked .r5")
  assert win.read() == ("Ok", ["alice", "bob", "4"])

def test_read_checkbox(win, fake):
  fake.emit("cb1b-.r6-1")
  assert win.read() == ("Agree:::true", ["alice", "bob", "4"])
  fake.emit("cb1b-.r6-0")
  assert win.read() == ("Agree:::false", ["alice", "bob", "4"])

def test_read_radio(win, fake):
  fake.emit("cb1-.r10-Mr_Sandman")
  assert win.read()[0] == "Mr_Sandman"

def test_unknown_widget_is_none(win, fake):
  fake.emit("clicked .r99")
  assert win.read() == ("None", ["alice", "bob", "4"])
  fake.emit("cb1b-.r98-1")
  assert win.read()[0] == "None:::true"

def test_values_keep_layout_order_whatever_fired(win, fake):
  for line in ["clicked .r5", "cb1b-.r6-1", "cb1-.r8-Radior", "clicked .r42"]:
    fake.emit(line)
    (event, values) = win.read()
    assert values == ["alice", "bob", "4"]

def test_values_follow_edits(win, fake):
  fake.emit("clicked .r5")
  win.read()
  fake.values[".r2"] = "first line\nsecond \\ line"
  fake.emit("clicked .r5")
  assert win.read()[1][0] == "first line\nsecond \\ line"

def test_no_event(win, fake):
  fake.emit("some other output")
  assert win.read() == ("", [""])
  assert win.read(timeout=0.05) == ("", [""])

def test_quit(win, fake):
  fake.emit("exit")
  assert win.read() == ("Quit", [])
  assert win.read() == ("Quit", [])

def test_close_ends_program(win, fake):
  with pytest.raises(SystemExit): win.close()
  assert fake.returncode == -9
  assert Bridge.current == None

def test_handlers_fire_during_read(bridge, fake):
  got = []
  win = build("Handlers", [[_.button("Go", on_click=lambda: got.append("go")),
    _.checkBox("On", on_toggle=got.append), _.slider(on_slide=got.append)]], bridge=bridge)
  assert win.sliders == [".r4"]
  bridge.flush()
  assert "scale .r4 -orient horizontal -from 0 -to 100 -command {scale_value .r4}" in fake.commands
  events = []
  for line in ["clicked .r1", "cb1b-.r2-1", "cb1f-.r4-55"]:
    fake.emit(line)
    events.append(win.read()[0])
  assert events == ["Go", "On:::true", "None"]
  assert got == ["go", True, 55.0]

def test_sizes_and_colors(bridge, fake):
  build("", [[_.text("big", size=(20, 10)), _.button("b", size=(8, 2), color=("white", "red"), pad=(1, 2))],
    [_.input(size=(30, 5), color=(None, "gray")), _.separator(_.VERTICAL)]], bridge=bridge)
  sent = sentAfterInit(bridge, fake)
  assert 'label .r1 -text "big" -font [list [font actual TkDefaultFont -family] 15]' in sent
  assert 'button .r2 -text "b" -width 8 -height 2 -command {puts "clicked .r2" ; flush stdout}' in sent
  assert '.r2 configure -foreground "white" -activeforeground "white" -background "red" -activebackground "red"' in sent
  assert "grid .r2 -row 0 -column 1 -padx 1 -pady 2" in sent
  assert "text .r3 -width 30 -height 5" in sent
  assert '.r3 configure -background "gray"' in sent
  assert "grid .r4 -row 1 -column 1 -padx 10 -pady 4 -sticky ns" in sent
  assert not any(cmd.startswith("wm title") for cmd in sent)

def test_radio_groups(bridge, fake):
  win = Window(bridge)
  win.addRows([[_.radio("a", group="g")], [_.radio("b", group="g"), _.radio("c")]])
  bridge.flush()
  variables = [cmd.split("-variable ")[1].split()[0] for cmd in fake.commands if cmd.startswith("radiobutton")]
  assert variables == ["::var2", "::var2", "::var5"]

def test_bad_orientation():
  with pytest.raises(ValueError): _.slider("diagonal")

def test_timer_driven_window_uses_mainloop(bridge, fake):
  got = []
  build("Timers", [[_.button("Go", on_click=lambda: got.append("go"))]], bridge=bridge)
  timeout = bridge.after(10, lambda: got.append("tick"))
  for line in ["clicked %s" %timeout.key, "clicked .r1", "exit"]: fake.emit(line)
  bridge.mainloop()
  assert got == ["tick", "go"]
