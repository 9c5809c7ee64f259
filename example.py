from argparse import ArgumentParser

from wishgui import build, traceWith, start
import wishgui.widgets as _

app = ArgumentParser(prog="wishgui-example", description="wishgui demo windows")
app.add_argument("demo", choices=["hello", "widgets"], nargs="?", default="widgets", help="window to show")
app.add_argument("-wish", type=str, default=None, help="wish/tclkit program to run")
app.add_argument("-trace", action="store_true", default=False, help="print the Tcl traffic")

def hello(bridge):
  win = build("Window Title", [
    [_.text("What's your name?")],
    [_.input()],
    [_.button("Ok")]
  ], bridge=bridge)
  (event, values) = win.read()
  if event != "Quit": print("Hello %s! Thanks for trying wishgui" %values[0])
  win.close()

def widgets(bridge):
  def tick(): print("5 seconds passed")
  win = build("Window Title", [
    [_.text("Hello World!")],
    [_.button("Test Button 1", color=(None, "red"), pad=(100, 10))],
    [_.button("Test Button 2", color=("red", None))],
    [_.separator()],
    [_.slider(on_slide=lambda v: print("slider at %s" %v))],
    [_.separator()],
    [_.checkBox("Hello")],
    [_.radio("Radior"), _.radio("Mr_Sandman")]
  ], bridge=bridge)
  bridge.after(5000, tick)
  bridge.bind(".", "<Key-Escape>", lambda ev: print("Escape at (%d, %d)" %(ev.x, ev.y)))
  while True:
    (event, values) = win.read()
    print(event, values)
    if event == "Quit": break
  win.close()

def main(args = None):
  cfg = app.parse_args(args)
  bridge = (traceWith if cfg.trace else start)(cfg.wish)
  {"hello": hello, "widgets": widgets}[cfg.demo](bridge)

if __name__ == "__main__": main()
