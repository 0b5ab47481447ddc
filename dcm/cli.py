"""
DCM Command Line Interface (CLI)
================================

Interactive terminal front-end to the aggregator, run like:

    python -m dcm.cli --disasters 14_Climate-related_Disasters_Frequency_total.csv \
                      --carbon 13_Forest_and_Carbon.csv

Commands map onto the SelectionState mutations and the four view queries,
so every chart's data can be inspected without a browser.
"""

from __future__ import annotations
import argparse, shlex, sys

from loguru import logger

from .config import DashboardConfig
from .engine import Aggregator
from .loader import DataLoadError

HELP = """
Commands:
  help
  stats
  countries [prefix]
  show <ISO3>

  type "<Disaster Type>"         toggle a disaster type (e.g. type "Extreme temperature")
  select <ISO3> [<ISO3> ...]     restrict to countries (no argument = all)
  highlight <ISO3>
  unhighlight <ISO3>
  clear-highlights
  hover <ISO3> | hover -
  normalize                      toggle per-land-area values
  range <y1> <y2>                year range for means

  bars [n]                       stacked disaster bars
  scatter [n]                    carbon vs. disasters
  carbon [n]                     carbon stock bars
  series [ISO3]                  yearly disaster totals

  reload
  export csv|json "<path>"
  undo
  redo
  quit
"""

# Commands that change the selection (recorded + undoable)
_STATEFUL = ("type", "select", "highlight", "unhighlight", "clear-highlights", "hover", "normalize")


def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def main(argv=None):
    """Entry point for the DCM CLI.

    1) Load both tables
    2) Build the Dataset
    3) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(prog="dcm")
    ap.add_argument("--disasters", required=True, help="Path to the disaster frequency table (csv/xlsx)")
    ap.add_argument("--carbon", required=True, help="Path to the forest and carbon table (csv/xlsx)")
    ap.add_argument("--years", nargs=2, type=int, metavar=("Y1", "Y2"), help="Year range for means")
    ap.add_argument("--scale", type=float, help="Scale factor applied when normalizing by land area")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)
    _configure_logging(args.verbose)

    cfg = DashboardConfig(disaster_path=args.disasters, carbon_path=args.carbon)
    if args.years:
        cfg.set_year_range(*args.years)
    if args.scale is not None:
        cfg.area_scale_factor = args.scale
    engine = Aggregator(config=cfg)

    print("Loading dataset...")
    try:
        engine.reload_from_files()
    except DataLoadError as e:
        print(f"Error: {e}")
        return 1
    _print_stats(engine)
    print("Type 'help' for commands.")

    while True:
        try:
            line = input("dcm> ")
        except EOFError:
            break
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.lower() in ("quit", "exit"):
            break
        try:
            handle(engine, stripped)
        except Exception as e:
            print(f"Error: {e}")
    return 0


def handle(engine: Aggregator, line: str) -> None:
    """Handle one CLI command line."""
    parts = shlex.split(line)
    cmd = parts[0].lower()
    args = parts[1:]

    if cmd == "help":
        print(HELP)
        return

    if cmd in _STATEFUL:
        engine.history.push()
        try:
            _handle_state(engine, cmd, args)
        except Exception:
            engine.history.rollback()
            raise
        engine.command_log.append(line)
        return

    if cmd == "stats":
        _print_stats(engine)
        return

    if cmd == "countries":
        prefix = args[0].lower() if args else ""
        recs = {r.iso3: r.country for r in engine.dataset.disasters + engine.dataset.carbon}
        vals = sorted((name, iso3) for iso3, name in recs.items() if name.lower().startswith(prefix))
        for name, iso3 in vals[:50]:
            print(f"{iso3}  {name}")
        if len(vals) > 50:
            print(f"... ({len(vals)} total, showing 50)")
        return

    if cmd == "show":
        iso3 = args[0].upper()
        found = False
        for kind, rec in engine.country(iso3).items():
            if rec is None:
                continue
            found = True
            print(f"{rec.country} ({rec.iso3}) [{kind}]")
            for s in rec.indicators:
                yrs = s.years()
                span = f"{yrs[0]}-{yrs[-1]}" if yrs else "no data"
                print(f"  {s.type:<36} {span}")
        if not found:
            print(f"No data for {iso3}")
        return

    if cmd == "range":
        engine.config.set_year_range(int(args[0]), int(args[1]))
        print(f"Year range {engine.config.year_low}-{engine.config.year_high}")
        return

    if cmd == "bars":
        n = int(args[0]) if args else 10
        for b in engine.disaster_bars()[:n]:
            parts_ = " ".join(f"{t}={v:g}" for t, v in b.values)
            print(f"{_mark(b.highlighted)}{b.iso3} {b.country}: total={b.total:g} | {parts_}")
        return

    if cmd == "scatter":
        n = int(args[0]) if args else 10
        for p in engine.carbon_disaster_scatter()[:n]:
            print(f"{_mark(p.highlighted)}{p.iso3} {p.country}: carbon={p.carbon:g} disasters={p.disasters:g}{' <' if p.hovered else ''}")
        return

    if cmd == "carbon":
        n = int(args[0]) if args else 10
        for b in engine.carbon_stock_bars()[:n]:
            print(f"{_mark(b.highlighted)}{b.iso3} {b.country}: carbon={b.carbon_stock:g} forest_extent_index={b.forest_extent_index:g}")
        return

    if cmd == "series":
        want = args[0].upper() if args else "ALL"
        for ts in engine.disaster_time_series():
            if ts.iso3 == want:
                print(f"{ts.country} ({ts.iso3})")
                for yv in ts.points:
                    print(f"  {yv.year}: {yv.value:g}")
                return
        print(f"No series for {want}")
        return

    if cmd == "reload":
        engine.reload_from_files()
        _print_stats(engine)
        return

    if cmd == "export":
        # export <csv|json> "<path>"
        if len(args) < 2:
            print('Usage: export csv "out.csv"  OR  export json "out.json"')
            return
        fmt, out_path = args[0].lower(), args[1]
        if fmt == "csv":
            engine.export_csv(out_path)
        elif fmt == "json":
            engine.export_json(out_path)
        else:
            raise ValueError("Unknown export format. Use: csv or json")
        print(f"Exported {fmt.upper()} to {out_path}")
        return

    if cmd == "undo":
        print("Undone." if engine.history.undo() else "Nothing to undo.")
        return

    if cmd == "redo":
        print("Redone." if engine.history.redo() else "Nothing to redo.")
        return

    print("Unknown command. Type 'help'.")


def _handle_state(engine: Aggregator, cmd: str, args) -> None:
    s = engine.state
    if cmd == "type":
        t = " ".join(args)
        on = s.toggle_disaster_type(t)
        print(f"{t}: {'on' if on else 'off'}. Selected: {', '.join(s.ordered_types()) or '(none)'}")
    elif cmd == "select":
        s.set_selected_countries(a.upper() for a in args)
        print(f"Selected countries: {', '.join(sorted(s.selected_countries)) or 'all'}")
    elif cmd == "highlight":
        s.add_highlighted_country(args[0].upper())
        print(f"Highlighted: {', '.join(sorted(s.highlighted_countries))}")
    elif cmd == "unhighlight":
        s.remove_highlighted_country(args[0].upper())
        print(f"Highlighted: {', '.join(sorted(s.highlighted_countries)) or '(none)'}")
    elif cmd == "clear-highlights":
        s.reset_highlighted_countries()
        print("Highlights cleared.")
    elif cmd == "hover":
        if not args or args[0] == "-":
            s.clear_mouse_over_country()
        else:
            s.set_mouse_over_country(args[0].upper())
        print(f"Hover: {s.mouse_over_country or '(none)'}")
    elif cmd == "normalize":
        print(f"Normalize by land area: {'on' if s.toggle_normalize() else 'off'}")


def _print_stats(engine: Aggregator) -> None:
    ds = engine.dataset
    cfg = engine.config
    print(f"Disaster countries: {len(ds.disasters)} | Carbon countries: {len(ds.carbon)} | "
          f"Years: {cfg.year_low}-{cfg.year_high} | Normalize: {'on' if engine.state.normalize else 'off'}")


def _mark(highlighted: bool) -> str:
    return "* " if highlighted else "  "


if __name__ == "__main__":
    sys.exit(main())
