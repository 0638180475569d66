"""
intake command: analyze pasted paths, show the plan, then link or copy.

Mirrors the interactive flow Analyze -> (Cancel | Run) -> OK, with the
confirmation prompt standing in for the Run/Cancel choice.
"""

import sys
from pathlib import Path

from takein.errors import TakeinError


def read_input(args) -> str:
    """Read paths from --input FILE, or stdin when it is "-" or unset."""
    source = getattr(args, "input", None)
    if source and source != "-":
        return Path(source).read_text(encoding="utf-8")
    if sys.stdin.isatty():
        print("[takein] paste paths to take in, then press Ctrl-D:")
    return sys.stdin.read()


def config_from_args(args):
    """Load saved settings and apply per-run overrides from the flags."""
    from takein.state.io import load_config

    cfg = load_config()
    overrides = {
        "path_separators": getattr(args, "path_seps", None),
        "path_keys": getattr(args, "path_keys", None),
        "name_separators": getattr(args, "name_seps", None),
        "name_keys": getattr(args, "name_keys", None),
        "destination": getattr(args, "dest", None),
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(cfg, key, value)
    return cfg


def _confirm(method: str) -> bool:
    if not sys.stdin.isatty():
        # stdin already consumed by the path list
        print("[takein] not a terminal; pass --yes to run without confirmation")
        return False
    answer = input(f"[takein] {method} files now? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def run(args):
    from takein.execute.journaling import get_journal
    from takein.report import plan_summary, render_materialization, render_plan
    from takein.session import IntakeSession
    from takein.state.io import get_config_dir, save_config, write_plan_csv

    try:
        cfg = config_from_args(args)
        text = read_input(args)
        session = IntakeSession(cfg, journal=get_journal(get_config_dir()))

        print("[takein] analyzing paths...")
        plan = session.analyze(text)
    except TakeinError as e:
        print(f"[takein] error: {e}")
        sys.exit(1)

    print("")
    print(render_plan(plan))
    summary = plan_summary(plan)
    print(
        f"[takein] {summary['sources']} sources -> {summary['destinations']} destinations "
        f"({summary['new_destinations']} to be created), "
        f"{summary['invalid']} invalid, {summary['not_found']} not found"
    )

    if args.export_plan:
        write_plan_csv(plan, Path(args.export_plan))

    if args.dry_run:
        session.revert()
        print("[takein] dry run - nothing was taken in")
        return

    if not plan.groups:
        session.revert()
        print("[takein] nothing to take in")
        return

    if not args.yes and not _confirm(args.method):
        session.revert()
        print("[takein] cancelled - modify your paths and analyze again")
        return

    try:
        report = session.run(args.method)
    except TakeinError as e:
        print(f"[takein] error: {e}")
        sys.exit(1)

    print("")
    print(render_materialization(report))

    # save the latest settings
    config_path = save_config(cfg)
    print(f"[takein] settings saved -> {config_path}")
    session.accept()
