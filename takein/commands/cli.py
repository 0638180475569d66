import argparse
import logging
import sys
from pathlib import Path

from takein.schemas import METHODS


def setup_logging(log_file: Path, verbose: bool = False):
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handlers = [logging.FileHandler(log_file, encoding="utf-8")]
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )


def _add_input_args(p):
    p.add_argument("--input", "-i", help="File holding the pasted paths, one per line (default: stdin)")
    p.add_argument("--path-seps", help='Separators splitting the full path (e.g. "/")')
    p.add_argument("--path-keys", help='Keys for the path fragments (e.g. "_ _ _ _ SHOW ... NAME")')
    p.add_argument("--name-seps", help='Separators splitting the base name (e.g. ". _")')
    p.add_argument("--name-keys", help='Keys for the name fragments (e.g. "SEQ SCENE SHOT PART VER ...")')
    p.add_argument("--dest", help="Destination pattern, with $NAME or ${NAME} variables")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="takein", description="Takein - take pasted paths into place")
    p.add_argument("--verbose", "-v", action="store_true", help="Log details to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    # INTAKE
    p_intake = sub.add_parser("intake", help="Analyze pasted paths, then link or copy them into place")
    _add_input_args(p_intake)
    p_intake.add_argument("--method", choices=METHODS, default="link", help="Hard link (default) or copy")
    p_intake.add_argument("--yes", "-y", action="store_true", help="Run without asking for confirmation")
    p_intake.add_argument("--dry-run", action="store_true", help="Only analyze and print the plan")
    p_intake.add_argument("--export-plan", help="Also write the plan to this CSV file")

    # PREVIEW
    p_preview = sub.add_parser("preview", help="Show the destination of the first pasted path")
    _add_input_args(p_preview)

    # CONFIG
    p_config = sub.add_parser("config", help="Show the saved settings")
    p_config.add_argument("--init", action="store_true", help="Overwrite the saved settings with the defaults")

    # HISTORY
    p_history = sub.add_parser("history", help="Summarize the journal of the last run")
    p_history.add_argument("--all", action="store_true", help="Summarize every run in the journal")

    return p


def main(argv=None):
    args = build_parser().parse_args(argv)

    from takein.state.io import get_config_dir
    setup_logging(get_config_dir() / "takein.log", verbose=args.verbose)

    # Route to appropriate module
    if args.cmd == "intake":
        from .intake import run as intake_run
        intake_run(args)
    elif args.cmd == "preview":
        from .preview import run as preview_run
        preview_run(args)
    elif args.cmd == "config":
        from .show_config import run as config_run
        config_run(args)
    elif args.cmd == "history":
        from .history import run as history_run
        history_run(args)


if __name__ == "__main__":
    main()
