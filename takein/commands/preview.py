import sys

from takein.errors import TakeinError


def run(args):
    """Print the destination the first pasted path would be taken into."""
    from takein.analyze.analyzer import preview_destination
    from .intake import config_from_args, read_input

    try:
        cfg = config_from_args(args)
        sample = preview_destination(read_input(args), cfg)
    except TakeinError as e:
        print(f"[takein] dest sample: {e}")
        sys.exit(1)
    print(f"[takein] dest sample: {sample}")
