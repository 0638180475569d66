import sys


def run(args):
    from takein.state.io import summarize_journal

    try:
        res = summarize_journal(last_run=not args.all)
    except (FileNotFoundError, ValueError) as e:
        print(f"[takein] {e}")
        sys.exit(1)

    print(f"[takein] journal: {res['journal_path']}")
    if res["run_id"]:
        print(f"[takein] run: {res['run_id']}")
    print(f"[takein] rows: {res['rows']}")
    for op, count in sorted(res["operations"].items()):
        print(f"[takein]   {op}: {count}")
