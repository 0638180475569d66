import sys

import yaml

from takein.errors import ConfigError


def run(args):
    from takein.schemas import IntakeConfig
    from takein.state.io import get_config_path, load_config, save_config

    path = get_config_path()
    if args.init:
        save_config(IntakeConfig(), path)
        print(f"[takein] wrote default settings -> {path}")

    try:
        cfg = load_config(path)
    except ConfigError as e:
        print(f"[takein] error: {e}")
        sys.exit(1)

    source = path if path.exists() else "defaults"
    print(f"[takein] settings ({source}):")
    print(yaml.safe_dump(cfg.to_dict(), default_flow_style=False, sort_keys=False).rstrip())
