import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import yaml

from takein.errors import ConfigError
from takein.execute.journaling import get_journal_path
from takein.schemas import IntakeConfig, IntakePlan

CONFIG_FILE_NAME = "config.yaml"

PLAN_CSV_FIELDS = [
    "Status",
    "SourcePath",
    "DestDir",
    "IsDir",
    "FileCount",
    "DestExists",
    "Reason",
]


def get_config_dir() -> Path:
    """
    Return the takein config directory.

    $TAKEIN_CONFIG_DIR wins, then $XDG_CONFIG_HOME/takein, then
    ~/.config/takein.
    """
    override = os.environ.get("TAKEIN_CONFIG_DIR")
    if override:
        return Path(override)
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "takein"


def get_config_path(config_dir: Optional[Path] = None) -> Path:
    return (config_dir or get_config_dir()) / CONFIG_FILE_NAME


def load_config(path: Optional[Path] = None) -> IntakeConfig:
    """
    Load the saved settings, or the defaults when nothing was saved yet.
    """
    path = path or get_config_path()
    if not path.exists():
        return IntakeConfig()

    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"could not parse {path}: {e}") from e

    if data is None:
        return IntakeConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"expected a mapping in {path}, got {type(data).__name__}")
    return IntakeConfig.from_dict(data)


def save_config(config: IntakeConfig, path: Optional[Path] = None) -> Path:
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    return path


def plan_rows(plan: IntakePlan) -> List[Dict[str, Any]]:
    """One row per input path: not-found, invalid, then grouped sources."""
    rows: List[Dict[str, Any]] = []
    for src in plan.not_found:
        rows.append({"Status": "NotFound", "SourcePath": src})
    for inv in plan.invalid:
        rows.append({"Status": "Invalid", "SourcePath": inv.path, "Reason": inv.reason})
    for group in plan.sorted_groups():
        for src in group.sources:
            rows.append({
                "Status": "Planned",
                "SourcePath": src.path,
                "DestDir": group.dest_dir,
                "IsDir": src.is_dir,
                "FileCount": src.file_count_label if src.is_dir else "",
                "DestExists": group.exists,
            })
    return rows


def write_plan_csv(plan: IntakePlan, path: Path) -> Path:
    """
    Export the plan as CSV for review outside the terminal.
    """
    df = pd.DataFrame(plan_rows(plan), columns=PLAN_CSV_FIELDS)
    df = df.fillna("")
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    print(f"[takein] wrote plan -> {path}")
    return path


def summarize_journal(config_dir: Optional[Path] = None, last_run: bool = True) -> Dict[str, Any]:
    """
    Count journal rows per operation, for the last run or all runs.
    """
    path = get_journal_path(config_dir or get_config_dir())
    if not path.exists():
        raise FileNotFoundError(f"journal not found at: {path}")

    df = pd.read_csv(path, dtype=str).fillna("")
    if "RunId" not in df.columns or "Operation" not in df.columns:
        raise ValueError("journal.log missing required columns: RunId, Operation")

    run_id = None
    if last_run and not df.empty:
        run_id = df["RunId"].iloc[-1]
        df = df[df["RunId"] == run_id]

    counts = {str(op): int(n) for op, n in df["Operation"].value_counts().items()}
    return {
        "journal_path": path,
        "run_id": run_id,
        "rows": int(len(df)),
        "operations": counts,
    }
