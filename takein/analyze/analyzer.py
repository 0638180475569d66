"""
Intake analyzer.

Turns pasted text into an IntakePlan: pulls candidate paths out of the text,
splits them into found/missing, tokenizes and resolves the found ones, and
groups them by destination directory. Nothing on disk is changed here.
"""

import logging
import os
import stat
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Tuple

from takein.errors import FilesystemError, ResolutionError, TakeinError, TokenizationError
from takein.schemas import (
    DATE_FORMAT,
    FILE_COUNT_CAP,
    FILE_COUNT_CAPPED,
    DestinationGroup,
    IntakeConfig,
    IntakePlan,
    InvalidSource,
    SourceEntry,
)
from .destination import VAR_PATTERN, resolve
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

FILE_URL_PREFIX = "file://"


def today_stamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime(DATE_FORMAT)


def extract_paths(text: str) -> List[str]:
    """
    Return candidate absolute paths found in text, in input order.

    A line is a candidate when it starts with "/" once an optional file://
    prefix is stripped. Other lines are ignored silently.
    """
    text = text.replace("\r\n", "\n")
    paths = []
    for line in text.split("\n"):
        if line.startswith(FILE_URL_PREFIX):
            line = line[len(FILE_URL_PREFIX):]
        if line.startswith("/"):
            paths.append(line)
    return paths


def base_name(path: str) -> str:
    """Last path element, ignoring trailing slashes."""
    stripped = path.rstrip("/")
    if not stripped:
        return "/"
    return os.path.basename(stripped)


def parse_envs(src: str, config: IntakeConfig) -> Dict[str, str]:
    """
    Tokenize the full path, then the base name, and merge the two maps.

    Name values overwrite path values on key collision.
    """
    env = dict(tokenize(src, config.path_seps, config.path_key_list))
    env.update(tokenize(base_name(src), config.name_seps, config.name_key_list))
    return env


def _raise_walk_error(err: OSError):
    raise FilesystemError(f"{err}: {err.filename}", path=err.filename or "") from err


def iter_files(root: str) -> Iterator[str]:
    """
    Yield every non-directory entry under root, depth first, sorted by name.

    Symlinks are yielded as entries and never followed. Any OSError is raised
    as FilesystemError.
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        # os.walk lists symlinks to directories with the directories
        linked = [d for d in dirnames if os.path.islink(os.path.join(dirpath, d))]
        for name in linked:
            dirnames.remove(name)
        for name in sorted(filenames + linked):
            yield os.path.join(dirpath, name)


def count_files(root: str, cap: int = FILE_COUNT_CAP) -> int:
    """
    Count files under root, or return FILE_COUNT_CAPPED once the count
    exceeds cap. The whole walk stops at that point.
    """
    count = 0
    for _ in iter_files(root):
        count += 1
        if count > cap:
            return FILE_COUNT_CAPPED
    return count


def _stat_sources(paths: List[str]) -> Tuple[List[str], List[str], Dict[str, bool]]:
    """Split paths into (existing, not_found) and record which are dirs."""
    existing: List[str] = []
    not_found: List[str] = []
    is_dir: Dict[str, bool] = {}
    for src in paths:
        src = src.strip()
        if src in is_dir or src in not_found:
            continue
        try:
            st = os.stat(src)
        except FileNotFoundError:
            logger.debug("not found: %s", src)
            not_found.append(src)
            continue
        except OSError as err:
            raise FilesystemError(f"{err}: {src}", path=src) from err
        existing.append(src)
        is_dir[src] = stat.S_ISDIR(st.st_mode)
    return existing, not_found, is_dir


def _dest_exists(dest_dir: str, src: str) -> bool:
    try:
        os.stat(dest_dir)
    except FileNotFoundError:
        return False
    except OSError as err:
        raise FilesystemError(f"{err}: {src}", path=src) from err
    return True


def analyze(raw_text: str, config: IntakeConfig, today: Optional[str] = None) -> IntakePlan:
    """
    Analyze pasted text and build a fresh IntakePlan.

    Missing paths and paths that fail tokenization or resolution are
    recorded on the plan; any other filesystem error aborts the analysis
    with FilesystemError.

    Args:
        raw_text: Free-form text, one path per line
        config: Separator/key configuration and destination pattern
        today: DATE value for the whole batch (defaults to today's stamp)
    """
    plan = IntakePlan(today=today or today_stamp())

    existing, plan.not_found, is_dir = _stat_sources(extract_paths(raw_text))
    existing.sort()

    for src in existing:
        try:
            env = parse_envs(src, config)
            env["DATE"] = plan.today
            dest_dir = resolve(src, config.destination, env)
            if not dest_dir.startswith("/"):
                raise ResolutionError(f"destination path cannot be relative: {dest_dir!r}")
        except (TokenizationError, ResolutionError) as err:
            logger.debug("invalid: %s (%s)", src, err)
            plan.invalid.append(InvalidSource(path=src, reason=str(err)))
            continue

        entry = SourceEntry(path=src, is_dir=is_dir[src], dest_dir=dest_dir, env=env)
        if entry.is_dir:
            entry.file_count = count_files(src)

        group = plan.groups.get(dest_dir)
        if group is None:
            group = DestinationGroup(dest_dir=dest_dir, exists=_dest_exists(dest_dir, src))
            logger.debug("destination %s (exists=%s)", dest_dir, group.exists)
            plan.groups[dest_dir] = group
        group.sources.append(entry)

    plan.analyzed = True
    logger.info(
        "analyzed %d sources: %d grouped into %d destinations, %d invalid, %d not found",
        len(existing) + len(plan.not_found),
        sum(len(g.sources) for g in plan.groups.values()),
        len(plan.groups),
        len(plan.invalid),
        len(plan.not_found),
    )
    return plan


def _expand_environ(text: str) -> str:
    """Expand $NAME / ${NAME} from the process environment; unset names become ""."""
    return VAR_PATTERN.sub(lambda m: os.environ.get(m.group(1) or m.group(2) or "", ""), text)


def preview_destination(raw_text: str, config: IntakeConfig, today: Optional[str] = None) -> str:
    """
    Resolve a sample destination from the first candidate path in raw_text.

    Lets the operator check the settings before running a full analysis.
    Raises TakeinError with a human readable message when the settings or
    the input cannot produce a destination.
    """
    dest = config.destination.strip()
    if not dest:
        raise TakeinError("please set destination")
    if not _expand_environ(dest).startswith("/"):
        raise TakeinError("destination path cannot be relative")
    paths = extract_paths(raw_text)
    if not paths:
        raise TakeinError("filepath not found")
    sample = paths[0].strip()
    env = parse_envs(sample, config)
    env["DATE"] = today or today_stamp()
    return resolve(sample, config.destination, env)
