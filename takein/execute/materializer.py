import logging
import os
import shutil
from typing import Callable, Dict, List, Optional, Tuple

from takein.analyze.analyzer import iter_files
from takein.errors import FilesystemError, StateError
from takein.execute.journaling import Journal
from takein.schemas import (
    METHODS,
    DestinationGroup,
    IntakePlan,
    MaterializationReport,
    MaterializedFile,
)

logger = logging.getLogger(__name__)


def _copy_file(src: str, dest: str):
    """Copy with metadata; a partially written dest is removed on failure."""
    try:
        shutil.copy2(src, dest)
    except OSError:
        try:
            os.remove(dest)
        except FileNotFoundError:
            pass
        raise


ACTIONS: Dict[str, Tuple[Callable[[str, str], None], str]] = {
    "link": (os.link, "linked"),
    "copy": (_copy_file, "copied"),
}


def collect_sub_paths(group: DestinationGroup) -> List[Tuple[str, str]]:
    """
    Return (source file, sub path under the destination dir) pairs.

    A directory source is expanded into its files instead of being taken as
    a single entry, keeping the directory name as the leading segment. With
    hard links this means deleting files in the taken copy never touches the
    source's own directory entries.
    """
    pairs: Dict[str, str] = {}
    for src in group.sources:
        if src.is_dir:
            parent = os.path.dirname(src.path.rstrip("/"))
            for path in iter_files(src.path):
                pairs[path] = os.path.relpath(path, parent)
        else:
            pairs[src.path] = os.path.basename(src.path)
    return list(pairs.items())


def _ensure_parent(dest: str):
    parent = os.path.dirname(dest)
    try:
        os.stat(parent)
        return
    except FileNotFoundError:
        pass
    except OSError as err:
        raise FilesystemError(f"{err}: {parent}", path=parent) from err
    try:
        os.makedirs(parent, 0o755, exist_ok=True)
    except OSError as err:
        raise FilesystemError(f"make dirs: {err}: {parent}", path=parent) from err


def _dest_taken(src: str, dest: str) -> bool:
    try:
        os.lstat(dest)
    except FileNotFoundError:
        return False
    except OSError as err:
        raise FilesystemError(f"{err}: {src}", path=src) from err
    return True


def materialize(
        plan: IntakePlan,
        method: str = "link",
        journal: Optional[Journal] = None,
) -> MaterializationReport:
    """
    Link or copy every planned source into its destination directory.

    Never overwrites: a destination file that already exists is skipped.
    The first filesystem error aborts the run; files already taken stay.

    Args:
        plan: Plan returned by analyze()
        method: "link" (hard link) or "copy"
        journal: Optional journal receiving one row per file
    """
    if not plan.analyzed:
        raise StateError("paths not analyzed yet")
    if method not in METHODS:
        raise ValueError(f"unknown method {method!r}, expected one of {', '.join(METHODS)}")

    action, done_status = ACTIONS[method]
    report = MaterializationReport(method=method)

    for group in plan.sorted_groups():
        for src, sub in collect_sub_paths(group):
            dest = os.path.join(group.dest_dir, sub)
            _ensure_parent(dest)

            if _dest_taken(src, dest):
                logger.info("skip (exists): %s", dest)
                report.add(group.dest_dir, MaterializedFile(src, dest, "skipped"))
                if journal:
                    journal.log_skip(src, dest, "destination exists")
                continue

            try:
                action(src, dest)
            except OSError as err:
                if journal:
                    journal.log_error(src, dest, str(err))
                raise FilesystemError(f"{method} file: {err}", path=src) from err

            logger.info("%s %s -> %s", method, src, dest)
            report.add(group.dest_dir, MaterializedFile(src, dest, done_status))
            if journal:
                if method == "link":
                    journal.log_link(src, dest)
                else:
                    journal.log_copy(src, dest)

    logger.info("%s complete: %d created, %d skipped", method, report.created, report.skipped)
    return report
