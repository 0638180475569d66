"""
Journaling for takein runs.

Every link, copy and skip performed by the materializer is appended to
journal.log in the takein config directory, as an audit trail.
"""

import csv
from datetime import datetime
from pathlib import Path
from typing import Optional

JOURNAL_FIELDS = [
    'Timestamp', 'RunId', 'Operation', 'SourcePath', 'DestPath', 'Status', 'Details'
]


class Journal:
    """
    Append-only journal of materialization operations.

    Journal format (CSV):
    - Timestamp: ISO 8601 datetime
    - RunId: identifies the materialize call that wrote the row
    - Operation: Link | Copy | Skip | Error
    - SourcePath: Original file path
    - DestPath: Destination file path
    - Status: OK | Skipped | Error
    - Details: Additional info (error message, skip reason)
    """

    def __init__(self, journal_path: Path, run_id: Optional[str] = None):
        self.path = journal_path
        self.run_id = run_id or datetime.now().strftime('%Y%m%d_%H%M%S_%f')
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Create with header if doesn't exist
        if not self.path.exists():
            self._write_header()

    def _write_header(self):
        with self.path.open('w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=JOURNAL_FIELDS)
            writer.writeheader()

    def log(
            self,
            operation: str,
            source_path: str,
            dest_path: str = '',
            status: str = 'OK',
            details: str = '',
    ):
        """Log a single operation."""
        with self.path.open('a', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=JOURNAL_FIELDS)
            writer.writerow({
                'Timestamp': datetime.now().isoformat(),
                'RunId': self.run_id,
                'Operation': operation,
                'SourcePath': str(source_path),
                'DestPath': str(dest_path),
                'Status': status,
                'Details': details,
            })

    def log_link(self, source: str, dest: str):
        self.log('Link', source, dest)

    def log_copy(self, source: str, dest: str):
        self.log('Copy', source, dest)

    def log_skip(self, source: str, dest: str, reason: str):
        self.log('Skip', source, dest, 'Skipped', reason)

    def log_error(self, source: str, dest: str, error_msg: str):
        self.log('Error', source, dest, 'Error', error_msg)


def get_journal_path(config_dir: Path) -> Path:
    return config_dir / 'journal.log'


def get_journal(config_dir: Path) -> Journal:
    """Get or create the journal living in the takein config directory."""
    return Journal(get_journal_path(config_dir))
