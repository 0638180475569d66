"""
Batch lifecycle.

    Idle --analyze--> Analyzed --run--> Done --accept--> Idle
                         |
                         +--revert--> Idle

Only one plan is live at a time; a plan is consumed by exactly one run.
"""

from enum import Enum
from typing import Optional

from takein.analyze.analyzer import analyze
from takein.errors import StateError
from takein.execute.journaling import Journal
from takein.execute.materializer import materialize
from takein.schemas import IntakeConfig, IntakePlan, MaterializationReport


class SessionState(Enum):
    IDLE = "idle"
    ANALYZED = "analyzed"
    DONE = "done"


class IntakeSession:
    def __init__(self, config: IntakeConfig, journal: Optional[Journal] = None):
        self.config = config
        self.journal = journal
        self.state = SessionState.IDLE
        self.plan: Optional[IntakePlan] = None
        self.report: Optional[MaterializationReport] = None

    def _require(self, state: SessionState, action: str):
        if self.state is not state:
            raise StateError(f"cannot {action} while {self.state.value}")

    def analyze(self, raw_text: str, today: Optional[str] = None) -> IntakePlan:
        self._require(SessionState.IDLE, "analyze")
        self.plan = analyze(raw_text, self.config, today=today)
        self.report = None
        self.state = SessionState.ANALYZED
        return self.plan

    def revert(self):
        """Drop the plan so the input can be edited and analyzed again."""
        self._require(SessionState.ANALYZED, "revert")
        self.plan = None
        self.state = SessionState.IDLE

    def run(self, method: str = "link") -> MaterializationReport:
        self._require(SessionState.ANALYZED, "run")
        self.report = materialize(self.plan, method, journal=self.journal)
        self.state = SessionState.DONE
        return self.report

    def accept(self):
        """Accept the finished run and get ready for a new batch."""
        self._require(SessionState.DONE, "accept")
        self.plan = None
        self.report = None
        self.state = SessionState.IDLE
