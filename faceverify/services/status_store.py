import logging
from dataclasses import dataclass, field
from typing import Optional, List, Dict
from faceverify.orchestrator.contracts import VerificationOutcome, AnalysisOutcome
from faceverify.orchestrator.phases import TASKS, IDLE, IN_FLIGHT

logger = logging.getLogger("faceverify")

MAX_LOG_LINES = 200

@dataclass
class StatusStore:
    """Observable result state: what the page shows, plus the operator log."""
    phases: Dict[str, str] = field(default_factory=lambda: {t: IDLE for t in TASKS})
    generation: int = 0
    # display state, polled by the page
    verified: Optional[bool] = None
    identity: Optional[str] = None
    analyzed: Optional[bool] = None
    analysis: List[str] = field(default_factory=list)
    last_verification: Optional[VerificationOutcome] = None
    last_analysis: Optional[AnalysisOutcome] = None
    last_error: Optional[str] = None
    logs: List[str] = field(default_factory=list)

    @property
    def busy(self) -> bool:
        return any(p in IN_FLIGHT for p in self.phases.values())

    def set_phase(self, task: str, phase: str):
        self.phases[task] = phase

    def clear_verification(self):
        self.verified = None
        self.identity = None

    def clear_analysis(self):
        self.analyzed = None
        self.analysis = []

    def begin_cycle(self) -> int:
        """Invalidate every older cycle and wipe the displayed outcomes."""
        self.generation += 1
        self.clear_verification()
        self.clear_analysis()
        self.last_verification = None
        self.last_analysis = None
        self.last_error = None
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def commit_verification(self, generation: int, outcome: VerificationOutcome) -> bool:
        if not self.is_current(generation):
            return False
        self.last_verification = outcome
        self.verified = outcome.is_verified
        self.identity = outcome.identity
        self.clear_analysis()
        if outcome.kind == "failed":
            self.last_error = outcome.reason
        return True

    def commit_analysis(self, generation: int, outcome: AnalysisOutcome) -> bool:
        if not self.is_current(generation):
            return False
        self.last_analysis = outcome
        if outcome.kind == "analyzed":
            self.analyzed = True
            self.analysis = outcome.sentences()
            self.clear_verification()
        else:
            self.analyzed = False
            self.last_error = outcome.reason
        return True

    def log(self, msg: str):
        logger.info(msg)
        self.logs.append(msg)
        if len(self.logs) > MAX_LOG_LINES:
            self.logs = self.logs[-MAX_LOG_LINES:]
