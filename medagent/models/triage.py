"""Risk classification enums and wizard state enums."""

from enum import Enum


class RiskCategory(str, Enum):
    """Coarse risk levels, ordered by severity."""

    LOW = "LOW"  # Rest and monitor
    MODERATE = "MODERATE"  # Consider a doctor's evaluation
    HIGH = "HIGH"  # Seek medical attention promptly

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def __lt__(self, other):
        if not isinstance(other, RiskCategory):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other):
        if not isinstance(other, RiskCategory):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other):
        if not isinstance(other, RiskCategory):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other):
        if not isinstance(other, RiskCategory):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {RiskCategory.LOW: 0, RiskCategory.MODERATE: 1, RiskCategory.HIGH: 2}


class AdvisoryOrigin(str, Enum):
    """Where advisory text came from."""

    GENERATED = "generated"
    FALLBACK = "fallback"


class AdvisoryStatus(str, Enum):
    """Retrieval state as observed by the caller."""

    IDLE = "idle"
    PENDING = "pending"
    RESOLVED = "resolved"


class AssessmentStage(str, Enum):
    """Wizard page the session is on."""

    INTAKE = "intake"
    RISK = "risk"
    CONSULTATION = "consultation"
