"""Risk classification from the selected symptom checklist."""

from dataclasses import dataclass
from typing import Optional
from medagent.config.prompts import RISK_GUIDANCE
from medagent.config.settings import settings
from medagent.models.assessment import PatientRecord, RiskGuidance
from medagent.models.triage import RiskCategory


@dataclass(frozen=True)
class RiskRules:
    """Thresholds for the ordered rule list."""

    critical_symptom: str = "shortness_breath"
    high_count: int = 4
    moderate_count: int = 2

    @classmethod
    def from_settings(cls) -> "RiskRules":
        return cls(
            critical_symptom=settings.critical_symptom,
            high_count=settings.high_risk_symptom_count,
            moderate_count=settings.moderate_risk_symptom_count,
        )


def classify(record: PatientRecord, rules: Optional[RiskRules] = None) -> RiskCategory:
    """
    Map a patient record to a risk category.

    Rules are checked in order and the first match wins:
      1. critical symptom selected, or at least ``high_count`` selected -> HIGH
      2. at least ``moderate_count`` selected -> MODERATE
      3. otherwise -> LOW

    Args:
        record: Validated patient record
        rules: Thresholds (defaults to the configured ones)

    Returns:
        RiskCategory
    """
    rules = rules or RiskRules.from_settings()

    selected = {s.name for s in record.symptoms if s.selected}
    count = len(selected)

    if rules.critical_symptom in selected or count >= rules.high_count:
        return RiskCategory.HIGH
    if count >= rules.moderate_count:
        return RiskCategory.MODERATE
    return RiskCategory.LOW


def get_risk_guidance(risk: RiskCategory) -> RiskGuidance:
    """Get colour and short guidance message for a risk category."""
    info = RISK_GUIDANCE[risk]
    return RiskGuidance(level=risk, color=info["color"], message=info["message"])
