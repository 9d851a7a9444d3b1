"""Core assessment records passed between intake, classifier and advisory."""

from pydantic import BaseModel, Field
from typing import List, Tuple
from medagent.models.triage import AdvisoryOrigin, RiskCategory


class Symptom(BaseModel):
    """One entry of the symptom checklist."""

    name: str
    label: str
    selected: bool = False

    class Config:
        frozen = True


class PatientRecord(BaseModel):
    """Validated intake for a single assessment. Immutable once built."""

    name: str = Field(..., min_length=1)
    age: int
    symptoms: Tuple[Symptom, ...] = ()

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "Alex",
                "age": 30,
                "symptoms": [
                    {"name": "fever", "label": "Fever", "selected": True},
                    {"name": "headache", "label": "Headache", "selected": True},
                    {"name": "cough", "label": "Cough", "selected": False},
                ],
            }
        }

    @property
    def selected_symptoms(self) -> List[Symptom]:
        return [s for s in self.symptoms if s.selected]

    @property
    def selected_labels(self) -> List[str]:
        return [s.label for s in self.selected_symptoms]

    @property
    def symptom_summary(self) -> str:
        return ", ".join(self.selected_labels)


class AdvisoryResult(BaseModel):
    """Advisory text plus whether it was generated or a static fallback."""

    text: str
    origin: AdvisoryOrigin

    class Config:
        frozen = True

    @property
    def is_fallback(self) -> bool:
        return self.origin == AdvisoryOrigin.FALLBACK


class RiskGuidance(BaseModel):
    """Presentation hints for a risk category."""

    level: RiskCategory
    color: str
    message: str
