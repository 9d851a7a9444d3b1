"""API request and response models."""

from pydantic import BaseModel, Field
from typing import Any, List, Optional
from datetime import datetime
from medagent.config.prompts import MEDICAL_DISCLAIMER, SERVICE_UNAVAILABLE_NOTICE
from medagent.models.assessment import AdvisoryResult, PatientRecord, RiskGuidance
from medagent.models.triage import (
    AdvisoryOrigin,
    AdvisoryStatus,
    AssessmentStage,
    RiskCategory,
)


class IntakeRequest(BaseModel):
    """Raw intake form fields as entered by the user."""

    name: Optional[str] = Field(None, max_length=200, description="Patient name")
    age: Optional[Any] = Field(None, description="Age in years, as typed")
    symptoms: List[str] = Field(
        default_factory=list, description="Identifiers of the selected symptoms"
    )

    class Config:
        json_schema_extra = {
            "example": {"name": "Alex", "age": 30, "symptoms": ["fever", "headache"]}
        }


class SymptomOption(BaseModel):
    name: str
    label: str


class SymptomCatalogResponse(BaseModel):
    """Checklist and age bounds for rendering the intake form."""

    symptoms: List[SymptomOption]
    age_min: int
    age_max: int


class PatientSummary(BaseModel):
    """Patient details echoed back on the risk and consultation pages."""

    name: str
    age: int
    symptoms: List[str]
    symptom_summary: str

    @classmethod
    def from_record(cls, record: PatientRecord) -> "PatientSummary":
        return cls(
            name=record.name,
            age=record.age,
            symptoms=[s.name for s in record.selected_symptoms],
            symptom_summary=record.symptom_summary,
        )


class ClassificationResponse(BaseModel):
    """Risk classification for a validated intake."""

    patient: PatientSummary
    risk: RiskCategory
    guidance: RiskGuidance


class AdvisoryResponse(BaseModel):
    """Advisory text with display hints."""

    text: str
    origin: AdvisoryOrigin
    notice: Optional[str] = None  # "service unavailable" banner for fallbacks
    disclaimer: str = MEDICAL_DISCLAIMER

    @classmethod
    def from_result(cls, result: AdvisoryResult) -> "AdvisoryResponse":
        return cls(
            text=result.text,
            origin=result.origin,
            notice=SERVICE_UNAVAILABLE_NOTICE if result.is_fallback else None,
        )


class RelayAdvisoryResponse(BaseModel):
    """Response of the stateless advisory relay."""

    risk: RiskCategory
    advisory: AdvisoryResponse


class SessionDetailsResponse(BaseModel):
    """Snapshot of a wizard session."""

    session_id: str
    stage: AssessmentStage
    created_at: datetime
    updated_at: datetime
    patient: Optional[PatientSummary] = None
    risk: Optional[RiskCategory] = None
    guidance: Optional[RiskGuidance] = None
    advisory_status: AdvisoryStatus
    advisory: Optional[AdvisoryResponse] = None
