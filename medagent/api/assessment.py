"""Assessment API endpoints.

The intake UI talks only to these routes:
- Catalog: symptom checklist and age bounds for the form
- Classify: validate intake and return the risk category
- Advisory: stateless relay to the generation service with fallback
- Sessions: server-side wizard (intake -> risk -> consultation) with
  continue, refresh and restart
"""

from fastapi import APIRouter, Depends, HTTPException, status
from medagent.api.dependencies import (
    get_advisory_service,
    get_session_service,
    get_symptom_catalog,
    require_session,
    session_error_to_http,
)
from medagent.config.settings import settings
from medagent.models.assessment import PatientRecord
from medagent.models.messages import (
    AdvisoryResponse,
    ClassificationResponse,
    IntakeRequest,
    PatientSummary,
    RelayAdvisoryResponse,
    SessionDetailsResponse,
    SymptomCatalogResponse,
    SymptomOption,
)
from medagent.services.advisory_service import AdvisoryService
from medagent.services.intake_service import validate_intake
from medagent.services.session_service import AssessmentSession, SessionService
from medagent.utils.errors import IntakeValidationError, MedAgentError
from medagent.utils.risk_rules import classify, get_risk_guidance
from medagent.utils.symptom_catalog import SymptomCatalog
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/assessment", tags=["Assessment"])


def _validate(request: IntakeRequest, catalog: SymptomCatalog) -> PatientRecord:
    try:
        return validate_intake(
            name=request.name,
            age=request.age,
            selected_symptoms=request.symptoms,
            catalog=catalog,
        )
    except IntakeValidationError as e:
        logger.info(f"Intake rejected ({e.field}): {e.message}")
        raise HTTPException(
            status_code=422, detail=e.to_detail()
        )


def _to_details(session: AssessmentSession) -> SessionDetailsResponse:
    return SessionDetailsResponse(
        session_id=session.session_id,
        stage=session.stage,
        created_at=session.created_at,
        updated_at=session.updated_at,
        patient=PatientSummary.from_record(session.record) if session.record else None,
        risk=session.risk,
        guidance=get_risk_guidance(session.risk) if session.risk else None,
        advisory_status=session.advisory_status,
        advisory=(
            AdvisoryResponse.from_result(session.advisory) if session.advisory else None
        ),
    )


@router.get("/symptoms", response_model=SymptomCatalogResponse)
async def list_symptoms(catalog: SymptomCatalog = Depends(get_symptom_catalog)):
    """Symptom checklist and accepted age range for the intake form."""
    return SymptomCatalogResponse(
        symptoms=[SymptomOption(**entry) for entry in catalog.as_list()],
        age_min=settings.age_min,
        age_max=settings.age_max,
    )


@router.post("/classify", response_model=ClassificationResponse)
async def classify_intake(
    request: IntakeRequest, catalog: SymptomCatalog = Depends(get_symptom_catalog)
):
    """
    Validate intake fields and classify risk.

    Returns 422 with ``{field, message}`` when validation fails.
    """
    record = _validate(request, catalog)
    risk = classify(record)
    return ClassificationResponse(
        patient=PatientSummary.from_record(record),
        risk=risk,
        guidance=get_risk_guidance(risk),
    )


@router.post("/advisory", response_model=RelayAdvisoryResponse)
async def relay_advisory(
    request: IntakeRequest,
    catalog: SymptomCatalog = Depends(get_symptom_catalog),
    advisory_service: AdvisoryService = Depends(get_advisory_service),
):
    """
    Relay an advisory request to the generation service.

    The API key never leaves this service. Once the intake validates, the
    response is always 200: failures come back as the fallback text for the
    computed risk, with ``origin = fallback`` and a notice.
    """
    record = _validate(request, catalog)
    risk = classify(record)
    result = await advisory_service.get_advisory(record, risk)
    return RelayAdvisoryResponse(risk=risk, advisory=AdvisoryResponse.from_result(result))


@router.post(
    "/sessions",
    response_model=SessionDetailsResponse,
    status_code=status.HTTP_201_CREATED,
)
async def start_session(session_service: SessionService = Depends(get_session_service)):
    """Start a new wizard session at the intake stage."""
    session = await session_service.create_session()
    return _to_details(session)


@router.get("/sessions/{session_id}", response_model=SessionDetailsResponse)
async def get_session(
    session_id: str, session_service: SessionService = Depends(get_session_service)
):
    """Current stage, classification and advisory state of a session."""
    session = await require_session(session_id, session_service)
    return _to_details(session)


@router.post("/sessions/{session_id}/intake", response_model=SessionDetailsResponse)
async def submit_intake(
    session_id: str,
    request: IntakeRequest,
    catalog: SymptomCatalog = Depends(get_symptom_catalog),
    session_service: SessionService = Depends(get_session_service),
):
    """Validate and classify intake, moving the session to the risk stage."""
    await require_session(session_id, session_service)
    record = _validate(request, catalog)
    risk = classify(record)
    try:
        session = await session_service.submit_record(session_id, record, risk)
    except MedAgentError as e:
        raise session_error_to_http(e)
    return _to_details(session)


@router.post("/sessions/{session_id}/continue", response_model=SessionDetailsResponse)
async def continue_session(
    session_id: str,
    wait: bool = False,
    session_service: SessionService = Depends(get_session_service),
):
    """
    Move to the consultation stage and start advisory retrieval.

    With ``wait=true`` the response is sent once the advisory has resolved;
    otherwise poll ``GET /sessions/{id}`` while ``advisory_status`` is pending.
    """
    try:
        session = await session_service.advance(session_id)
        if wait:
            session = await session_service.wait_for_advisory(session_id)
    except MedAgentError as e:
        raise session_error_to_http(e)
    return _to_details(session)


@router.post(
    "/sessions/{session_id}/advisory/refresh", response_model=SessionDetailsResponse
)
async def refresh_advisory(
    session_id: str,
    wait: bool = False,
    session_service: SessionService = Depends(get_session_service),
):
    """Request fresh advisory text; a newer result always supersedes an older one."""
    try:
        session = await session_service.refresh_advisory(session_id)
        if wait:
            session = await session_service.wait_for_advisory(session_id)
    except MedAgentError as e:
        raise session_error_to_http(e)
    return _to_details(session)


@router.post("/sessions/{session_id}/restart", response_model=SessionDetailsResponse)
async def restart_session(
    session_id: str, session_service: SessionService = Depends(get_session_service)
):
    """Discard the current assessment and return to intake."""
    try:
        session = await session_service.restart(session_id)
    except MedAgentError as e:
        raise session_error_to_http(e)
    return _to_details(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(
    session_id: str, session_service: SessionService = Depends(get_session_service)
):
    """End a session and cancel anything still running for it."""
    if not await session_service.close_session(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
