"""Intake validation: raw form fields -> PatientRecord."""

from typing import Any, Iterable, Optional
from medagent.config.settings import settings
from medagent.models.assessment import PatientRecord
from medagent.utils.errors import IntakeValidationError
from medagent.utils.symptom_catalog import SymptomCatalog, default_catalog
import logging
import re

logger = logging.getLogger(__name__)


_AGE_PATTERN = re.compile(r"^[+-]?[0-9]+$")


def _parse_age(age: Any) -> Optional[int]:
    if age is None or isinstance(age, bool):
        return None
    if isinstance(age, int):
        return age
    if isinstance(age, float):
        return int(age) if age.is_integer() else None
    if not isinstance(age, str):
        return None
    text = age.strip()
    if not _AGE_PATTERN.match(text):
        return None
    return int(text, 10)


def validate_intake(
    name: Optional[str],
    age: Any,
    selected_symptoms: Optional[Iterable[str]],
    catalog: Optional[SymptomCatalog] = None,
    age_min: Optional[int] = None,
    age_max: Optional[int] = None,
) -> PatientRecord:
    """
    Validate intake fields and build an immutable patient record.

    Checks run in order and the first failure is reported.

    Args:
        name: Patient name as typed
        age: Age as typed (int or numeric string)
        selected_symptoms: Identifiers of ticked checklist entries
        catalog: Symptom catalog (defaults to the built-in one)
        age_min: Inclusive lower age bound (defaults to settings.age_min)
        age_max: Inclusive upper age bound (defaults to settings.age_max)

    Returns:
        PatientRecord carrying the whole catalog with selection flags

    Raises:
        IntakeValidationError: On missing name, bad age, unknown or no symptoms
    """
    catalog = catalog or default_catalog
    age_min = settings.age_min if age_min is None else age_min
    age_max = settings.age_max if age_max is None else age_max

    trimmed = (name or "").strip()
    if not trimmed:
        raise IntakeValidationError("name", "Please enter your name")

    parsed_age = _parse_age(age)
    if parsed_age is None or parsed_age < age_min or parsed_age > age_max:
        raise IntakeValidationError(
            "age", f"Please enter a valid age between {age_min} and {age_max}"
        )

    selected = []
    for symptom_id in selected_symptoms or []:
        if symptom_id not in catalog:
            raise IntakeValidationError("symptoms", f"Unknown symptom: {symptom_id}")
        if symptom_id not in selected:
            selected.append(symptom_id)

    if not selected:
        raise IntakeValidationError(
            "symptoms", "Please select at least one symptom to continue"
        )

    record = PatientRecord(
        name=trimmed, age=parsed_age, symptoms=catalog.build_symptoms(selected)
    )
    logger.debug(f"Validated intake with {len(selected)} selected symptom(s)")
    return record
