from __future__ import annotations

from typing import Callable, Iterable

import httpx
import pytest

from medagent.models.assessment import PatientRecord
from medagent.services.advisory_service import AdvisoryService
from medagent.utils.symptom_catalog import default_catalog


def make_record(selected: Iterable[str], name: str = "Alex", age: int = 30) -> PatientRecord:
    return PatientRecord(name=name, age=age, symptoms=default_catalog.build_symptoms(selected))


def gemini_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def build_advisory_service(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    api_key: str | None = "test-key",
    timeout: float = 2.0,
    **kwargs,
) -> AdvisoryService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AdvisoryService(
        client=client,
        api_key=api_key,
        api_url="https://gemini.test/v1beta/models/gemini-pro:generateContent",
        timeout=timeout,
        **kwargs,
    )


@pytest.fixture
def record_factory():
    return make_record
