from __future__ import annotations

import itertools

import pytest

from conftest import make_record
from medagent.models.assessment import PatientRecord, Symptom
from medagent.models.triage import RiskCategory
from medagent.utils.risk_rules import RiskRules, classify, get_risk_guidance

NON_CRITICAL = ["fever", "headache", "cough", "fatigue", "chest_pain", "nausea", "sore_throat"]
RULES = RiskRules()


def test_scenario_two_symptoms_is_moderate() -> None:
    assert classify(make_record(["fever", "headache"]), RULES) == RiskCategory.MODERATE


def test_scenario_shortness_of_breath_alone_is_high() -> None:
    assert classify(make_record(["shortness_breath"]), RULES) == RiskCategory.HIGH


def test_scenario_four_non_critical_is_high() -> None:
    record = make_record(["fever", "cough", "fatigue", "nausea"])
    assert classify(record, RULES) == RiskCategory.HIGH


def test_scenario_single_non_critical_is_low() -> None:
    assert classify(make_record(["cough"]), RULES) == RiskCategory.LOW


@pytest.mark.parametrize("count", range(1, len(NON_CRITICAL) + 1))
def test_critical_symptom_dominates_count(count: int) -> None:
    record = make_record(["shortness_breath", *NON_CRITICAL[: count - 1]])
    assert classify(record, RULES) == RiskCategory.HIGH


@pytest.mark.parametrize(
    "count, expected",
    [
        (0, RiskCategory.LOW),
        (1, RiskCategory.LOW),
        (2, RiskCategory.MODERATE),
        (3, RiskCategory.MODERATE),
        (4, RiskCategory.HIGH),
        (7, RiskCategory.HIGH),
    ],
)
def test_count_thresholds_without_critical(count: int, expected: RiskCategory) -> None:
    assert classify(make_record(NON_CRITICAL[:count]), RULES) == expected


def test_empty_selection_does_not_raise() -> None:
    assert classify(make_record([]), RULES) == RiskCategory.LOW


def test_symptom_order_does_not_matter() -> None:
    symptoms = [
        Symptom(name="fever", label="Fever", selected=True),
        Symptom(name="cough", label="Cough", selected=True),
        Symptom(name="nausea", label="Nausea", selected=False),
        Symptom(name="headache", label="Headache", selected=True),
    ]
    results = {
        classify(PatientRecord(name="Alex", age=30, symptoms=tuple(order)), RULES)
        for order in itertools.permutations(symptoms)
    }
    assert results == {RiskCategory.MODERATE}


def test_custom_rules_change_thresholds_not_shape() -> None:
    rules = RiskRules(critical_symptom="chest_pain", high_count=3, moderate_count=1)
    assert classify(make_record(["chest_pain"]), rules) == RiskCategory.HIGH
    assert classify(make_record(["shortness_breath"]), rules) == RiskCategory.MODERATE
    assert classify(make_record(["fever", "cough", "nausea"]), rules) == RiskCategory.HIGH


def test_risk_categories_are_ordered_by_severity() -> None:
    assert RiskCategory.LOW < RiskCategory.MODERATE < RiskCategory.HIGH
    assert max([RiskCategory.MODERATE, RiskCategory.HIGH, RiskCategory.LOW]) == RiskCategory.HIGH


def test_guidance_colours() -> None:
    assert get_risk_guidance(RiskCategory.LOW).color == "green"
    assert get_risk_guidance(RiskCategory.MODERATE).color == "yellow"
    high = get_risk_guidance(RiskCategory.HIGH)
    assert high.color == "red"
    assert "immediate medical attention" in high.message
