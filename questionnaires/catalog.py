"""
Scenario lookups. Callers must treat len(questions_for(s)) as the answer
vector length for scenario s.
"""
from questionnaires.couple import COUPLE_DIMENSION_DETAILS, COUPLE_QUESTIONS
from questionnaires.friend import FRIEND_DIMENSION_DETAILS, FRIEND_QUESTIONS
from questionnaires.questions import (
    DEFAULT_SCENARIO,
    SCENARIO_LABELS,
    DimensionDetail,
    Question,
    Scenario,
)

_CATALOGS = {
    Scenario.COUPLE: COUPLE_QUESTIONS,
    Scenario.FRIEND: FRIEND_QUESTIONS,
}

_DIMENSION_DETAILS = {
    Scenario.COUPLE: COUPLE_DIMENSION_DETAILS,
    Scenario.FRIEND: FRIEND_DIMENSION_DETAILS,
}


def coerce_scenario(value) -> Scenario:
    """Accept a Scenario or its string tag; None means the legacy default."""
    if value is None:
        return DEFAULT_SCENARIO
    if isinstance(value, Scenario):
        return value
    try:
        return Scenario(value)
    except ValueError:
        raise ValueError(f"Unknown scenario: {value!r}") from None


def questions_for(scenario=DEFAULT_SCENARIO) -> list[Question]:
    return list(_CATALOGS[coerce_scenario(scenario)])


def dimension_details_for(scenario=DEFAULT_SCENARIO) -> dict[str, DimensionDetail]:
    return dict(_DIMENSION_DETAILS[coerce_scenario(scenario)])


def catalog_length(scenario=DEFAULT_SCENARIO) -> int:
    return len(_CATALOGS[coerce_scenario(scenario)])


def scenario_label(scenario) -> str:
    return SCENARIO_LABELS[coerce_scenario(scenario)]
