"""
Weighted-distance compatibility.

score = round_half_up((1 - Σ|a_i - b_i|·w_i / Σ range_i·w_i) × 100)

Identical answers score 100, opposite ends on every question score 0.
"""
import math
from dataclasses import dataclass

from core.errors import CatalogLengthMismatch, ScenarioMismatch
from core.profile import SoulProfile
from questionnaires.catalog import questions_for, scenario_label
from questionnaires.questions import Question, Scenario, option_range

NEUTRAL_ANSWER = 3
MISSING_LABEL = "N/A"


@dataclass(frozen=True)
class ComparisonPoint:
    id: int
    dimension: str
    question: str
    a_answer: object
    b_answer: object
    a_label: str
    b_label: str
    difference: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "dimension": self.dimension,
            "question": self.question,
            "A_answer": self.a_answer,
            "B_answer": self.b_answer,
            "A_label": self.a_label,
            "B_label": self.b_label,
            "difference": self.difference,
        }


@dataclass(frozen=True)
class AIContext:
    host_profile: SoulProfile
    guest_profile: SoulProfile
    scenario: Scenario
    match_score: int
    comparison_matrix: list[ComparisonPoint]


def resolve_scenario(profile_a: SoulProfile, profile_b: SoulProfile) -> Scenario:
    """Both sides must come from the same catalog. No coercion."""
    if profile_a.scenario != profile_b.scenario:
        raise ScenarioMismatch(
            scenario_label(profile_a.scenario),
            scenario_label(profile_b.scenario),
        )
    return profile_a.scenario


def check_catalog_length(profile: SoulProfile):
    expected = len(questions_for(profile.scenario))
    if len(profile.answers) != expected:
        raise CatalogLengthMismatch(scenario_label(profile.scenario), expected, len(profile.answers))


def _answer_at(answers: tuple, index: int, question: Question) -> int:
    """
    The usable answer at `index`. Missing, non-integer or out-of-range
    values fall back to the neutral midpoint so stale data still scores.
    """
    if index >= len(answers):
        return NEUTRAL_ANSWER

    value = answers[index]
    if isinstance(value, bool) or not isinstance(value, int):
        return NEUTRAL_ANSWER

    values = [option.value for option in question.options]
    if not min(values) <= value <= max(values):
        return NEUTRAL_ANSWER
    return value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_distance(profile_a: SoulProfile, profile_b: SoulProfile) -> int:
    """
    Compatibility score 0-100 between two profiles of the same scenario.
    Higher means closer answers.
    """
    scenario = resolve_scenario(profile_a, profile_b)
    questions = questions_for(scenario)

    total_weighted_diff = 0.0
    max_weighted_diff = 0.0

    for i, question in enumerate(questions):
        weight = question.weight or 1.0
        diff = abs(_answer_at(profile_a.answers, i, question) - _answer_at(profile_b.answers, i, question))

        total_weighted_diff += diff * weight
        max_weighted_diff += option_range(question) * weight

    if max_weighted_diff <= 0:
        raise ValueError(f"Catalog for scenario {scenario.value!r} is empty; cannot score")

    score = _round_half_up((1 - total_weighted_diff / max_weighted_diff) * 100)
    return max(0, min(100, score))


def comparison_matrix(profile_a: SoulProfile, profile_b: SoulProfile) -> list[ComparisonPoint]:
    scenario = resolve_scenario(profile_a, profile_b)
    matrix = []

    for i, question in enumerate(questions_for(scenario)):
        a_raw = profile_a.answers[i] if i < len(profile_a.answers) else None
        b_raw = profile_b.answers[i] if i < len(profile_b.answers) else None

        matrix.append(ComparisonPoint(
            id=question.id,
            dimension=question.dimension,
            question=question.text,
            a_answer=a_raw,
            b_answer=b_raw,
            a_label=question.label_for(a_raw) or MISSING_LABEL,
            b_label=question.label_for(b_raw) or MISSING_LABEL,
            difference=abs(_answer_at(profile_a.answers, i, question) - _answer_at(profile_b.answers, i, question)),
        ))

    return matrix


def generate_ai_context(host_profile: SoulProfile, guest_profile: SoulProfile) -> AIContext:
    """Score plus matrix. Raises ScenarioMismatch before anything else runs."""
    scenario = resolve_scenario(host_profile, guest_profile)
    return AIContext(
        host_profile=host_profile,
        guest_profile=guest_profile,
        scenario=scenario,
        match_score=calculate_distance(host_profile, guest_profile),
        comparison_matrix=comparison_matrix(host_profile, guest_profile),
    )
