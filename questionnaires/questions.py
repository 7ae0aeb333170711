from dataclasses import dataclass
from enum import Enum


class Scenario(str, Enum):
    COUPLE = "couple"
    FRIEND = "friend"


# Profiles encoded before scenarios existed carry no tag and belong here.
DEFAULT_SCENARIO = Scenario.COUPLE

SCENARIO_LABELS = {
    Scenario.COUPLE: "Couple compatibility test",
    Scenario.FRIEND: "Friendship chemistry test",
}

DIMENSIONS = ("lifestyle", "finance", "communication", "intimacy", "values")


@dataclass(frozen=True)
class Option:
    value: int
    label: str


@dataclass(frozen=True)
class Question:
    """
    One catalog entry. No scoring logic lives here.
    """

    id: int
    text: str
    dimension: str
    options: tuple[Option, ...]
    weight: float = 1.0

    def label_for(self, value) -> str | None:
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        for option in self.options:
            if option.value == value:
                return option.label
        return None


@dataclass(frozen=True)
class DimensionDetail:
    title: str
    description: str


def build_question(q_id: int, text: str, dimension: str, weight: float, labels: list[str]) -> Question:
    """Build a 1-5 ordinal question from its five labels, lowest value first."""
    if dimension not in DIMENSIONS:
        raise ValueError(f"Invalid dimension: {dimension}")
    options = tuple(Option(value, label) for value, label in enumerate(labels, start=1))
    return Question(id=q_id, text=text, dimension=dimension, options=options, weight=weight)


def option_range(question: Question) -> int:
    values = [option.value for option in question.options]
    return max(values) - min(values)
