from dataclasses import dataclass, field

from questionnaires.catalog import coerce_scenario
from questionnaires.questions import Scenario

PROFILE_VERSION = 2


@dataclass(frozen=True)
class SoulProfile:
    """
    A completed questionnaire. Never mutated: edits produce a new profile
    and a new token. `timestamp` stays None until the codec stamps it.
    """

    answers: tuple
    scenario: Scenario = Scenario.COUPLE
    name: str | None = None
    version: int = PROFILE_VERSION
    timestamp: int | None = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "name": self.name,
            "type": self.scenario.value,
            "answers": list(self.answers),
            "timestamp": self.timestamp,
        }


def _validate(data: dict):
    version = data.get("version")
    answers = data.get("answers")

    # bool is an int subclass but never a valid version
    if isinstance(version, bool) or not isinstance(version, (int, float)):
        raise ValueError(f"Version must be numeric: {version!r}")

    if not isinstance(answers, list):
        raise ValueError(f"Answers must be a list: {type(answers).__name__}")


def profile_from_dict(data) -> SoulProfile:
    """
    Normalise a decoded document into a SoulProfile.

    This is the only place an absent `type` is mapped to the legacy
    default scenario. Answer ranges and lengths are left to the scorer.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Invalid profile shape: {type(data).__name__}")

    _validate(data)

    name = data.get("name")
    timestamp = data.get("timestamp")

    return SoulProfile(
        answers=tuple(data["answers"]),
        scenario=coerce_scenario(data.get("type")),
        name=name if isinstance(name, str) and name else None,
        version=int(data["version"]),
        timestamp=timestamp if isinstance(timestamp, int) and not isinstance(timestamp, bool) else None,
    )
