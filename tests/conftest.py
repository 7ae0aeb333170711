import pytest

from core.profile import SoulProfile
from questionnaires.catalog import catalog_length
from questionnaires.questions import Scenario


@pytest.fixture
def make_profile():
    """Factory: full-length profile filled with `fill`, with optional overrides by index."""

    def _make(fill=3, scenario=Scenario.COUPLE, name=None, overrides=None, answers=None):
        if answers is None:
            answers = [fill] * catalog_length(scenario)
            for index, value in (overrides or {}).items():
                answers[index] = value
        return SoulProfile(answers=tuple(answers), scenario=scenario, name=name)

    return _make
