"""Tests for prompt construction and report parsing."""

import pytest

from ai.prompt_builder import (
    MAX_EXAMPLES,
    OFFLINE_MARKER,
    SECTION_ORDER,
    create_ai_prompt,
    is_offline_report,
    parse_report,
    section_marker,
    split_matrix,
)
from matching.compatibility import ComparisonPoint, generate_ai_context
from questionnaires.questions import Scenario


def _point(q_id, difference):
    return ComparisonPoint(q_id, "lifestyle", f"Q{q_id}?", 1, 1 + difference, "a", "b", difference)


class TestSplitMatrix:
    def test_buckets_by_difference(self):
        matrix = [_point(1, 0), _point(2, 1), _point(3, 2), _point(4, 3), _point(5, 4)]
        strengths, frictions = split_matrix(matrix)
        assert [c.id for c in strengths] == [1, 2]
        assert [c.id for c in frictions] == [4, 5]

    def test_caps_each_bucket_in_catalog_order(self):
        matrix = [_point(i, 0) for i in range(1, 9)] + [_point(i, 4) for i in range(9, 17)]
        strengths, frictions = split_matrix(matrix)
        assert [c.id for c in strengths] == list(range(1, MAX_EXAMPLES + 1))
        assert [c.id for c in frictions] == list(range(9, 9 + MAX_EXAMPLES))


class TestCreatePrompt:
    def test_names_score_and_markers(self, make_profile):
        context = generate_ai_context(make_profile(name="Ann"), make_profile(name="Ben", overrides={3: 5, 4: 1}))
        prompt = create_ai_prompt(context)

        assert "Ann" in prompt and "Ben" in prompt
        assert f"{context.match_score}%" in prompt
        assert "50-question" in prompt
        for name in SECTION_ORDER:
            assert section_marker(name) in prompt

    def test_names_default_to_letters(self, make_profile):
        prompt = create_ai_prompt(generate_ai_context(make_profile(), make_profile()))
        assert "A: " in prompt
        assert "No strongly opposed answers." in prompt

    def test_friction_lines_cite_both_labels(self, make_profile):
        host = make_profile(scenario=Scenario.FRIEND, name="Ann", fill=1)
        guest = make_profile(scenario=Scenario.FRIEND, name="Ben", fill=5)
        prompt = create_ai_prompt(generate_ai_context(host, guest))
        assert "(Ann: Every minute planned vs Ben: Totally spontaneous)" in prompt
        assert "No closely matched answers." in prompt

    def test_persona_depends_on_scenario(self, make_profile):
        couple = create_ai_prompt(generate_ai_context(make_profile(), make_profile()))
        friend = create_ai_prompt(generate_ai_context(
            make_profile(scenario=Scenario.FRIEND), make_profile(scenario=Scenario.FRIEND)))
        assert "relationship observer" in couple
        assert "friendship chemistry" in friend
        assert "relationship observer" not in friend

    def test_prompt_itself_parses_to_nothing(self, make_profile):
        prompt = create_ai_prompt(generate_ai_context(make_profile(), make_profile()))
        sections = parse_report(prompt)
        assert not sections.complete
        assert sections.verdict is None


class TestParseReport:
    def test_marker_report(self):
        text = "\n".join([
            section_marker("VERDICT"), "A sturdy match.",
            section_marker("STRENGTHS"), "- Same sleep schedule",
            section_marker("FRICTIONS"), "- Money",
            section_marker("ADVICE"), "- Talk budgets monthly",
        ])
        sections = parse_report(text)
        assert sections.complete
        assert not sections.legacy
        assert sections.verdict == "A sturdy match."
        assert sections.frictions == "- Money"
        assert sections.advice == "- Talk budgets monthly"

    def test_partial_marker_report(self):
        text = f"{section_marker('VERDICT')}\nShort and sweet."
        sections = parse_report(text)
        assert sections.verdict == "Short and sweet."
        assert sections.strengths is None
        assert not sections.complete

    def test_legacy_numbered_headings(self):
        text = (
            "1. Verdict: Great pair.\n"
            "2. Key Strengths Analysis\n- shared hobbies\n"
            "3. Potential Friction Points\n- chores\n"
            "4. Long-term Advice\n- keep dating"
        )
        sections = parse_report(text)
        assert sections.legacy
        assert sections.verdict == "Great pair."
        assert sections.strengths == "- shared hobbies"
        assert sections.frictions == "- chores"
        assert sections.advice == "- keep dating"

    @pytest.mark.parametrize("text", ["", f"{OFFLINE_MARKER}\n\n1. Verdict: nope"])
    def test_empty_and_offline_reports(self, text):
        sections = parse_report(text)
        assert sections.verdict is None
        assert not sections.legacy

    def test_offline_detection(self):
        assert is_offline_report(f"{OFFLINE_MARKER}\n\nprompt")
        assert not is_offline_report("A normal report")
