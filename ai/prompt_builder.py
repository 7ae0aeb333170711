"""
Prompt construction and report parsing for the compatibility narrative.

The model is told to open each of the four report sections with a fixed
marker line, and parse_report() splits on those markers only. Numbered
headings are read solely for reports cached before the markers existed.
"""
import re
from dataclasses import dataclass

from matching.compatibility import AIContext, ComparisonPoint
from questionnaires.questions import Scenario

# Exemplars per bucket, keeps prompt length flat across catalog sizes.
MAX_EXAMPLES = 5

STRENGTH_MAX_DIFF = 1
FRICTION_MIN_DIFF = 3

SECTION_ORDER = ("VERDICT", "STRENGTHS", "FRICTIONS", "ADVICE")

SECTION_DESCRIPTIONS = {
    "VERDICT": "one sentence, straight to the point",
    "STRENGTHS": "bullet points on what these matches mean in everyday life",
    "FRICTIONS": "bullet points naming exactly what they will argue about if nobody pays attention",
    "ADVICE": "practical advice they can use right away",
}

# Prefix of a report synthesised locally when the AI service is unreachable.
OFFLINE_MARKER = "[System notice: the AI service is temporarily unavailable. Below is a preview built from the raw answers.]"

_MARKER_RE = re.compile(r"^=== \[SECTION:([A-Z]+)\] ===[ \t]*$", re.MULTILINE)

# ── Personas ────────────────────────────────────────────────────────

COUPLE_PERSONA = """You are a seasoned relationship observer who has seen every kind of couple, and you explain relationships in plain, down-to-earth language. Using the {question_count}-question survey results of {name_a} and {name_b}, write a compatibility report that cuts straight to the point while staying warm. Their baseline match is {score}%.

Keep in mind:
1. **Talk like a person**: no psychology jargon, speak like an old friend would.
2. **Hit the sore spots**: don't hedge. Call out the good and the bad directly.
3. **Stick to the structure**: follow the output format below exactly.
4. **Use their names**: refer to {name_a} and {name_b} by name, never just "A" and "B"."""

FRIEND_PERSONA = """You are the group chat's sharpest, funniest friend and you have an eye for what makes friendships click. Using the {question_count}-question friendship survey of {name_a} and {name_b}, write a light-hearted but honest friendship chemistry report. Their baseline chemistry is {score}%.

Keep in mind:
1. **Keep it breezy**: friendly banter, not a counselling session.
2. **Be honest**: point out where they'll clash, with a wink rather than a lecture.
3. **Stick to the structure**: follow the output format below exactly.
4. **Use their names**: refer to {name_a} and {name_b} by name, never just "A" and "B"."""

PERSONAS = {
    Scenario.COUPLE: COUPLE_PERSONA,
    Scenario.FRIEND: FRIEND_PERSONA,
}


def is_offline_report(text: str) -> bool:
    return text.startswith(OFFLINE_MARKER)


def section_marker(name: str) -> str:
    return f"=== [SECTION:{name}] ==="


def split_matrix(matrix: list[ComparisonPoint]) -> tuple[list[ComparisonPoint], list[ComparisonPoint]]:
    """(strengths, frictions), each capped at MAX_EXAMPLES in catalog order."""
    strengths = [c for c in matrix if c.difference <= STRENGTH_MAX_DIFF]
    frictions = [c for c in matrix if c.difference >= FRICTION_MIN_DIFF]
    return strengths[:MAX_EXAMPLES], frictions[:MAX_EXAMPLES]


def _format_instructions() -> str:
    lines = [
        "Write the final report in exactly four sections, in this order. "
        "Start each section with its marker on a line of its own, copied exactly, "
        "and write nothing before the first marker:",
    ]
    for name in SECTION_ORDER:
        lines.append(f"- `{section_marker(name)}` then {SECTION_DESCRIPTIONS[name]}")
    return "\n".join(lines)


def create_ai_prompt(context: AIContext) -> str:
    name_a = context.host_profile.name or "A"
    name_b = context.guest_profile.name or "B"

    persona = PERSONAS[context.scenario].format(
        question_count=len(context.comparison_matrix),
        name_a=name_a,
        name_b=name_b,
        score=context.match_score,
    )

    strengths, frictions = split_matrix(context.comparison_matrix)

    if strengths:
        strengths_text = "\n".join(
            f"- [{c.dimension}]: Q.{c.id} ({c.question}) nearly identical answers, "
            f"{name_a}: {c.a_label}, {name_b}: {c.b_label}."
            for c in strengths
        )
    else:
        strengths_text = "- No closely matched answers."

    if frictions:
        frictions_text = "\n".join(
            f"- [{c.dimension}]: Q.{c.id} ({c.question}) far apart "
            f"({name_a}: {c.a_label} vs {name_b}: {c.b_label}). A hard conflict that needs attention."
            for c in frictions
        )
    else:
        frictions_text = "- No strongly opposed answers."

    return f"""{persona}

## STRENGTHS (difference <= {STRENGTH_MAX_DIFF}): where they naturally click
{strengths_text}

## FRICTION POINTS (difference >= {FRICTION_MIN_DIFF}): where conflict is likely to flare up
{frictions_text}

## OUTPUT FORMAT
{_format_instructions()}"""


# ── Parsing ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ReportSections:
    verdict: str | None = None
    strengths: str | None = None
    frictions: str | None = None
    advice: str | None = None
    legacy: bool = False

    @property
    def complete(self) -> bool:
        return all((self.verdict, self.strengths, self.frictions, self.advice))


def _parse_markers(text: str) -> dict[str, str]:
    matches = list(_MARKER_RE.finditer(text))
    sections: dict[str, str] = {}
    for i, match in enumerate(matches):
        name = match.group(1)
        if name not in SECTION_ORDER or name in sections:
            continue
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        sections[name] = text[match.end():end].strip()
    return sections


# Reports cached before markers were introduced used numbered headings.
_LEGACY_HEADINGS = {
    "VERDICT": re.compile(r"^\s*(?:#+\s*)?\**1[.)]\s*(?:Core\s+)?Verdict\**[:：]?", re.IGNORECASE | re.MULTILINE),
    "STRENGTHS": re.compile(r"^\s*(?:#+\s*)?\**2[.)]\s*(?:Key\s+)?Strengths?(?:\s+Analysis)?\**[:：]?", re.IGNORECASE | re.MULTILINE),
    "FRICTIONS": re.compile(r"^\s*(?:#+\s*)?\**3[.)]\s*(?:Potential\s+)?(?:Friction|Conflict)s?(?:\s+Points?|\s+Warnings?)?\**[:：]?", re.IGNORECASE | re.MULTILINE),
    "ADVICE": re.compile(r"^\s*(?:#+\s*)?\**4[.)]\s*(?:Long[- ]term\s+)?Advice\**[:：]?", re.IGNORECASE | re.MULTILINE),
}


def _parse_legacy(text: str) -> dict[str, str]:
    found = []
    for name, pattern in _LEGACY_HEADINGS.items():
        match = pattern.search(text)
        if match:
            found.append((match.start(), match.end(), name))
    found.sort()

    sections = {}
    for i, (_start, end, name) in enumerate(found):
        stop = found[i + 1][0] if i + 1 < len(found) else len(text)
        sections[name] = text[end:stop].strip()
    return sections


def parse_report(text: str) -> ReportSections:
    """
    Split a narrative into its four sections. Sections that cannot be found
    are None; the caller decides how to render a partial report.
    """
    if not text or is_offline_report(text):
        return ReportSections()

    sections = _parse_markers(text)
    legacy = False
    if not sections:
        sections = _parse_legacy(text)
        legacy = bool(sections)

    return ReportSections(
        verdict=sections.get("VERDICT") or None,
        strengths=sections.get("STRENGTHS") or None,
        frictions=sections.get("FRICTIONS") or None,
        advice=sections.get("ADVICE") or None,
        legacy=legacy,
    )
