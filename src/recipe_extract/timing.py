"""Time and servings extraction.

All durations are converted to whole minutes; 0 means "unknown".

Example:
    >>> parse_duration_minutes("1 hour 30 minutes")
    90
    >>> parse_duration_minutes("marinate overnight")
    1440
    >>> extract_servings("Serves 4-6")
    4
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Final

from .quantities import amount_value
from .sequencing import Phase, instruction_phases

MINUTES_PER_UNIT: Final[dict[str, int]] = {"minute": 1, "hour": 60, "day": 1440}

OVERNIGHT_MINUTES: Final[int] = 1440

_WORD_NUMBERS: Final[dict[str, float]] = {
    "a": 1,
    "an": 1,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "fifteen": 15,
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "forty-five": 45,
    "sixty": 60,
}

_NUMBER: Final[str] = (
    r"\d+\s+\d+/\d+|\d+/\d+|\d+(?:[.,]\d+)?|half\s+an?|"
    + "|".join(sorted(_WORD_NUMBERS, key=len, reverse=True))
)

_DURATION_PATTERN: Final = re.compile(
    rf"\b(?P<value>{_NUMBER})(?:\s*(?:-|–|to)\s*(?:{_NUMBER}))?\s*"
    r"(?P<unit>minutes?|mins?|hours?|hrs?|days?)\b",
    re.IGNORECASE,
)
_OVERNIGHT_PATTERN: Final = re.compile(r"\bovernight\b", re.IGNORECASE)

_LABEL_STOP: Final = re.compile(
    r"\b(?:prep(?:aration)?|cook(?:ing)?|bak(?:e|ing)|roast(?:ing)?|total|serves|servings?|yields?|makes)\b",
    re.IGNORECASE,
)
_PREP_LABEL: Final = re.compile(
    r"\b(?:prep(?:aration)?|active)\s*(?:time\s*[:\-]?|[:\-])\s*(?P<rest>[^\n]*)", re.IGNORECASE
)
_COOK_LABEL: Final = re.compile(
    r"\b(?:cook(?:ing)?|bak(?:e|ing)|roast(?:ing)?)\s*(?:time\s*[:\-]?|[:\-])\s*(?P<rest>[^\n]*)",
    re.IGNORECASE,
)
_TOTAL_LABEL: Final = re.compile(
    r"\btotal(?:\s+time)?\s*[:\-]?\s*(?P<rest>[^\n]*)", re.IGNORECASE
)

_SERVINGS_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"\bserves\s*:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"\bservings?\s*:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"\b(\d+)(?:\s*(?:-|–|to)\s*\d+)?\s*(?:servings?|portions?|people|persons)\b", re.IGNORECASE),
    re.compile(r"\bmakes\s*:?\s*(?:about\s+)?(\d+)", re.IGNORECASE),
    re.compile(r"\byields?\s*:?\s*(?:about\s+)?(\d+)", re.IGNORECASE),
    re.compile(r"\bfor\s+(\d+)\s+(?:people|persons)\b", re.IGNORECASE),
)


def _number_value(token: str) -> float:
    lowered = re.sub(r"\s+", " ", token.strip().lower())
    if lowered.startswith("half"):
        return 0.5
    if lowered in _WORD_NUMBERS:
        return _WORD_NUMBERS[lowered]
    return amount_value(lowered) or 0.0


def _unit_minutes(unit: str) -> int:
    lowered = unit.lower()
    if lowered.startswith(("hour", "hr")):
        return MINUTES_PER_UNIT["hour"]
    if lowered.startswith("day"):
        return MINUTES_PER_UNIT["day"]
    return MINUTES_PER_UNIT["minute"]


def parse_duration_minutes(text: str) -> int:
    """Sum every duration phrase in a text, in minutes.

    Ranges count their first value and "overnight" counts as a day.

    Example:
        >>> parse_duration_minutes("bake for 20-25 minutes")
        20
    """
    total = 0.0
    for match in _DURATION_PATTERN.finditer(text):
        total += _number_value(match.group("value")) * _unit_minutes(match.group("unit"))
    total += OVERNIGHT_MINUTES * len(_OVERNIGHT_PATTERN.findall(text))
    return int(round(total))


def _labeled_minutes(pattern: re.Pattern[str], text: str) -> int:
    for match in pattern.finditer(text):
        rest = _LABEL_STOP.split(match.group("rest"), maxsplit=1)[0]
        minutes = parse_duration_minutes(rest)
        if minutes:
            return minutes
    return 0


def extract_times(text: str, instructions: Sequence[str] = ()) -> tuple[int, int]:
    """Find preparation and cooking time in minutes.

    Labeled phrases ("Prep time: 15 min", "Cook time 1 hour") win. A total
    time fills the cooking time left after preparation. Whatever is still
    unknown is estimated from durations inside the instructions: prep-phase
    steps count towards preparation, cook-phase steps towards cooking.

    Args:
        text: Full recipe text
        instructions: Instruction steps

    Returns:
        Tuple of (prep_minutes, cook_minutes), 0 when unknown
    """
    prep = _labeled_minutes(_PREP_LABEL, text)
    cook = _labeled_minutes(_COOK_LABEL, text)

    if not cook:
        total = _labeled_minutes(_TOTAL_LABEL, text)
        if total > prep:
            cook = total - prep

    if (not prep or not cook) and instructions:
        inferred = {Phase.PREP: 0, Phase.COOK: 0, Phase.FINISH: 0}
        for step, phase in zip(instructions, instruction_phases(instructions), strict=True):
            inferred[phase] += parse_duration_minutes(step)
        prep = prep or inferred[Phase.PREP]
        cook = cook or inferred[Phase.COOK]

    return prep, cook


def extract_servings(text: str) -> int:
    """Find the number of servings.

    The earliest phrase in the text wins; ranges give their first value.

    Example:
        >>> extract_servings("Makes 12 muffins")
        12
    """
    found: list[tuple[int, int]] = []
    for pattern in _SERVINGS_PATTERNS:
        match = pattern.search(text)
        if match:
            found.append((match.start(), int(match.group(1))))
    if not found:
        return 0
    return min(found)[1]
