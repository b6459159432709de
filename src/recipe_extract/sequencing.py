"""Instruction ordering and step-count capping.

Two passes over the extracted steps:

1. Sub-preparations (a marinade, a sauce, a dough, ...) are made before the
   first step that uses them. Cookbooks often print the sauce last or on
   another page ("see page 112"); the steps that make it move up to just
   before their first consumer.
2. The list is capped by joining adjacent steps of the same phase (prep,
   cook, finish), shortest pair first.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from enum import Enum
from typing import Final

DEFAULT_MAX_INSTRUCTIONS: Final[int] = 10


class Phase(str, Enum):
    """Stage of the cooking process a step belongs to."""

    PREP = "prep"
    COOK = "cook"
    FINISH = "finish"


PHASE_VERBS: Final[dict[Phase, frozenset[str]]] = {
    Phase.PREP: frozenset(
        {
            "blend",
            "chop",
            "coat",
            "combine",
            "crush",
            "cut",
            "dice",
            "fold",
            "grate",
            "grease",
            "knead",
            "line",
            "make",
            "marinate",
            "mash",
            "measure",
            "mince",
            "mix",
            "pat",
            "peel",
            "preheat",
            "prepare",
            "rinse",
            "roll",
            "season",
            "shape",
            "sift",
            "slice",
            "soak",
            "toss",
            "trim",
            "wash",
            "whisk",
        }
    ),
    Phase.COOK: frozenset(
        {
            "bake",
            "blanch",
            "boil",
            "braise",
            "broil",
            "brown",
            "cook",
            "deglaze",
            "fry",
            "grill",
            "heat",
            "poach",
            "reduce",
            "roast",
            "saute",
            "sauté",
            "sear",
            "simmer",
            "steam",
            "stir-fry",
            "toast",
        }
    ),
    Phase.FINISH: frozenset(
        {
            "cool",
            "divide",
            "drizzle",
            "enjoy",
            "garnish",
            "ladle",
            "plate",
            "rest",
            "serve",
            "sprinkle",
            "top",
        }
    ),
}

SUB_PREPARATIONS: Final[tuple[str, ...]] = (
    "marinade",
    "sauce",
    "dressing",
    "glaze",
    "dough",
    "batter",
    "topping",
    "base",
    "crust",
    "filling",
    "seasoning",
    "spice mix",
    "rub",
)

_WORD: Final = re.compile(r"[a-zà-ÿ]+(?:-[a-zà-ÿ]+)?")
_CROSS_REFERENCE: Final = re.compile(
    r"\(?\bsee\s+(?:page|p\.?|pg\.?)\s*\d+\)?|\(?\bsee\s+(?:below|above)\)?", re.IGNORECASE
)


def phase_of(step: str) -> Phase | None:
    """Phase named by the first phase verb in a step, if any."""
    for word in _WORD.findall(step.lower()):
        for phase, verbs in PHASE_VERBS.items():
            if word in verbs:
                return phase
    return None


def instruction_phases(steps: Sequence[str]) -> list[Phase]:
    """Phase of every step; steps without a phase verb inherit the previous one."""
    phases: list[Phase] = []
    current = Phase.PREP
    for step in steps:
        current = phase_of(step) or current
        phases.append(current)
    return phases


def _prepares(step: str, item: str) -> bool:
    name = re.escape(item)
    return bool(
        re.search(
            rf"\b(?:make|prepare|mix|combine|whisk|blend|stir together)\b[^.]*?\b(?:the|a|your)\s+{name}\b",
            step,
            re.IGNORECASE,
        )
        or re.search(rf"^\W*(?:for|to make)\s+the\s+{name}\b", step, re.IGNORECASE)
        or re.search(rf"\bto\s+make\s+(?:the|a)\s+{name}\b", step, re.IGNORECASE)
    )


def _consumes(step: str, item: str) -> bool:
    name = re.escape(item)
    if re.search(rf"\b(?:the|reserved|prepared)\s+{name}\b", step, re.IGNORECASE):
        return True
    reference = _CROSS_REFERENCE.search(step)
    return bool(reference and re.search(rf"\b{name}\b", step, re.IGNORECASE))


def order_sub_preparations(steps: Sequence[str]) -> list[str]:
    """Move sub-preparation steps before the first step that uses them.

    Relative order within the moved steps and within the rest is kept.

    Example:
        >>> order_sub_preparations([
        ...     "Toss the chicken in the marinade (see page 12).",
        ...     "Grill for 10 minutes.",
        ...     "To make the marinade, whisk soy sauce and honey.",
        ... ])[0]
        'To make the marinade, whisk soy sauce and honey.'
    """
    ordered = list(steps)
    for item in SUB_PREPARATIONS:
        preparers = [i for i, step in enumerate(ordered) if _prepares(step, item)]
        if not preparers:
            continue
        consumers = [
            i for i, step in enumerate(ordered) if i not in preparers and _consumes(step, item)
        ]
        if not consumers:
            continue
        first_consumer = min(consumers)
        late = [i for i in preparers if i > first_consumer]
        if not late:
            continue
        moved = [ordered[i] for i in late]
        remaining = [step for i, step in enumerate(ordered) if i not in late]
        ordered = remaining[:first_consumer] + moved + remaining[first_consumer:]
    return ordered


def _join_steps(first: str, second: str) -> str:
    head = first.rstrip()
    if head and head[-1] not in ".!?":
        head += "."
    return f"{head} {second.strip()}"


def cap_instructions(steps: Sequence[str], max_steps: int = DEFAULT_MAX_INSTRUCTIONS) -> list[str]:
    """Join adjacent steps until at most ``max_steps`` remain.

    Adjacent steps of the same phase are joined first, shortest combined
    text first. Only when no such pair is left are steps of different
    phases joined.
    """
    capped = list(steps)
    phases = instruction_phases(capped)
    while len(capped) > max(max_steps, 1):
        pairs = range(len(capped) - 1)
        same_phase = [i for i in pairs if phases[i] == phases[i + 1]]
        pool = same_phase or list(pairs)
        index = min(pool, key=lambda i: (len(capped[i]) + len(capped[i + 1]), i))
        capped[index] = _join_steps(capped[index], capped[index + 1])
        del capped[index + 1]
        del phases[index + 1]
    return capped


def sequence_instructions(
    steps: Sequence[str], max_steps: int = DEFAULT_MAX_INSTRUCTIONS
) -> list[str]:
    """Order sub-preparations first, then cap the step count."""
    return cap_instructions(order_sub_preparations(steps), max_steps)
