"""Rule-based recipe field extraction.

Turns English recipe text into a ParsedRecipe without any network access.
This is the free baseline every extraction starts from; the remote model
only refines it.

The text is read line by line in one of four modes (preamble, ingredients,
instructions, tips). Headings switch the mode; without headings the shape
of a line decides ("2 cups flour" starts the ingredients, "Heat the oil in
a pan" starts the instructions).

Example:
    >>> extractor = RecipeFieldExtractor()
    >>> recipe = extractor.extract(
    ...     "Garlic Noodles\\n"
    ...     "Ingredients\\n"
    ...     "200 g noodles\\n"
    ...     "4 cloves garlic, minced\\n"
    ...     "Salt\\n"
    ...     "Method\\n"
    ...     "Boil the noodles for 8 minutes.\\n"
    ...     "Fry the garlic and toss everything together."
    ... )
    >>> recipe.title
    'Garlic Noodles'
    >>> [str(item) for item in recipe.ingredients(IngredientSection.SEASONING)]
    ['Salt']
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Final

from .exceptions import NoRecipeDetectedError
from .lexicon import (
    ACTION_VERBS,
    INSTRUCTION_OPENERS,
    LOWERCASE_NAME_WORDS,
    NOTE_OPENERS,
    SEASONING_NAMES,
)
from .models import IngredientItem, IngredientSection, ParsedRecipe
from .quantities import (
    AMOUNT_ALTERNATION,
    UNIT_ALTERNATION,
    disambiguate_unit,
    expand_vulgar_fractions,
    is_unit_token,
    normalize_amount,
    normalize_unit,
)
from .sequencing import DEFAULT_MAX_INSTRUCTIONS, sequence_instructions
from .timing import extract_servings, extract_times

logger = logging.getLogger(__name__)

INGREDIENT_HEADINGS: Final[frozenset[str]] = frozenset(
    {
        "ingredients",
        "ingredient",
        "ingredient list",
        "what you need",
        "what you'll need",
        "you will need",
        "you'll need",
        "shopping list",
        "材料",
    }
)

INSTRUCTION_HEADINGS: Final[frozenset[str]] = frozenset(
    {
        "instructions",
        "instruction",
        "directions",
        "method",
        "steps",
        "procedure",
        "procedures",
        "preparation",
        "how to make",
        "how to make it",
        "to make",
    }
)

TIP_HEADINGS: Final[frozenset[str]] = frozenset(
    {
        "tips",
        "tip",
        "notes",
        "note",
        "cook's notes",
        "cook's note",
        "chef's tips",
        "recipe notes",
        "variations",
    }
)

SUB_SECTION_WORDS: Final[dict[str, IngredientSection]] = {
    "marinade": IngredientSection.MARINADE,
    "marinades": IngredientSection.MARINADE,
    "marinate": IngredientSection.MARINADE,
    "seasoning": IngredientSection.SEASONING,
    "seasonings": IngredientSection.SEASONING,
    "spices": IngredientSection.SEASONING,
    "spice mix": IngredientSection.SEASONING,
    "spice rub": IngredientSection.SEASONING,
    "rub": IngredientSection.SEASONING,
    "調味料": IngredientSection.SEASONING,
    "batter": IngredientSection.BATTER,
    "coating": IngredientSection.BATTER,
    "sauce": IngredientSection.SAUCE,
    "dressing": IngredientSection.SAUCE,
    "glaze": IngredientSection.SAUCE,
    "gravy": IngredientSection.SAUCE,
    "dip": IngredientSection.SAUCE,
    "base": IngredientSection.BASE,
    "crust": IngredientSection.BASE,
    "dough": IngredientSection.DOUGH,
    "pastry": IngredientSection.DOUGH,
    "topping": IngredientSection.TOPPING,
    "toppings": IngredientSection.TOPPING,
    "garnish": IngredientSection.TOPPING,
    "to serve": IngredientSection.TOPPING,
    "frosting": IngredientSection.TOPPING,
    "icing": IngredientSection.TOPPING,
}

# Units that keep a bare seasoning in the seasoning section
SEASONING_UNITS: Final[frozenset[str]] = frozenset({"pinch", "dash", "tsp"})

_MARKDOWN: Final = re.compile(r"^[#*>\s]+|[#*\s]+$")
_BULLET: Final = re.compile(r"^[-–—•*·]\s*")
_NUMBERED_STEP: Final = re.compile(
    r"^(?:step\s*)?\d{1,2}\s*[.):]\s+(?P<rest>.+)$|^step\s+\d{1,2}\s*[.:]?\s*(?P<step_rest>.*)$",
    re.IGNORECASE,
)
_AMOUNT_START: Final = re.compile(rf"^(?:{AMOUNT_ALTERNATION})(?:\s|[a-z]|$)", re.IGNORECASE)
_PINCH_START: Final = re.compile(r"^(?:an?\s+)?(?:pinch|dash|handful)(?:es|s)?\b", re.IGNORECASE)
_A_UNIT_START: Final = re.compile(rf"^an?\s+(?:{UNIT_ALTERNATION})\s+(?:of\s+)?\S", re.IGNORECASE)
_QUALIFIER: Final = re.compile(r"[\s,;]*\(?\b(to taste|as needed)\b\)?\.?\s*$", re.IGNORECASE)
_MULTIPLIER: Final = re.compile(r"^(\d+)\s*x\s+(.+)$", re.IGNORECASE)
_CONCATENATED_UNIT: Final = re.compile(rf"(\d)((?:{UNIT_ALTERNATION}))\b", re.IGNORECASE)
_PINCH_ITEM: Final = re.compile(
    r"^(?:an?\s+)?(?P<unit>pinch(?:es)?|dash(?:es)?|handfuls?)\s+(?:of\s+)?(?P<name>.+)$",
    re.IGNORECASE,
)
_A_UNIT_ITEM: Final = re.compile(
    rf"^an?\s+(?P<unit>{UNIT_ALTERNATION})\.?\s+(?:of\s+)?(?P<name>.+)$", re.IGNORECASE
)
_AMOUNT_ITEM: Final = re.compile(
    rf"^(?P<amount>{AMOUNT_ALTERNATION})(?:\s*(?:-|–|to)\s*(?:{AMOUNT_ALTERNATION}))?\s*"
    rf"(?:(?P<unit>{UNIT_ALTERNATION})\.?\s+)?(?:of\s+)?(?P<name>.+)$",
    re.IGNORECASE,
)
_META_LINE: Final = re.compile(
    r"^(?:serves|servings?|yields?|makes|portions?|difficulty|"
    r"(?:prep(?:aration)?|cook(?:ing)?|baking|total|active|resting)\s*time)\b"
    r"|^\d+\s*(?:(?:-|–|to)\s*\d+\s*)?(?:servings?|portions?|people|persons|"
    r"min(?:ute)?s?|hours?|hrs?)\b",
    re.IGNORECASE,
)
_TIP_LINE: Final = re.compile(
    r"^(?:tips?|notes?|chef'?s\s+tips?|cook'?s\s+notes?)\s*:\s*(?P<rest>.+)$", re.IGNORECASE
)
_INLINE_HEADING: Final = re.compile(r"^(?P<head>[^:\d]{2,30}):\s*(?P<rest>.+)$")
_SUB_SECTION_PREFIX: Final = re.compile(r"^(?:for|to make)\s+(?:the\s+)?", re.IGNORECASE)
_ARTIFACTS: Final = re.compile(r"^[#*°]+\s*|\s*[#*°]+$")


class _Mode(Enum):
    PREAMBLE = "preamble"
    INGREDIENTS = "ingredients"
    INSTRUCTIONS = "instructions"
    TIPS = "tips"


@dataclass
class _ParseState:
    mode: _Mode = _Mode.PREAMBLE
    section: IngredientSection = IngredientSection.DISH
    section_explicit: bool = False
    section_has_items: bool = False
    force_new_step: bool = False
    title: str = ""
    description: list[str] = field(default_factory=list)
    sections: dict[IngredientSection, list[IngredientItem]] = field(default_factory=dict)
    last_section: IngredientSection | None = None
    instructions: list[str] = field(default_factory=list)
    tips: list[str] = field(default_factory=list)

    def enter_section(self, section: IngredientSection, explicit: bool) -> None:
        self.mode = _Mode.INGREDIENTS
        self.section = section
        self.section_explicit = explicit
        self.section_has_items = False


def _heading_key(line: str) -> str:
    return _MARKDOWN.sub("", line).rstrip(":：").strip().lower()


def _first_word(line: str) -> str:
    match = re.match(r"[^\w]*([\w'-]+)", line)
    return match.group(1).lower() if match else ""


def _is_verb_led(line: str) -> bool:
    word = _first_word(line)
    return word in ACTION_VERBS or word in INSTRUCTION_OPENERS


def _word_count(line: str) -> int:
    return len(line.split())


def sub_section_of(line: str) -> IngredientSection | None:
    """Ingredient section named by a heading line, if it is one.

    Example:
        >>> sub_section_of("For the marinade:")
        <IngredientSection.MARINADE: 'marinade'>
        >>> sub_section_of("soy sauce") is None
        True
    """
    stripped = _MARKDOWN.sub("", line)
    key = _heading_key(line)
    if not key:
        return None
    if "調味料" in key:
        return IngredientSection.SEASONING
    if key in SUB_SECTION_WORDS:
        return SUB_SECTION_WORDS[key]

    has_prefix = bool(_SUB_SECTION_PREFIX.match(key))
    remainder = _SUB_SECTION_PREFIX.sub("", key)
    words = remainder.split()
    if not words or len(words) > 4:
        return None
    if has_prefix and remainder in SUB_SECTION_WORDS:
        return SUB_SECTION_WORDS[remainder]
    if (has_prefix or stripped.endswith(":")) and words[-1] in SUB_SECTION_WORDS:
        return SUB_SECTION_WORDS[words[-1]]
    if has_prefix and len(words) <= 3 and not re.search(r"[\d,.]", remainder):
        # "For the chicken" names the main dish
        return IngredientSection.DISH
    return None


def title_case(name: str) -> str:
    """Capitalize each word except unit words and short connectives.

    Example:
        >>> title_case("salt and freshly ground pepper")
        'Salt and Freshly Ground Pepper'
    """
    words = name.split()
    cased: list[str] = []
    for position, word in enumerate(words):
        lowered = word.lower()
        bare = lowered.strip("(),.;")
        if position > 0 and (bare in LOWERCASE_NAME_WORDS or is_unit_token(bare)):
            cased.append(lowered)
            continue
        match = re.search(r"[^\W\d_]", lowered)
        if match is None:
            cased.append(lowered)
            continue
        index = match.start()
        cased.append(lowered[:index] + lowered[index].upper() + lowered[index + 1 :])
    return " ".join(cased)


def _clean_ingredient_text(line: str) -> str:
    text = _BULLET.sub("", line.strip())
    text = _ARTIFACTS.sub("", text)
    text = expand_vulgar_fractions(text)
    text = _CONCATENATED_UNIT.sub(r"\1 \2", text)
    return re.sub(r"\s+", " ", text).strip()


def _decimal_amount(amount: str) -> str:
    normalized = normalize_amount(amount.strip())
    if re.fullmatch(r"\d+,\d+", normalized):
        normalized = normalized.replace(",", ".")
    return normalized


def _split_leading_unit(name: str) -> tuple[str, str]:
    words = name.split(" ", 1)
    if len(words) == 2 and is_unit_token(words[0]):
        rest = re.sub(r"^of\s+", "", words[1], flags=re.IGNORECASE)
        return normalize_unit(words[0]), rest
    return "", name


def _build_item(amount: str, unit: str, name: str, note: str = "") -> IngredientItem:
    name = name.strip(" ,;")
    display = title_case(name)
    if note:
        display = f"{display} ({note})" if display else ""
    return IngredientItem(amount=amount, unit=disambiguate_unit(unit, name), name=display)


def parse_ingredient(line: str) -> IngredientItem:
    """Parse one ingredient line into amount, unit and name.

    Example:
        >>> parse_ingredient("1 1/2 tablespoons olive oil")
        IngredientItem(amount='1.5', unit='tbsp', name='Olive Oil')
        >>> parse_ingredient("salt to taste")
        IngredientItem(amount='0', unit='', name='Salt (to taste)')
        >>> parse_ingredient("a pinch of sugar")
        IngredientItem(amount='1', unit='pinch', name='Sugar')
    """
    text = _clean_ingredient_text(line)

    qualifier = _QUALIFIER.search(text)
    if qualifier and qualifier.start() > 0:
        base = text[: qualifier.start()].strip(" ,;")
        note = qualifier.group(1).lower()
        parsed = parse_ingredient(base)
        if parsed.amount:
            return parsed.model_copy(update={"name": f"{parsed.name} ({note})"})
        return _build_item("0", parsed.unit, base, note)

    multiplier = _MULTIPLIER.match(text)
    if multiplier:
        unit, name = _split_leading_unit(multiplier.group(2))
        return _build_item(multiplier.group(1), unit, name)

    pinch = _PINCH_ITEM.match(text)
    if pinch:
        return _build_item("1", normalize_unit(pinch.group("unit")), pinch.group("name"))

    a_unit = _A_UNIT_ITEM.match(text)
    if a_unit:
        return _build_item("1", normalize_unit(a_unit.group("unit")), a_unit.group("name"))

    amounted = _AMOUNT_ITEM.match(text)
    if amounted:
        amount = _decimal_amount(amounted.group("amount"))
        unit = normalize_unit(amounted.group("unit") or "")
        name = amounted.group("name")
        if not unit:
            unit, name = _split_leading_unit(name)
        return _build_item(amount, unit, name)

    return _build_item("", "", text)


def _is_implicit_seasoning(item: IngredientItem) -> bool:
    base = re.sub(r"\s*\([^)]*\)", "", item.name).strip().lower()
    if base not in SEASONING_NAMES:
        return False
    return item.amount in ("", "0") or item.unit in SEASONING_UNITS


def _looks_like_quantity(line: str) -> bool:
    text = _BULLET.sub("", expand_vulgar_fractions(line))
    return bool(
        _AMOUNT_START.match(text)
        or _PINCH_START.match(text)
        or _A_UNIT_START.match(text)
        or _MULTIPLIER.match(text)
        or _QUALIFIER.search(text)
    )


def _is_bare_quantity(text: str) -> bool:
    """Whether text is only an amount with an optional unit, e.g. "2 tbsp"."""
    cleaned = _clean_ingredient_text(text)
    if re.fullmatch(rf"(?:{AMOUNT_ALTERNATION})\.?", cleaned, re.IGNORECASE):
        return True
    match = _AMOUNT_ITEM.match(cleaned)
    if match is None:
        return False
    name = match.group("name").split(",")[0].strip(" .;")
    return not name or (match.group("unit") is None and is_unit_token(name))


def _is_note_line(line: str) -> bool:
    lowered = line.lower()
    if lowered.startswith("(") and lowered.endswith(")"):
        return True
    return not _AMOUNT_START.match(lowered) and lowered.startswith(NOTE_OPENERS)


def _clean_instruction(line: str) -> str:
    text = _BULLET.sub("", line.strip())
    numbered = _NUMBERED_STEP.match(text)
    if numbered:
        text = numbered.group("rest") or numbered.group("step_rest") or ""
    return _ARTIFACTS.sub("", text).strip()


def _numbered_step(line: str) -> str | None:
    match = _NUMBERED_STEP.match(line)
    if not match:
        return None
    rest = (match.group("rest") or match.group("step_rest") or "").strip()
    if match.group("step_rest") is not None or _is_verb_led(rest) or _word_count(rest) > 4:
        return rest
    return None


class RecipeFieldExtractor:
    """Extracts recipe fields from English text with fixed rules.

    Args:
        max_instructions: Upper bound on the number of instruction steps
        logger: Logger to use instead of the module logger
    """

    def __init__(
        self,
        max_instructions: int = DEFAULT_MAX_INSTRUCTIONS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.max_instructions = max_instructions
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, text: str) -> ParsedRecipe:
        """Extract a recipe from text.

        Args:
            text: English recipe text, one element per line

        Returns:
            Parsed recipe with instructions sequenced and capped

        Raises:
            NoRecipeDetectedError: If no title, ingredient or instruction was found
        """
        state = _ParseState()
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
        for index, raw in enumerate(lines):
            self._consume(state, raw.strip(), lines[index + 1 :])

        instructions = sequence_instructions(
            [step for step in state.instructions if step], self.max_instructions
        )
        prep, cook = extract_times(text, instructions)
        recipe = ParsedRecipe(
            title=_MARKDOWN.sub("", state.title).strip(),
            description=" ".join(state.description).strip(),
            servings=extract_servings(text),
            prep_time_minutes=prep,
            cook_time_minutes=cook,
            ingredients_by_section={
                section: state.sections[section]
                for section in IngredientSection
                if state.sections.get(section)
            },
            instructions=instructions,
            tips=state.tips,
        )

        if recipe.is_empty:
            raise NoRecipeDetectedError("No recipe fields found in text", characters=len(text))

        self.logger.debug(
            f"Extracted '{recipe.title}': {len(recipe.all_ingredients)} ingredients, "
            f"{len(recipe.instructions)} steps"
        )
        return recipe

    def _consume(self, state: _ParseState, line: str, following: list[str]) -> None:
        if not line:
            self._blank(state)
            return
        if not re.search(r"[^\W\d_]", line):
            return
        key = _heading_key(line)
        if key == "done":
            return
        if self._heading(state, line, key, following):
            return

        tip = _TIP_LINE.match(line)
        if tip:
            state.tips.append(tip.group("rest").strip())
            return

        inline = _INLINE_HEADING.match(line)
        if inline and state.mode is not _Mode.INSTRUCTIONS and not _META_LINE.match(line):
            rest = inline.group("rest").strip()
            head = inline.group("head").strip()
            if _is_bare_quantity(rest) and not _SUB_SECTION_PREFIX.match(head):
                # "Soy sauce: 2 tbsp" is an ingredient written name first
                line = f"{rest} {head}"
            elif self._heading(state, f"{head}:", _heading_key(head), following):
                self._consume(state, rest, following)
                return

        if _META_LINE.match(line):
            return

        step = _numbered_step(_BULLET.sub("", line))
        if step is not None:
            state.mode = _Mode.INSTRUCTIONS
            cleaned = _clean_instruction(step)
            if cleaned:
                state.instructions.append(cleaned)
            state.force_new_step = not cleaned
            return

        if state.mode is _Mode.PREAMBLE:
            self._preamble(state, line)
        elif state.mode is _Mode.INGREDIENTS:
            self._ingredient_line(state, line)
        elif state.mode is _Mode.INSTRUCTIONS:
            self._instruction_line(state, line)
        else:
            state.tips.append(_BULLET.sub("", line))

    def _blank(self, state: _ParseState) -> None:
        if state.mode is _Mode.INGREDIENTS and state.section_explicit and state.section_has_items:
            state.section = IngredientSection.DISH
            state.section_explicit = False
            state.section_has_items = False
        elif state.mode is _Mode.INSTRUCTIONS:
            state.force_new_step = True

    def _heading(self, state: _ParseState, line: str, key: str, following: list[str]) -> bool:
        if key in INGREDIENT_HEADINGS or re.match(r"^ingredients?\s*\(", key):
            state.enter_section(IngredientSection.DISH, explicit=False)
            return True
        if key in INSTRUCTION_HEADINGS:
            state.mode = _Mode.INSTRUCTIONS
            state.force_new_step = True
            return True
        if key in TIP_HEADINGS:
            state.mode = _Mode.TIPS
            return True

        section = sub_section_of(line)
        if section is None:
            return False
        if state.mode is _Mode.INSTRUCTIONS:
            upcoming = next((text.strip() for text in following if text.strip()), "")
            if not _looks_like_quantity(upcoming):
                # Method sub-heading such as "For the sauce"
                state.force_new_step = True
                return True
        state.enter_section(section, explicit=True)
        return True

    def _preamble(self, state: _ParseState, line: str) -> None:
        if _looks_like_quantity(line):
            state.mode = _Mode.INGREDIENTS
            self._ingredient_line(state, line)
        elif _is_verb_led(line) and _word_count(line) >= 3:
            state.mode = _Mode.INSTRUCTIONS
            self._instruction_line(state, line)
        elif not state.title:
            state.title = line
        elif len(line) > 5:
            state.description.append(line)

    def _ingredient_line(self, state: _ParseState, line: str) -> None:
        stripped = _BULLET.sub("", line)
        if state.last_section is not None and _is_note_line(stripped):
            self._fold_note(state, stripped)
            return

        quantity = _looks_like_quantity(line)
        if not quantity and _is_verb_led(stripped) and _word_count(stripped) >= 3:
            state.mode = _Mode.INSTRUCTIONS
            state.force_new_step = True
            self._instruction_line(state, stripped)
            return

        if quantity or _BULLET.match(line) or _word_count(stripped) <= 6:
            self._add_ingredient(state, stripped)
        elif not state.sections and not state.description:
            state.description.append(stripped)
        else:
            state.mode = _Mode.INSTRUCTIONS
            state.force_new_step = True
            self._instruction_line(state, stripped)

    def _add_ingredient(self, state: _ParseState, line: str) -> None:
        item = parse_ingredient(line)
        if not item.name:
            return
        section = state.section
        if not state.section_explicit and section is IngredientSection.DISH:
            if _is_implicit_seasoning(item):
                section = IngredientSection.SEASONING
        state.sections.setdefault(section, []).append(item)
        state.last_section = section
        state.section_has_items = True

    def _fold_note(self, state: _ParseState, line: str) -> None:
        items = state.sections[state.last_section]
        note = line[1:-1] if line.startswith("(") and line.endswith(")") else line
        previous = items[-1]
        items[-1] = previous.model_copy(update={"name": f"{previous.name} ({note.strip()})"})

    def _instruction_line(self, state: _ParseState, line: str) -> None:
        cleaned = _clean_instruction(line)
        if not cleaned or cleaned.lower() == "done":
            return
        if not state.instructions or state.force_new_step:
            state.instructions.append(cleaned)
            state.force_new_step = False
            return

        previous = state.instructions[-1]
        starts_new = (
            previous.rstrip().endswith((".", "!", "?"))
            or (_first_word(cleaned) in ACTION_VERBS and len(cleaned) > 5)
            or (cleaned[:1].isupper() and len(cleaned) > 10)
        )
        if starts_new:
            state.instructions.append(cleaned)
        else:
            state.instructions[-1] = f"{previous} {cleaned}"
