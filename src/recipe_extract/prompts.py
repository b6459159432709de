"""Prompts for the remote model.

The recipe prompt enumerates the exact JSON object the pipeline parses; keep
it in sync with ``ParsedRecipe.to_payload``.
"""

from __future__ import annotations

from typing import Final

from .models import IngredientSection

_SECTION_KEYS: Final = ", ".join(f'"{section.payload_key}"' for section in IngredientSection)
_SECTION_FIELDS: Final = ",\n  ".join(
    f'"{section.payload_key}": [{{"amount": string, "unit": string, "name": string}}]'
    for section in IngredientSection
)

RECIPE_SYSTEM_PROMPT: Final[str] = f"""You are a recipe extraction assistant. \
Convert the recipe you are given into a single JSON object and output nothing else.

<schema>
{{
  "title": string,
  "description": string,
  "servings": integer (0 if not stated),
  "prepTime": integer minutes (0 if not stated),
  "cookTime": integer minutes (0 if not stated),
  {_SECTION_FIELDS},
  "instructions": [string],
  "tips": [string]
}}
</schema>

<rules>
- Ingredient sections are {_SECTION_KEYS}. Put every ingredient in exactly one
  section. Use "dishIngredients" unless a heading such as "Sauce", "Marinade",
  "Dough" or "Topping" groups it. Bare salt, pepper and similar go to
  "seasoningIngredients".
- Amounts are decimal strings: "1/2" becomes "0.5", "1 1/2" becomes "1.5",
  "1/3" becomes "0.333". Use "" when no amount is given.
- For "to taste" or "as needed" use amount "0" and append the qualifier to the
  name, e.g. "Salt (to taste)". For "a pinch" use amount "1" and unit "pinch".
- Units are one of: tbsp, tsp, cup, g, kg, ml, l, oz, fl_oz, lb, piece, pinch,
  dash, clove, slice, bunch, head, strand, can, stick, sprig, handful, or "".
  Use fl_oz for liquids measured in ounces and oz for solids.
- Ingredient names use Capitalized Words, e.g. "Olive Oil".
- At most 10 instructions. Steps that prepare a marinade or sauce come before
  the steps that use it. Do not number the steps.
- Convert every time to minutes: 1 hour is 60, overnight is 1440.
- Extract only what the text says; never invent ingredients or steps.
- Everything must be in English.
</rules>"""

RECIPE_TEXT_PROMPT: Final[str] = "Extract the recipe from this text:\n\n{text}"

RECIPE_IMAGE_PROMPT: Final[str] = (
    "Extract the recipe shown in these images. The images are consecutive pages "
    "of the same recipe."
)

TRANSLATION_SYSTEM_PROMPT: Final[str] = (
    "You translate cooking recipes. Translate the user's text from {source} to {target}. "
    "Keep line breaks, numbers, amounts and list structure exactly as they are. "
    "Output only the translation."
)


def translation_system_prompt(source: str, target: str) -> str:
    """Build the translation instruction.

    Args:
        source: Source language code, or "auto"
        target: Target language code

    Returns:
        System prompt text
    """
    source_name = "the detected language" if source == "auto" else f"language '{source}'"
    return TRANSLATION_SYSTEM_PROMPT.format(source=source_name, target=f"language '{target}'")
