"""Fixed English recipe vocabularies shared by the text components."""

from __future__ import annotations

from typing import Final

# Words that open an instruction sentence
ACTION_VERBS: Final[frozenset[str]] = frozenset(
    {
        "add",
        "allow",
        "arrange",
        "bake",
        "beat",
        "blend",
        "boil",
        "braise",
        "bring",
        "broil",
        "brown",
        "brush",
        "chill",
        "chop",
        "coat",
        "combine",
        "cook",
        "cool",
        "cover",
        "crush",
        "cut",
        "deglaze",
        "dice",
        "dip",
        "divide",
        "drain",
        "drizzle",
        "fold",
        "fry",
        "garnish",
        "glaze",
        "grate",
        "grease",
        "grill",
        "heat",
        "knead",
        "ladle",
        "leave",
        "let",
        "line",
        "marinate",
        "mash",
        "melt",
        "mince",
        "mix",
        "pat",
        "peel",
        "place",
        "poach",
        "pour",
        "preheat",
        "prepare",
        "put",
        "reduce",
        "refrigerate",
        "remove",
        "repeat",
        "rest",
        "return",
        "rinse",
        "roast",
        "roll",
        "saute",
        "sauté",
        "sear",
        "season",
        "serve",
        "set",
        "simmer",
        "slice",
        "soak",
        "spoon",
        "spread",
        "sprinkle",
        "squeeze",
        "steam",
        "stir",
        "stir-fry",
        "strain",
        "toast",
        "top",
        "toss",
        "transfer",
        "turn",
        "wash",
        "whip",
        "whisk",
        "wrap",
    }
)

# Connectives that commonly open an instruction sentence
INSTRUCTION_OPENERS: Final[frozenset[str]] = frozenset(
    {"in", "meanwhile", "once", "when", "while", "then", "after", "using", "finally", "next"}
)

# Verbs scored by the recipe classifier
COOKING_VERBS: Final[tuple[str, ...]] = (
    "preheat",
    "bake",
    "cook",
    "simmer",
    "boil",
    "fry",
    "sauté",
    "roast",
    "mix",
    "combine",
    "add",
    "heat",
    "stir",
    "whisk",
    "beat",
    "fold",
    "knead",
    "roll",
    "season",
    "chop",
    "slice",
    "dice",
    "cut",
    "peel",
    "grate",
    "pour",
    "sprinkle",
    "steam",
    "grill",
    "marinate",
    "brush",
    "glaze",
)

COMMON_INGREDIENTS: Final[tuple[str, ...]] = (
    "salt",
    "pepper",
    "garlic",
    "onion",
    "butter",
    "oil",
    "flour",
    "sugar",
    "egg",
    "eggs",
    "milk",
    "cheese",
    "chicken",
    "beef",
    "pork",
    "fish",
    "tomato",
    "carrot",
    "potato",
    "water",
    "vinegar",
    "lemon",
    "herb",
    "spice",
    "rice",
    "pasta",
    "noodle",
    "bread",
    "meat",
    "vegetable",
    "fruit",
    "sauce",
    "broth",
    "stock",
    "soy",
    "ginger",
    "scallion",
    "chili",
    "sesame",
)

# Words marking a line as an ingredient line during OCR cleanup
INGREDIENT_KEYWORDS: Final[tuple[str, ...]] = (
    "chicken",
    "beef",
    "pork",
    "fish",
    "garlic",
    "onion",
    "tomato",
    "pepper",
    "salt",
    "sugar",
    "oil",
    "butter",
    "flour",
    "rice",
    "noodle",
    "vegetable",
    "herb",
    "spice",
    "egg",
    "milk",
    "cream",
    "cheese",
    "ginger",
    "soy",
    "water",
    "lemon",
)

# Bare seasonings that belong to the seasoning section when no heading says otherwise
SEASONING_NAMES: Final[frozenset[str]] = frozenset(
    {
        "salt",
        "pepper",
        "sea salt",
        "kosher salt",
        "black pepper",
        "white pepper",
        "ground black pepper",
        "ground white pepper",
        "salt and pepper",
        "salt & pepper",
        "msg",
        "paprika",
        "smoked paprika",
        "cayenne",
        "cayenne pepper",
        "chili flakes",
        "chilli flakes",
        "red pepper flakes",
        "chili powder",
        "chilli powder",
        "cumin",
        "ground cumin",
        "garlic powder",
        "onion powder",
        "five spice",
        "five spice powder",
        "five-spice powder",
        "nutmeg",
        "dried oregano",
        "dried thyme",
    }
)

LIQUID_WORDS: Final[frozenset[str]] = frozenset(
    {
        "water",
        "milk",
        "buttermilk",
        "cream",
        "oil",
        "broth",
        "stock",
        "juice",
        "wine",
        "vinegar",
        "beer",
        "sake",
        "mirin",
        "syrup",
        "sauce",
        "coffee",
        "tea",
        "rum",
        "vodka",
        "brandy",
        "whiskey",
        "whisky",
        "liqueur",
        "soda",
        "lemonade",
        "kefir",
        "yogurt drink",
    }
)

SOLID_WORDS: Final[frozenset[str]] = frozenset(
    {
        "meat",
        "beef",
        "pork",
        "chicken",
        "lamb",
        "turkey",
        "veal",
        "fish",
        "salmon",
        "tuna",
        "cod",
        "shrimp",
        "prawn",
        "bacon",
        "ham",
        "sausage",
        "steak",
        "mince",
        "breast",
        "thigh",
        "fillet",
        "flour",
        "sugar",
        "cheese",
        "parmesan",
        "cheddar",
        "mozzarella",
        "butter",
        "chocolate",
        "pasta",
        "spaghetti",
        "noodle",
        "rice",
        "oat",
        "nut",
        "almond",
        "walnut",
        "pecan",
        "raisin",
        "bean",
        "lentil",
        "spinach",
        "mushroom",
        "potato",
        "carrot",
        "tofu",
        "bread",
        "cereal",
    }
)

# Descriptors that continue the previous ingredient rather than start a new one
NOTE_OPENERS: Final[tuple[str, ...]] = (
    "(",
    "finely",
    "roughly",
    "thinly",
    "coarsely",
    "freshly",
    "chopped",
    "sliced",
    "diced",
    "minced",
    "grated",
    "peeled",
    "divided",
    "softened",
    "melted",
    "optional",
    "plus more",
    "at room temperature",
    "cut into",
    "or ",
)

# Words kept lowercase when ingredient names are title-cased
LOWERCASE_NAME_WORDS: Final[frozenset[str]] = frozenset(
    {"of", "a", "an", "the", "with", "and", "or", "to", "for", "in", "into", "on", "at"}
)
