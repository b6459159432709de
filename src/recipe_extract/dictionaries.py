"""Static per-language term tables.

Two kinds of table, both keyed by the closed ``Language`` enum:

- ``TERM_TABLES`` maps foreign recipe terms (section headers, ingredients,
  units, cooking verbs and phrases) to English. Used for dictionary
  translation when no remote translator answers.
- ``UNIT_NAMES`` maps controlled-vocabulary unit tokens to the unit word
  shown in a target language.

Substitution order is explicit: ``terms_longest_first`` sorts by key length,
so "Marinaden" is tried before "Marinade" and "Hähnchenbrust" before
"Hähnchen".
"""

from __future__ import annotations

from functools import cache
from typing import Final

from .models import Language, LanguageTag

GERMAN_TERMS: Final[dict[str, str]] = {
    # Section headers
    "ZUTATEN": "INGREDIENTS",
    "Zutat": "INGREDIENT",
    "Gewürze": "SEASONINGS",
    "Gewürz": "SEASONING",
    "Marinaden": "MARINADES",
    "Marinade": "MARINADE",
    "Anleitungen": "INSTRUCTIONS",
    "Anleitung": "INSTRUCTIONS",
    "Schritte": "PROCEDURES",
    "Schritt": "STEP",
    "Zubereitung": "PREPARATION",
    "Rezept": "RECIPE",
    "Soße": "SAUCE",
    "Teig": "DOUGH",
    "Belag": "TOPPING",
    "Tipps": "TIPS",
    "Portionen": "servings",
    "für": "for",
    # Ingredients
    "Hähnchenbrust": "chicken breast",
    "Hähnchen": "chicken",
    "Hühnerflügel": "chicken wings",
    "Hühner": "chicken",
    "Huhn": "chicken",
    "Rindfleisch": "beef",
    "Schweinefleisch": "pork",
    "Schweinehack": "minced pork",
    "Hackfleisch": "minced meat",
    "Fischsauce": "fish sauce",
    "Fisch": "fish",
    "Salz": "salt",
    "Zucker": "sugar",
    "Olivenöl": "olive oil",
    "Öl": "oil",
    "Sojasauce": "soy sauce",
    "Knoblauch": "garlic",
    "Knobi": "garlic",
    "Ingwer": "ginger",
    "Zwiebeln": "onions",
    "Zwiebel": "onion",
    "Pfeffer": "pepper",
    "Zitrone": "lemon",
    "Wasser": "water",
    "Butter": "butter",
    "Mehl": "flour",
    "Stärke": "starch",
    "Reis": "rice",
    "Nudeln": "noodles",
    "Tomaten": "tomatoes",
    "Tomate": "tomato",
    "Kartoffeln": "potatoes",
    "Kartoffel": "potato",
    "Möhren": "carrots",
    "Möhre": "carrot",
    "Backpulver": "baking powder",
    "Honig": "honey",
    "Brühe": "broth",
    "Milch": "milk",
    "Sahne": "cream",
    "Eier": "eggs",
    "Brust": "breast",
    # Units
    "Stücke": "pieces",
    "Stück": "piece",
    "Scheiben": "slices",
    "Scheibe": "slice",
    "Tassen": "cups",
    "Tasse": "cup",
    "Esslöffel": "tbsp",
    "Teelöffel": "tsp",
    "EL": "tbsp",
    "TL": "tsp",
    "Kilogramm": "kg",
    "Gramm": "g",
    "Milliliter": "ml",
    "Liter": "l",
    "Prise": "pinch",
    "Zehen": "cloves",
    "Zehe": "clove",
    "Bünde": "bunches",
    "Bund": "bunch",
    "Köpfe": "heads",
    "Kopf": "head",
    "Stränge": "strands",
    "Strang": "strand",
    # Cooking verbs and phrases
    "in Scheiben schneiden": "slice",
    "bei niedriger Hitze": "over low heat",
    "bei mittlerer Hitze": "over medium heat",
    "bei hoher Hitze": "over high heat",
    "erhitzen": "heat",
    "erwärmen": "warm",
    "anbraten": "pan-fry",
    "braten": "fry",
    "schmoren": "braise",
    "kochen": "cook",
    "backen": "bake",
    "rösten": "roast",
    "grillen": "grill",
    "dämpfen": "steam",
    "sieden": "boil",
    "köcheln": "simmer",
    "marinieren": "marinate",
    "schneiden": "cut",
    "hacken": "chop",
    "zerkleinern": "mince",
    "reiben": "grate",
    "schälen": "peel",
    "hinzufügen": "add",
    "verrühren": "whisk",
    "rühren": "stir",
    "mischen": "mix",
    "unterheben": "fold",
    "kneten": "knead",
    "servieren": "serve",
    "garnieren": "garnish",
    "würzen": "season",
    "abschmecken": "taste",
    "vorheizen": "preheat",
    "goldbraun": "golden brown",
    "duftend": "fragrant",
    "Minuten": "minutes",
    "Minute": "minute",
    "Stunden": "hours",
    "Stunde": "hour",
    "über Nacht": "overnight",
    "bis": "until",
    "und": "and",
}

FRENCH_TERMS: Final[dict[str, str]] = {
    "Ingrédients": "INGREDIENTS",
    "Préparation": "PREPARATION",
    "Étapes": "STEPS",
    "Marinade": "MARINADE",
    "Garniture": "TOPPING",
    "Pâte": "DOUGH",
    "Astuces": "TIPS",
    "personnes": "servings",
    "blanc de poulet": "chicken breast",
    "poulet": "chicken",
    "bœuf": "beef",
    "boeuf": "beef",
    "porc": "pork",
    "poisson": "fish",
    "sel": "salt",
    "poivre": "pepper",
    "sucre": "sugar",
    "huile d'olive": "olive oil",
    "huile": "oil",
    "ail": "garlic",
    "oignons": "onions",
    "oignon": "onion",
    "beurre": "butter",
    "farine": "flour",
    "œufs": "eggs",
    "oeufs": "eggs",
    "lait": "milk",
    "crème": "cream",
    "eau": "water",
    "citron": "lemon",
    "riz": "rice",
    "pommes de terre": "potatoes",
    "tomates": "tomatoes",
    "carottes": "carrots",
    "bouillon": "broth",
    "cuillères à soupe": "tbsp",
    "cuillère à soupe": "tbsp",
    "cuillères à café": "tsp",
    "cuillère à café": "tsp",
    "pincée": "pinch",
    "gousses": "cloves",
    "gousse": "clove",
    "tranches": "slices",
    "tranche": "slice",
    "préchauffer le four": "preheat the oven",
    "à feu moyen": "over medium heat",
    "à feu doux": "over low heat",
    "à feu vif": "over high heat",
    "faire revenir": "sauté",
    "faire cuire": "cook",
    "cuire": "cook",
    "mélanger": "mix",
    "ajouter": "add",
    "couper": "cut",
    "hacher": "chop",
    "éplucher": "peel",
    "servir": "serve",
    "jusqu'à": "until",
    "minutes": "minutes",
    "heures": "hours",
    "heure": "hour",
}

SPANISH_TERMS: Final[dict[str, str]] = {
    "Ingredientes": "INGREDIENTS",
    "Preparación": "PREPARATION",
    "Instrucciones": "INSTRUCTIONS",
    "Pasos": "STEPS",
    "Salsa": "SAUCE",
    "Masa": "DOUGH",
    "Consejos": "TIPS",
    "porciones": "servings",
    "pechuga de pollo": "chicken breast",
    "pollo": "chicken",
    "carne de res": "beef",
    "cerdo": "pork",
    "pescado": "fish",
    "sal": "salt",
    "pimienta": "pepper",
    "azúcar": "sugar",
    "aceite de oliva": "olive oil",
    "aceite": "oil",
    "dientes de ajo": "garlic cloves",
    "diente de ajo": "garlic clove",
    "ajo": "garlic",
    "cebolla": "onion",
    "mantequilla": "butter",
    "harina": "flour",
    "huevos": "eggs",
    "leche": "milk",
    "agua": "water",
    "limón": "lemon",
    "arroz": "rice",
    "tomates": "tomatoes",
    "caldo": "broth",
    "cucharaditas": "tsp",
    "cucharadita": "tsp",
    "cucharadas": "tbsp",
    "cucharada": "tbsp",
    "tazas": "cups",
    "taza": "cup",
    "pizca": "pinch",
    "a fuego medio": "over medium heat",
    "a fuego lento": "over low heat",
    "hornear": "bake",
    "freír": "fry",
    "cocinar": "cook",
    "mezclar": "mix",
    "añadir": "add",
    "agregar": "add",
    "cortar": "cut",
    "picar": "chop",
    "servir": "serve",
    "hasta": "until",
    "minutos": "minutes",
    "horas": "hours",
    "hora": "hour",
}

ITALIAN_TERMS: Final[dict[str, str]] = {
    "Ingredienti": "INGREDIENTS",
    "Preparazione": "PREPARATION",
    "Procedimento": "INSTRUCTIONS",
    "Impasto": "DOUGH",
    "Condimento": "SEASONING",
    "Consigli": "TIPS",
    "persone": "servings",
    "petto di pollo": "chicken breast",
    "pollo": "chicken",
    "manzo": "beef",
    "maiale": "pork",
    "pesce": "fish",
    "sale": "salt",
    "pepe": "pepper",
    "zucchero": "sugar",
    "olio extravergine di oliva": "extra virgin olive oil",
    "olio d'oliva": "olive oil",
    "olio": "oil",
    "spicchi d'aglio": "garlic cloves",
    "aglio": "garlic",
    "cipolla": "onion",
    "burro": "butter",
    "farina": "flour",
    "uova": "eggs",
    "latte": "milk",
    "acqua": "water",
    "limone": "lemon",
    "riso": "rice",
    "pomodori": "tomatoes",
    "brodo": "broth",
    "cucchiaini": "tsp",
    "cucchiaino": "tsp",
    "cucchiai": "tbsp",
    "cucchiaio": "tbsp",
    "pizzico": "pinch",
    "spicchi": "cloves",
    "spicchio": "clove",
    "q.b.": "to taste",
    "a fuoco medio": "over medium heat",
    "a fuoco basso": "over low heat",
    "cuocere": "cook",
    "mescolare": "mix",
    "aggiungere": "add",
    "tagliare": "cut",
    "tritare": "chop",
    "servire": "serve",
    "fino a": "until",
    "minuti": "minutes",
    "ore": "hours",
}

DUTCH_TERMS: Final[dict[str, str]] = {
    "Ingrediënten": "INGREDIENTS",
    "Bereiding": "PREPARATION",
    "Saus": "SAUCE",
    "Deeg": "DOUGH",
    "Tips": "TIPS",
    "personen": "servings",
    "kipfilet": "chicken breast",
    "kip": "chicken",
    "rundvlees": "beef",
    "varkensvlees": "pork",
    "vis": "fish",
    "zout": "salt",
    "peper": "pepper",
    "suiker": "sugar",
    "olijfolie": "olive oil",
    "olie": "oil",
    "knoflook": "garlic",
    "ui": "onion",
    "boter": "butter",
    "bloem": "flour",
    "eieren": "eggs",
    "melk": "milk",
    "citroen": "lemon",
    "rijst": "rice",
    "bouillon": "broth",
    "eetlepels": "tbsp",
    "eetlepel": "tbsp",
    "theelepels": "tsp",
    "theelepel": "tsp",
    "snufje": "pinch",
    "tenen": "cloves",
    "teen": "clove",
    "bakken": "fry",
    "koken": "cook",
    "roeren": "stir",
    "toevoegen": "add",
    "snijden": "cut",
    "serveren": "serve",
    "minuten": "minutes",
    "uur": "hour",
    "tot": "until",
}

CHINESE_TERMS: Final[dict[str, str]] = {
    "材料": "INGREDIENTS",
    "調味料": "SEASONINGS",
    "调味料": "SEASONINGS",
    "醃料": "MARINADES",
    "腌料": "MARINADES",
    "醬汁": "SAUCE",
    "酱汁": "SAUCE",
    "步驟": "PROCEDURES",
    "步骤": "PROCEDURES",
    "做法": "INSTRUCTIONS",
    "雞翼": "chicken wings",
    "雞胸肉": "chicken breast",
    "鸡胸肉": "chicken breast",
    "雞肉": "chicken",
    "鸡肉": "chicken",
    "雞": "chicken",
    "鸡": "chicken",
    "牛肉": "beef",
    "豬肉": "pork",
    "猪肉": "pork",
    "魚": "fish",
    "鱼": "fish",
    "鹽": "salt",
    "盐": "salt",
    "糖": "sugar",
    "醬油": "soy sauce",
    "酱油": "soy sauce",
    "油": "oil",
    "蒜": "garlic",
    "薑": "ginger",
    "姜": "ginger",
    "洋蔥": "onion",
    "洋葱": "onion",
    "胡椒": "pepper",
    "檸檬": "lemon",
    "柠檬": "lemon",
    "水": "water",
    "切片": "slice",
    "片": "slice",
    "個": "piece",
    "个": "piece",
    "杯": "cup",
    "湯匙": "tbsp",
    "汤匙": "tbsp",
    "茶匙": "tsp",
    "毫升": "ml",
    "克": "g",
    "加熱": "heat",
    "加热": "heat",
    "炒": "stir-fry",
    "煮": "cook",
    "烤": "roast",
    "炸": "fry",
    "蒸": "steam",
    "醃": "marinate",
    "腌": "marinate",
    "切碎": "chop",
    "切": "cut",
    "磨": "grind",
    "擠": "juice",
    "加入": "add",
    "攪拌": "stir",
    "搅拌": "stir",
    "直到": "until",
    "金黃色": "golden brown",
    "金黄色": "golden brown",
    "香": "fragrant",
    "低火": "low heat",
    "分鐘": "minutes",
    "分钟": "minutes",
}

JAPANESE_TERMS: Final[dict[str, str]] = {
    "材料": "INGREDIENTS",
    "調味料": "SEASONINGS",
    "作り方": "INSTRUCTIONS",
    "手順": "PROCEDURES",
    "鶏肉": "chicken",
    "鶏": "chicken",
    "牛肉": "beef",
    "豚肉": "pork",
    "魚": "fish",
    "塩": "salt",
    "砂糖": "sugar",
    "醤油": "soy sauce",
    "油": "oil",
    "にんにく": "garlic",
    "生姜": "ginger",
    "玉ねぎ": "onion",
    "コショウ": "pepper",
    "レモン": "lemon",
    "水": "water",
    "大さじ": "tbsp",
    "小さじ": "tsp",
    "切る": "cut",
    "炒める": "stir-fry",
    "煮る": "cook",
    "焼く": "roast",
    "揚げる": "fry",
    "蒸す": "steam",
    "漬ける": "marinate",
    "分": "minutes",
}

TERM_TABLES: Final[dict[Language, dict[str, str]]] = {
    Language.GERMAN: GERMAN_TERMS,
    Language.FRENCH: FRENCH_TERMS,
    Language.SPANISH: SPANISH_TERMS,
    Language.ITALIAN: ITALIAN_TERMS,
    Language.DUTCH: DUTCH_TERMS,
    Language.CHINESE: CHINESE_TERMS,
    Language.JAPANESE: JAPANESE_TERMS,
}

UNIT_NAMES: Final[dict[Language, dict[str, str]]] = {
    Language.GERMAN: {
        "tbsp": "EL",
        "tsp": "TL",
        "cup": "Tasse",
        "piece": "Stück",
        "pinch": "Prise",
        "dash": "Spritzer",
        "clove": "Zehe",
        "slice": "Scheibe",
        "bunch": "Bund",
        "head": "Kopf",
        "can": "Dose",
    },
    Language.FRENCH: {
        "tbsp": "c. à s.",
        "tsp": "c. à c.",
        "cup": "tasse",
        "piece": "pièce",
        "pinch": "pincée",
        "clove": "gousse",
        "slice": "tranche",
        "bunch": "botte",
        "can": "boîte",
    },
    Language.SPANISH: {
        "tbsp": "cda",
        "tsp": "cdta",
        "cup": "taza",
        "piece": "pieza",
        "pinch": "pizca",
        "clove": "diente",
        "slice": "rebanada",
        "bunch": "manojo",
        "can": "lata",
    },
    Language.ITALIAN: {
        "tbsp": "cucchiaio",
        "tsp": "cucchiaino",
        "cup": "tazza",
        "piece": "pezzo",
        "pinch": "pizzico",
        "clove": "spicchio",
        "slice": "fetta",
        "bunch": "mazzo",
        "can": "lattina",
    },
    Language.DUTCH: {
        "tbsp": "el",
        "tsp": "tl",
        "cup": "kopje",
        "piece": "stuk",
        "pinch": "snufje",
        "clove": "teen",
        "slice": "plak",
        "bunch": "bos",
        "can": "blik",
    },
    Language.CHINESE: {
        "tbsp": "湯匙",
        "tsp": "茶匙",
        "cup": "杯",
        "g": "克",
        "kg": "公斤",
        "ml": "毫升",
        "l": "公升",
        "oz": "盎司",
        "lb": "磅",
        "piece": "個",
        "slice": "片",
        "clove": "瓣",
        "pinch": "少許",
        "bunch": "把",
    },
    Language.JAPANESE: {
        "tbsp": "大さじ",
        "tsp": "小さじ",
        "cup": "カップ",
        "piece": "個",
        "clove": "片",
        "pinch": "少々",
        "slice": "枚",
        "bunch": "束",
    },
}


@cache
def terms_longest_first(language: Language) -> tuple[tuple[str, str], ...]:
    """Term pairs of one table, longest key first, ties broken alphabetically."""
    return tuple(sorted(TERM_TABLES[language].items(), key=lambda pair: (-len(pair[0]), pair[0])))


@cache
def all_terms_longest_first() -> tuple[tuple[str, str], ...]:
    """Term pairs of every table merged, longest key first.

    Used when the source language could not be detected. When two tables
    share a key, the first table in ``Language`` order wins.
    """
    merged: dict[str, str] = {}
    for language in Language:
        for key, value in TERM_TABLES[language].items():
            merged.setdefault(key, value)
    return tuple(sorted(merged.items(), key=lambda pair: (-len(pair[0]), pair[0])))


def translate_unit(unit: str, target: LanguageTag) -> str:
    """Return the unit word for a target language.

    Units without an entry (metric symbols in Latin-script languages, unknown
    tokens, English targets) are returned unchanged.

    Example:
        >>> translate_unit("tbsp", "de")
        'EL'
    """
    language = Language.from_tag(target)
    if language is None:
        return unit
    return UNIT_NAMES[language].get(unit.lower(), unit)
