from __future__ import annotations

import re
from typing import Iterable

from ..allergens.rules import AllergyType
from ..preferences.models import FlavorPreference
from ..recommendations.models import DrinkCategory, DrinkStrength

# ---------------------------------------------------------------------------
# Synonym tables
# ---------------------------------------------------------------------------
# Order matters: the first entry whose phrases match a message wins.

CATEGORY_PHRASES: list[tuple[str, tuple[str, ...]]] = [
    (DrinkCategory.cocktail.value, ("cocktail", "cocktails", "mixed drink", "mixed drinks")),
    (DrinkCategory.beer.value, ("beer", "beers", "lager", "ale", "ipa", "stout", "pilsner", "cider")),
    (DrinkCategory.wine.value, (
        "wine", "wines", "chardonnay", "cabernet", "merlot", "pinot", "prosecco", "champagne",
    )),
    (DrinkCategory.spirit.value, (
        "spirit", "spirits", "whiskey", "whisky", "bourbon", "scotch", "vodka", "gin", "rum",
        "tequila", "mezcal",
    )),
    (DrinkCategory.non_alcoholic.value, (
        "non-alcoholic", "nonalcoholic", "non alcoholic", "alcohol-free", "mocktail",
        "mocktails", "virgin", "zero proof",
    )),
    ("any", ("surprise me", "surprise", "anything", "whatever you recommend")),
]

FLAVOR_PHRASES: list[tuple[str, tuple[str, ...]]] = [
    (FlavorPreference.sweet.value, ("sweet", "fruity", "sugary", "dessert")),
    (FlavorPreference.sour.value, ("sour", "tart", "citrus", "citrusy", "acidic")),
    (FlavorPreference.bitter.value, ("bitter", "hoppy", "herbal", "earthy")),
    (FlavorPreference.smokey.value, ("smoky", "smokey", "peaty", "charred")),
    (FlavorPreference.crisp.value, ("crisp", "refreshing", "clean")),
    (FlavorPreference.smooth.value, ("smooth", "mellow", "creamy", "silky")),
]

STRENGTH_PHRASES: list[tuple[str, tuple[str, ...]]] = [
    (DrinkStrength.strong.value, (
        "strong", "stronger", "powerful", "high alcohol", "high proof", "potent",
        "bring the power",
    )),
    (DrinkStrength.light.value, ("light", "easy", "easy going", "mild", "low alcohol", "sessionable")),
    (DrinkStrength.medium.value, ("medium", "balanced", "moderate", "regular")),
]

OCCASION_PHRASES: list[tuple[str, tuple[str, ...]]] = [
    ("celebration", ("celebration", "celebrating", "celebrate", "party", "festive", "birthday")),
    ("business", ("business", "work", "meeting", "professional", "client")),
    ("romantic", ("romantic", "date", "date night", "intimate", "dinner")),
    ("casual", ("casual", "relaxing", "happy hour", "everyday", "chill", "unwind")),
    ("sports", ("sports", "game day", "the game", "watching the game")),
    ("exploring", ("exploring", "adventure", "adventurous", "trying new", "experimental")),
]

ALLERGY_PHRASES: list[tuple[str, tuple[str, ...]]] = [
    (AllergyType.gluten.value, ("gluten", "celiac", "coeliac", "wheat")),
    (AllergyType.dairy.value, ("dairy", "lactose", "milk", "cream")),
    (AllergyType.nuts.value, ("nut", "nuts", "tree nuts", "peanut", "peanuts", "almond", "almonds")),
    (AllergyType.eggs.value, ("egg", "eggs", "egg white", "egg whites")),
    (AllergyType.soy.value, ("soy", "soya", "soybean", "soybeans")),
]

# Diet markers that imply an allergy without a negation word.
DIET_MARKERS: list[tuple[str, tuple[str, ...]]] = [
    (AllergyType.gluten.value, (
        "gluten-free", "gluten free", "celiac", "coeliac", "gluten intolerant",
        "gluten intolerance", "gluten allergy", "wheat allergy",
    )),
    (AllergyType.dairy.value, (
        "dairy-free", "dairy free", "lactose", "lactose intolerant", "lactose intolerance",
        "dairy intolerant", "dairy intolerance", "dairy allergy", "milk allergy",
    )),
    (AllergyType.nuts.value, ("nut-free", "nut free", "nut allergy", "peanut allergy", "tree nut allergy")),
    (AllergyType.eggs.value, ("egg-free", "egg free", "egg allergy")),
    (AllergyType.soy.value, ("soy-free", "soy free", "soy allergy", "soy intolerance")),
]

# Words that turn a bare allergen mention into an allergy statement ("I have a nut allergy").
ALLERGY_CONTEXT_WORDS = (
    "allergy", "allergies", "allergic", "intolerant", "intolerance", "sensitive", "sensitivity",
)

NO_ALLERGY_PHRASES = (
    "no allergies", "no allergy", "no restrictions", "nothing to avoid", "no dietary restrictions",
)

# Only count as "no allergies" when they make up the whole message.
NO_ALLERGY_ANSWERS = ("none", "none at all", "nothing", "nope")

# Words allowed around allergens in a bare answer ("dairy and eggs").
_ANSWER_FILLERS = {
    "and", "or", "also", "just", "only", "plus", "please", "i", "i'm", "im", "am", "a", "an",
}

# Spirits a user can rule out; these become ingredient exclusions, not allergies.
EXCLUDABLE_SPIRITS = (
    "gin", "vodka", "whiskey", "whisky", "bourbon", "scotch", "rum", "tequila", "mezcal",
    "brandy", "cognac", "absinthe",
)

RESTRICTION_TRIGGERS = (
    "but not", "not", "no", "without", "avoid", "avoiding", "allergic to", "can't do",
    "can't have", "cannot have", "don't like", "dont like", "do not like", "don't want",
    "do not want", "except", "hold the", "none of",
)

# Filler words skipped when finding the object of a restriction.
_FILLER_WORDS = {
    "too", "very", "any", "a", "an", "the", "really", "so", "much", "more", "that", "this", "those",
}


# ---------------------------------------------------------------------------
# Matching helpers
# ---------------------------------------------------------------------------


def phrase_pattern(phrases: Iterable[str]) -> re.Pattern[str]:
    """Word-bounded alternation, longest phrase first."""
    ordered = sorted(set(phrases), key=len, reverse=True)
    return re.compile(r"\b(?:" + "|".join(re.escape(p) for p in ordered) + r")\b")


def _compile_table(table: list[tuple[str, tuple[str, ...]]]) -> list[tuple[str, re.Pattern[str]]]:
    return [(value, phrase_pattern(phrases)) for value, phrases in table]


CATEGORY_PATTERNS = _compile_table(CATEGORY_PHRASES)
FLAVOR_PATTERNS = _compile_table(FLAVOR_PHRASES)
STRENGTH_PATTERNS = _compile_table(STRENGTH_PHRASES)
OCCASION_PATTERNS = _compile_table(OCCASION_PHRASES)
ALLERGY_PATTERNS = _compile_table(ALLERGY_PHRASES)
DIET_MARKER_PATTERNS = _compile_table(DIET_MARKERS)
NO_ALLERGY_PATTERN = phrase_pattern(NO_ALLERGY_PHRASES)
ALLERGY_CONTEXT_PATTERN = phrase_pattern(ALLERGY_CONTEXT_WORDS)
NO_ALLERGY_ANSWER_RE = re.compile(
    r"(?:" + "|".join(re.escape(a) for a in sorted(NO_ALLERGY_ANSWERS, key=len, reverse=True)) + r")[\s.!]*"
)
SPIRIT_PATTERN = phrase_pattern(EXCLUDABLE_SPIRITS)

RESTRICTION_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(t) for t in sorted(RESTRICTION_TRIGGERS, key=len, reverse=True))
    + r")\s+([^.,;!?]+)"
)


def normalize_text(text: str) -> str:
    return text.lower().replace("’", "'").replace("‘", "'")


def first_match(text: str, patterns: list[tuple[str, re.Pattern[str]]]) -> str | None:
    for value, pattern in patterns:
        if pattern.search(text):
            return value
    return None


def all_matches(text: str, patterns: list[tuple[str, re.Pattern[str]]]) -> list[str]:
    return [value for value, pattern in patterns if pattern.search(text)]


def is_no_allergy_answer(text: str) -> bool:
    """True for "no allergies" phrasing, or a message that is only "none"."""
    return bool(NO_ALLERGY_PATTERN.search(text) or NO_ALLERGY_ANSWER_RE.fullmatch(text.strip()))


def allergen_answer(text: str) -> list[str]:
    """Allergies named by a message made of nothing but allergen words.

    ``"dairy and eggs"`` -> ``["dairy", "eggs"]``; ``"a creamy dessert wine"`` -> ``[]``.
    """
    found = all_matches(text, ALLERGY_PATTERNS)
    if not found:
        return []

    remainder = text
    for _, pattern in ALLERGY_PATTERNS:
        remainder = pattern.sub(" ", remainder)
    if any(word not in _ANSWER_FILLERS for word in re.findall(r"[a-z']+", remainder)):
        return []
    return found


def restriction_object_words(clause: str) -> list[str]:
    """The words a restriction clause directly applies to.

    ``"too strong please"`` -> ``["strong"]``; fillers are skipped and only
    the first meaningful word is taken.
    """
    words = clause.split()
    for word in words:
        if word not in _FILLER_WORDS:
            return [word]
    return []


# ---------------------------------------------------------------------------
# Free-form value normalization (LLM output, profile imports)
# ---------------------------------------------------------------------------


def normalize_choice(raw: str | None, patterns: list[tuple[str, re.Pattern[str]]]) -> str | None:
    if not raw:
        return None
    return first_match(normalize_text(str(raw)), patterns)


def normalize_allergies(raw: Iterable[str] | None) -> tuple[list[str], list[str]]:
    """Split raw restriction strings into (allergy tags, excluded spirits)."""
    allergies: list[str] = []
    excluded: list[str] = []
    for item in raw or []:
        text = normalize_text(str(item))
        if is_no_allergy_answer(text):
            allergies.append(AllergyType.none.value)
            continue
        for value in all_matches(text, ALLERGY_PATTERNS):
            if value not in allergies:
                allergies.append(value)
        for spirit in SPIRIT_PATTERN.findall(text):
            if spirit not in excluded:
                excluded.append(spirit)
    return allergies, excluded
