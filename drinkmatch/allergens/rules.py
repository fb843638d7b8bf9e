from __future__ import annotations

from enum import Enum


class AllergyType(str, Enum):
    gluten = "gluten"
    dairy = "dairy"
    nuts = "nuts"
    eggs = "eggs"
    soy = "soy"
    none = "none"


# Bump whenever a keyword is added or removed so matching changes stay auditable.
ALLERGEN_RULES_VERSION = "1.0"

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------
# Keywords are matched as lower-case substrings of each ingredient, so short
# stems ("nut", "egg") deliberately over-match ("nutmeg", "eggnog").

ALLERGEN_KEYWORDS: dict[AllergyType, tuple[str, ...]] = {
    AllergyType.gluten: (
        "wheat", "barley", "rye", "malt", "spelt", "kamut",
        "malted barley", "barley malt", "pilsner malt", "roasted barley",
        "beer", "grain", "grain neutral spirits", "wheat neutral spirits",
        "flour", "bran", "semolina", "bulgur",
        "malt extract", "malt base", "malt syrup",
    ),
    AllergyType.dairy: (
        "milk", "cream", "butter", "cheese", "yogurt", "dairy",
        "heavy cream", "half-and-half", "whipping cream", "sour cream",
        "crème de cacao", "cream liqueur", "bailey", "kahlua cream",
        "lactose", "casein", "whey", "buttermilk",
        "ice cream", "gelato", "frozen yogurt",
    ),
    AllergyType.nuts: (
        "almond", "walnut", "pecan", "hazelnut", "cashew", "pistachio",
        "brazil nut", "macadamia", "pine nut",
        "coconut", "coconut cream", "coconut milk", "coconut water",
        "orgeat", "orgeat syrup", "almond syrup", "almond extract",
        "amaretto", "frangelico", "nocello",
        "peanut", "peanut butter", "peanut oil",
        "almond butter", "almond oil", "walnut oil", "hazelnut oil",
        "nut", "tree nut", "mixed nuts",
    ),
    AllergyType.eggs: (
        "egg", "egg white", "egg yolk", "whole egg",
        "albumin", "meringue", "egg wash",
        "mayonnaise", "hollandaise", "custard",
        "egg lecithin",
    ),
    AllergyType.soy: (
        "soy", "soya", "soybean", "edamame",
        "soy sauce", "tamari", "miso", "tofu", "tempeh",
        "soy lecithin", "soy protein", "soy flour",
        "soy oil", "soybean oil",
        "soy-based alcohol",
    ),
}

ALLERGEN_LABELS: dict[AllergyType, str] = {
    AllergyType.gluten: "Contains gluten",
    AllergyType.dairy: "Contains dairy",
    AllergyType.nuts: "Contains nuts",
    AllergyType.eggs: "Contains eggs",
    AllergyType.soy: "Contains soy",
}

# Declaration order, minus the "no restriction" marker.
DETECTABLE_ALLERGIES: tuple[AllergyType, ...] = tuple(
    a for a in AllergyType if a is not AllergyType.none
)


def keywords_for(allergy: AllergyType) -> tuple[str, ...]:
    """Return the keyword table for *allergy* (empty for ``none``)."""
    return ALLERGEN_KEYWORDS.get(allergy, ())
