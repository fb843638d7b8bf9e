"""
Allergen detection package.

Responsibilities:
- Hold the versioned, per-allergy keyword tables.
- Classify ingredient lists against those tables.
- Answer "is this drink safe for me?" and produce user-facing warnings.
"""
