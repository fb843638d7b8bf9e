"""
Drink recommendation engine.

Responsibilities:
- Accept drink records, a weather snapshot and merged user preferences.
- Filter drinks by categorical criteria and, always, by allergen safety.
- Score survivors against the weather and order them with the happy-hour rule.
- Return structured recommendations with human-readable reasons.
"""
