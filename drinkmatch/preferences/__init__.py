"""
Preference reconciliation package.

Responsibilities:
- Merge quiz answers, chat-derived guesses and a stored profile by priority.
- Score how complete the merged preferences are and gate recommendations on it.
- Translate merged preferences into drink filters for the engine.
"""
