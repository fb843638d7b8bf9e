"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Send JSON-mode and plain-text completions for the conversational extractor.
- Graceful fallback when the LLM is unavailable or returns invalid output.
"""
