"""
Weather matching package.

Responsibilities:
- Represent the caller-supplied weather snapshot and its cache entry.
- Classify time of day and temperature into coarse buckets.
- Score a drink against the current weather and explain the score.
"""
