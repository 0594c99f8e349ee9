"""
Sondage backend.

A party-game survey service: participants answer open-text prompts, answers
are cleaned and fuzzy-deduplicated, and administrators export the results.
"""

__version__ = "1.0.0"
