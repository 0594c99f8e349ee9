"""
Utility modules for the sondage application.

This package contains the answer-cleaning core: text normalization, gibberish
detection, banned-word and correction filters, similarity and clustering.
"""
