"""
IN MIDST - Identity narratives, masked and selected for the moment

A résumé and personal-identity platform built around narrative blocks: small,
taggable fragments of someone's experience that are weighted, ranked, and
selected for a given audience.

Architecture:
- Targeting Context: Narrative block weighting, ranking, and selection
"""

__version__ = "0.1.0"
