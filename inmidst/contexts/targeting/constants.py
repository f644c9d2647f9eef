"""
Constants for narrative block weighting.

Template identifiers, canonical orderings, default factor weights, and the
point values used by the relevance scorer.
"""

from enum import Enum


class NarrativeTemplate(str, Enum):
    """Template identifiers that produce narrative blocks."""

    IDENTITY_MODE = "identity-mode"
    STAGE_CONTEXT = "stage-context"
    SEQUENCE = "sequence"
    STAGE_ARC = "stage-arc"
    EPOCH_ARC = "epoch-arc"
    SETTING_ARC = "setting-arc"
    EVIDENCE = "evidence"
    NEXT_MOVE = "next-move"


# Canonical narrative order used by coherence scoring (later = further along the arc)
NARRATIVE_SEQUENCE = (
    NarrativeTemplate.IDENTITY_MODE.value,
    NarrativeTemplate.STAGE_CONTEXT.value,
    NarrativeTemplate.SEQUENCE.value,
    NarrativeTemplate.STAGE_ARC.value,
    NarrativeTemplate.EPOCH_ARC.value,
    NarrativeTemplate.EVIDENCE.value,
    NarrativeTemplate.NEXT_MOVE.value,
)

# Templates trusted by confidence scoring. Differs from NARRATIVE_SEQUENCE:
# setting-arc is official but unsequenced, evidence is sequenced but unofficial.
OFFICIAL_TEMPLATES = frozenset(
    {
        NarrativeTemplate.IDENTITY_MODE.value,
        NarrativeTemplate.STAGE_CONTEXT.value,
        NarrativeTemplate.SEQUENCE.value,
        NarrativeTemplate.STAGE_ARC.value,
        NarrativeTemplate.EPOCH_ARC.value,
        NarrativeTemplate.SETTING_ARC.value,
        NarrativeTemplate.NEXT_MOVE.value,
    }
)

# Default factor weights (sum to 1.0)
DEFAULT_BASE_WEIGHT_FACTOR = 0.25
DEFAULT_RECENCY_FACTOR = 0.15
DEFAULT_RELEVANCE_FACTOR = 0.35
DEFAULT_COHERENCE_FACTOR = 0.15
DEFAULT_CONFIDENCE_FACTOR = 0.10
DEFAULT_RECENCY_WINDOW_DAYS = 365
DEFAULT_KEYWORD_BOOST = 1.5

FACTOR_SUM_TOLERANCE = 0.01

# Relevance points
EXACT_MATCH_POINTS = 2.0
MASK_INCLUDE_POINTS = 2.0
RELEVANCE_CEILING = 10.0

# Author weight treated as "maximum typical importance"
BASE_WEIGHT_SCALE = 5.0

NEUTRAL_SCORE = 0.5

# Confidence levels
OFFICIAL_TEMPLATE_CONFIDENCE = 0.95
MULTI_TAG_CONFIDENCE = 0.8
SINGLE_TAG_CONFIDENCE = 0.6

# Diagnostic thresholds for BlockScore.factors
RECENT_THRESHOLD = 0.7
RELEVANT_THRESHOLD = 0.5

BLOCK_WEIGHT_MIN = 0
BLOCK_WEIGHT_MAX = 100
