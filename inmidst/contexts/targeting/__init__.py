"""
Targeting Context

Responsibilities:
- Scores narrative blocks against an activation context (mask, tags, recency window)
- Ranks a block pool by score with stable tie-breaking
- Selects the top blocks for summaries and abstracts
- Reports per-block score breakdowns for diagnostics
- Supplies masks from the mask catalog and weighting configs from presets

Owns: Weighting algorithms, relevance/coherence/confidence heuristics, selection logic
Never: Generates block content, decides which mask is active, or persists results
"""

from inmidst.contexts.targeting.config_resolver import (
    load_weighting_presets,
    resolve_weighting_config,
)
from inmidst.contexts.targeting.exceptions import (
    InvalidNarrativeInputError,
    InvalidWeightingConfigError,
    MaskNotFoundError,
    RankingInvariantError,
)
from inmidst.contexts.targeting.mask_registry import MaskRegistry
from inmidst.contexts.targeting.narrative_data_structures import (
    BlockScore,
    Mask,
    MaskFilters,
    NarrativeBlock,
    NarrativeContext,
    RankedBlock,
    ScoreBreakdown,
    ScoreFactors,
    WeightingConfig,
)
from inmidst.contexts.targeting.report import format_weighting_report, report_to_dicts
from inmidst.contexts.targeting.weighting import (
    generate_weighting_report,
    rank_narrative_blocks,
    score_narrative_block,
    select_top_blocks,
)

__all__ = [
    # Scoring and selection
    "score_narrative_block",
    "rank_narrative_blocks",
    "select_top_blocks",
    "generate_weighting_report",
    # Reporting
    "format_weighting_report",
    "report_to_dicts",
    # Configuration and catalogs
    "resolve_weighting_config",
    "load_weighting_presets",
    "MaskRegistry",
    # Data structures
    "NarrativeBlock",
    "Mask",
    "MaskFilters",
    "NarrativeContext",
    "WeightingConfig",
    "BlockScore",
    "ScoreBreakdown",
    "ScoreFactors",
    "RankedBlock",
    # Exceptions
    "InvalidNarrativeInputError",
    "InvalidWeightingConfigError",
    "MaskNotFoundError",
    "RankingInvariantError",
]
