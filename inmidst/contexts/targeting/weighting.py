"""
Narrative Block Weighting

Scores narrative blocks against an activation context, ranks a pool by score,
and selects the top blocks for summaries and abstracts.

Every block gets five sub-scores in [0, 1]:
1. Base weight: author-assigned importance (weight / 5, capped at 1)
2. Recency: age of the content within the recency window
3. Relevance: active-tag and mask-affinity matching, with mask exclusion veto
4. Coherence: position in the canonical narrative sequence, or tag overlap with peers
5. Confidence: template provenance and tag richness

The total is the factor-weighted sum, clamped to at most 1.0. All functions
are pure: nothing is cached and inputs are never mutated.
"""

from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from inmidst.contexts.targeting.constants import (
    BASE_WEIGHT_SCALE,
    NEUTRAL_SCORE,
    RECENT_THRESHOLD,
    RELEVANT_THRESHOLD,
)
from inmidst.contexts.targeting.exceptions import RankingInvariantError
from inmidst.contexts.targeting.logger import log_ranking_result, log_ranking_start
from inmidst.contexts.targeting.narrative_data_structures import (
    BlockScore,
    NarrativeBlock,
    NarrativeContext,
    RankedBlock,
    ScoreBreakdown,
    ScoreFactors,
    WeightingConfig,
)
from inmidst.contexts.targeting.scorers import (
    calculate_coherence_score,
    calculate_confidence_score,
    calculate_recency_score,
    calculate_relevance_score,
    has_keyword_boost,
    is_vetoed,
)
from inmidst.utils.timestamp import now as utc_now

ContextLike = Union[NarrativeContext, Mapping[str, Any], None]
ConfigLike = Union[WeightingConfig, Mapping[str, Any], None]


def _resolve_context(context: ContextLike) -> NarrativeContext:
    if isinstance(context, NarrativeContext):
        return context
    return NarrativeContext.from_dict(context)


def _resolve_config(config: ConfigLike) -> WeightingConfig:
    if isinstance(config, WeightingConfig):
        return config
    return WeightingConfig.from_dict(config)


def score_narrative_block(
    block: NarrativeBlock,
    context: ContextLike = None,
    all_blocks: Optional[Sequence[NarrativeBlock]] = None,
    config: ConfigLike = None,
    *,
    now: Optional[datetime] = None,
) -> BlockScore:
    """
    Score a single narrative block against the current narrative context.

    Args:
        block: The narrative block to score
        context: NarrativeContext or its JSON shape (mask, activeTags, createdAt, ...)
        all_blocks: All blocks in the narrative, for coherence scoring
        config: WeightingConfig or its JSON shape; unset fields use defaults
        now: Reference time for recency (defaults to the current time)

    Returns:
        BlockScore with weighted breakdown and diagnostic factors

    Example:
        score = score_narrative_block(
            block,
            NarrativeContext(mask=analyst_mask, active_tags={"architecture", "metrics"}),
            all_blocks,
        )
        print(f"{score.block_id}: {score.total_score:.2f}")
    """
    context = _resolve_context(context)
    config = _resolve_config(config)
    all_blocks = all_blocks or []

    # weight 0 counts as unset
    base_weight = min(1.0, block.weight / BASE_WEIGHT_SCALE) if block.weight else NEUTRAL_SCORE
    recency = calculate_recency_score(context.created_at, config.recency_window_days, now=now)
    relevance = calculate_relevance_score(
        block,
        context.mask,
        context.active_tags,
        config.priority_keywords,
        keyword_boost=config.keyword_boost_factor,
    )
    coherence = calculate_coherence_score(block, all_blocks, context.context_arc)
    confidence = calculate_confidence_score(block, context.mask)

    breakdown = ScoreBreakdown(
        base_weight=base_weight * config.base_weight_factor,
        recency_score=recency * config.recency_factor,
        relevance_score=relevance * config.relevance_factor,
        coherence_score=coherence * config.coherence_factor,
        confidence_score=confidence * config.confidence_factor,
    )

    return BlockScore(
        block_id=block.title,
        total_score=min(1.0, breakdown.total),
        breakdown=breakdown,
        factors=ScoreFactors(
            is_recent=recency > RECENT_THRESHOLD,
            has_relevant_tags=relevance > RELEVANT_THRESHOLD,
            has_keyword_boost=has_keyword_boost(block, config.priority_keywords),
            tag_count=block.tag_count,
        ),
    )


def rank_narrative_blocks(
    blocks: Iterable[NarrativeBlock],
    context: ContextLike = None,
    config: ConfigLike = None,
    *,
    now: Optional[datetime] = None,
) -> List[RankedBlock]:
    """
    Score and rank all narrative blocks in a pool.

    Every block is scored against the full pool. Results are sorted by
    total score, highest first; equal scores keep their input order.

    Args:
        blocks: Narrative blocks to score
        context: Narrative context
        config: Weighting configuration
        now: Reference time for recency (defaults to the current time)

    Returns:
        RankedBlock entries sorted by score

    Raises:
        RankingInvariantError: If a block ends up without a score

    Example:
        ranked = rank_narrative_blocks(blocks, {"mask": my_mask})

        # Take top 5 blocks for a summary
        summary = [item.block for item in ranked[:5]]
    """
    pool = list(blocks)
    context = _resolve_context(context)
    config = _resolve_config(config)
    reference = now or utc_now()

    log_ranking_start(
        len(pool),
        mask_id=context.mask.id if context.mask else None,
        active_tag_count=len(context.active_tags),
    )

    scores = [score_narrative_block(block, context, pool, config, now=reference) for block in pool]

    indexed = []
    for index, block in enumerate(pool):
        score = scores[index] if index < len(scores) else None
        if score is None:
            raise RankingInvariantError(index)
        indexed.append((index, RankedBlock(block=block, score=score)))

    # Input index as secondary key keeps ties in input order
    indexed.sort(key=lambda entry: (-entry[1].score.total_score, entry[0]))
    ranked = [entry for _, entry in indexed]

    log_ranking_result(ranked, vetoed=sum(1 for block in pool if is_vetoed(block, context.mask)))
    return ranked


def select_top_blocks(
    blocks: Iterable[NarrativeBlock],
    top_n: int = 5,
    context: ContextLike = None,
    config: ConfigLike = None,
    *,
    now: Optional[datetime] = None,
) -> List[NarrativeBlock]:
    """
    Select the top N most important blocks, best first.

    Args:
        blocks: All blocks in the narrative
        top_n: How many blocks to select; 0 or less selects nothing
        context: Narrative context
        config: Weighting configuration
        now: Reference time for recency

    Returns:
        At most top_n blocks; the whole ranked pool if top_n exceeds its size

    Example:
        abstract = select_top_blocks(blocks, 3, context)
        summary = "\\n\\n".join(f"{b.title}: {b.body}" for b in abstract)
    """
    if top_n <= 0:
        return []
    ranked = rank_narrative_blocks(blocks, context, config, now=now)
    return [item.block for item in ranked[:top_n]]


def generate_weighting_report(
    blocks: Iterable[NarrativeBlock],
    context: ContextLike = None,
    config: ConfigLike = None,
    *,
    now: Optional[datetime] = None,
) -> List[RankedBlock]:
    """
    Ranked blocks with full score breakdowns, for debugging and analysis.

    Same contract as rank_narrative_blocks(); see report.format_weighting_report()
    for a text rendering.
    """
    return rank_narrative_blocks(blocks, context, config, now=now)
