"""
Sub-scorers for narrative block weighting.

Each scorer maps one aspect of a block to [0, 1]. Scorers never raise on
missing or malformed optional data; they fall back to neutral values.
"""

from datetime import datetime
from typing import AbstractSet, Iterable, Optional, Sequence, Union

from inmidst.contexts.targeting.constants import (
    DEFAULT_KEYWORD_BOOST,
    DEFAULT_RECENCY_WINDOW_DAYS,
    EXACT_MATCH_POINTS,
    MASK_INCLUDE_POINTS,
    MULTI_TAG_CONFIDENCE,
    NARRATIVE_SEQUENCE,
    NEUTRAL_SCORE,
    OFFICIAL_TEMPLATE_CONFIDENCE,
    OFFICIAL_TEMPLATES,
    RELEVANCE_CEILING,
    SINGLE_TAG_CONFIDENCE,
)
from inmidst.contexts.targeting.narrative_data_structures import Mask, NarrativeBlock
from inmidst.utils.timestamp import age_in_days, now as utc_now, parse_timestamp


def calculate_recency_score(
    created_at: Union[str, datetime, None],
    window_days: float = DEFAULT_RECENCY_WINDOW_DAYS,
    now: Union[str, datetime, None] = None,
) -> float:
    """
    Freshness of content created at `created_at` (1.0 = now, 0.0 = beyond window).

    Args:
        created_at: ISO 8601 timestamp or datetime
        window_days: Age in days at which the score reaches 0
        now: Reference time (defaults to the current time)

    Returns:
        0.5 when created_at is missing or unparsable, 1.0 when future-dated,
        0.0 beyond the window, otherwise linear decay
    """
    created = parse_timestamp(created_at)
    if created is None:
        return NEUTRAL_SCORE

    reference = parse_timestamp(now) or utc_now()
    age_days = age_in_days(created, reference)

    if age_days < 0:
        return 1.0
    if age_days > window_days:
        return 0.0
    if window_days <= 0:
        # Only reachable with age_days == 0
        return 1.0

    return 1.0 - age_days / window_days


def is_vetoed(block: NarrativeBlock, mask: Optional[Mask]) -> bool:
    """True if any block tag is excluded by the mask."""
    if mask is None:
        return False
    return not block.normalized_tags.isdisjoint(mask.filters.exclude_tags)


def calculate_relevance_score(
    block: NarrativeBlock,
    mask: Optional[Mask] = None,
    active_tags: Iterable[str] = (),
    priority_keywords: Iterable[str] = (),
    keyword_boost: float = DEFAULT_KEYWORD_BOOST,
) -> float:
    """
    Relevance of a block to the active tags and mask.

    Each block tag earns EXACT_MATCH_POINTS if active, otherwise `keyword_boost`
    points if it is a priority keyword. A tag excluded by the mask vetoes the
    block (returns 0.0) no matter what else matched. Each tag included by the
    mask earns MASK_INCLUDE_POINTS. Points saturate at RELEVANCE_CEILING and
    are normalized to [0, 1].
    """
    block_tags = block.normalized_tags
    active = {tag.lower() for tag in active_tags}
    keywords = {keyword.lower() for keyword in priority_keywords}

    tag_points = 0.0
    for tag in block_tags:
        if tag in active:
            tag_points += EXACT_MATCH_POINTS
        elif tag in keywords:
            tag_points += keyword_boost

    mask_points = 0.0
    if mask is not None:
        if is_vetoed(block, mask):
            return 0.0
        mask_points = MASK_INCLUDE_POINTS * len(block_tags & mask.filters.include_tags)

    return min(RELEVANCE_CEILING, tag_points + mask_points) / RELEVANCE_CEILING


def calculate_coherence_score(
    block: NarrativeBlock,
    all_blocks: Sequence[NarrativeBlock],
    context_arc: Sequence[str] = (),
) -> float:
    """
    How well a block fits the narrative.

    Blocks from a template in NARRATIVE_SEQUENCE score by position
    ((index + 1) / length). Other blocks score the fraction of peers sharing
    at least one tag with them. The block itself is skipped by identity.

    `context_arc` is not read.
    """
    if not all_blocks:
        return NEUTRAL_SCORE

    if block.template_id in NARRATIVE_SEQUENCE:
        return (NARRATIVE_SEQUENCE.index(block.template_id) + 1) / len(NARRATIVE_SEQUENCE)

    block_tags = block.normalized_tags
    comparisons = 0
    matches = 0
    for other in all_blocks:
        if other is block:
            continue
        comparisons += 1
        if not block_tags.isdisjoint(other.normalized_tags):
            matches += 1

    if comparisons == 0:
        return NEUTRAL_SCORE
    return matches / comparisons


def calculate_confidence_score(block: NarrativeBlock, mask: Optional[Mask] = None) -> float:
    """Trust in a block: official templates first, then tag richness. `mask` is not read."""
    if block.template_id in OFFICIAL_TEMPLATES:
        return OFFICIAL_TEMPLATE_CONFIDENCE

    if block.tag_count >= 2:
        return MULTI_TAG_CONFIDENCE
    if block.tag_count == 1:
        return SINGLE_TAG_CONFIDENCE
    return NEUTRAL_SCORE


def has_keyword_boost(block: NarrativeBlock, priority_keywords: AbstractSet[str]) -> bool:
    """True if any block tag is a priority keyword."""
    return not block.normalized_tags.isdisjoint(priority_keywords)
