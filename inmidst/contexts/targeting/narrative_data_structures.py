"""
Narrative Data Structures

Defines data classes for the weighting engine: narrative blocks, masks, the
activation context, weighting configuration, and per-block score output.

Inputs are frozen. Optional fields are resolved to their defaults once, at
construction, so scorers never deal with missing values. Each input type has
a from_dict() factory for the JSON shapes exchanged with the surrounding
application; each output type has a to_dict().
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

from inmidst.contexts.targeting.constants import (
    BLOCK_WEIGHT_MAX,
    BLOCK_WEIGHT_MIN,
    DEFAULT_BASE_WEIGHT_FACTOR,
    DEFAULT_COHERENCE_FACTOR,
    DEFAULT_CONFIDENCE_FACTOR,
    DEFAULT_KEYWORD_BOOST,
    DEFAULT_RECENCY_FACTOR,
    DEFAULT_RECENCY_WINDOW_DAYS,
    DEFAULT_RELEVANCE_FACTOR,
    FACTOR_SUM_TOLERANCE,
)
from inmidst.contexts.targeting.exceptions import (
    InvalidNarrativeInputError,
    InvalidWeightingConfigError,
)
from inmidst.contexts.targeting.logger import _log_warning


def _string_collection(value: Any, field_name: str) -> Tuple[str, ...]:
    """Coerce a list-like of strings to a tuple; a bare string is rejected."""
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise InvalidNarrativeInputError("Expected a list of strings", field_name)
    return tuple(str(item) for item in value)


def _lowercase_set(value: Any, field_name: str) -> FrozenSet[str]:
    return frozenset(item.lower() for item in _string_collection(value, field_name))


def _pick(data: Mapping[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    """Read a boundary key in camelCase, falling back to its snake_case alias."""
    if data.get(camel) is not None:
        return data[camel]
    if data.get(snake) is not None:
        return data[snake]
    return default


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    # 4.0 is accepted; JSON numbers do not distinguish it from 4
    return _is_number(value) and float(value).is_integer()


# ============================================================================
# Inputs
# ============================================================================


@dataclass(frozen=True)
class NarrativeBlock:
    """
    Atomic, taggable fragment of biographical or professional content.

    Attributes:
        title: Block heading; also the identity key shown in score reports
        body: Markdown content
        tags: Tags as supplied (matching uses normalized_tags)
        template_id: Template that produced the block, if any
        weight: Author-assigned importance, 0-100
    """

    title: str
    body: str = ""
    tags: Tuple[str, ...] = ()
    template_id: Optional[str] = None
    weight: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.title, str) or not self.title.strip():
            raise InvalidNarrativeInputError("Narrative block title must be a non-empty string", "title")
        if not isinstance(self.body, str):
            raise InvalidNarrativeInputError("Narrative block body must be a string", "body")

        object.__setattr__(self, "tags", _string_collection(self.tags, "tags"))

        if self.weight is not None:
            if not _is_integral(self.weight) or not BLOCK_WEIGHT_MIN <= self.weight <= BLOCK_WEIGHT_MAX:
                raise InvalidNarrativeInputError(
                    f"Weight must be an integer between {BLOCK_WEIGHT_MIN} and {BLOCK_WEIGHT_MAX}, "
                    f"got {self.weight!r}",
                    "weight",
                )

    @property
    def normalized_tags(self) -> FrozenSet[str]:
        """Lowercased tag set used for all matching."""
        return frozenset(tag.lower() for tag in self.tags)

    @property
    def tag_count(self) -> int:
        return len(self.tags)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NarrativeBlock":
        """
        Build a block from its JSON shape.

        Args:
            data: {title, body, tags?, templateId?, weight?}

        Raises:
            InvalidNarrativeInputError: If data is not a mapping or fails validation
        """
        if not isinstance(data, Mapping):
            raise InvalidNarrativeInputError(f"Narrative block must be a mapping, got {type(data).__name__}")
        return cls(
            title=data.get("title"),
            body=data.get("body") or "",
            tags=data.get("tags") or (),
            template_id=_pick(data, "templateId", "template_id"),
            weight=data.get("weight"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"title": self.title, "body": self.body, "tags": list(self.tags)}
        if self.template_id is not None:
            result["templateId"] = self.template_id
        if self.weight is not None:
            result["weight"] = self.weight
        return result


@dataclass(frozen=True)
class MaskFilters:
    """
    Tag filters of a mask.

    Attributes:
        include_tags: Tags that earn a mask-affinity bonus
        exclude_tags: Tags that veto a block's relevance entirely
        priority_weights: Tag multipliers (informational; not read by scoring)
    """

    include_tags: FrozenSet[str] = field(default_factory=frozenset)
    exclude_tags: FrozenSet[str] = field(default_factory=frozenset)
    priority_weights: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "include_tags", _lowercase_set(self.include_tags, "include_tags"))
        object.__setattr__(self, "exclude_tags", _lowercase_set(self.exclude_tags, "exclude_tags"))
        object.__setattr__(self, "priority_weights", dict(self.priority_weights or {}))

        overlap = self.include_tags & self.exclude_tags
        if overlap:
            _log_warning(
                f"Mask filters both include and exclude {sorted(overlap)}; exclusion takes precedence"
            )

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "MaskFilters":
        data = data or {}
        return cls(
            include_tags=data.get("include_tags") or (),
            exclude_tags=data.get("exclude_tags") or (),
            priority_weights=data.get("priority_weights") or {},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "include_tags": sorted(self.include_tags),
            "exclude_tags": sorted(self.exclude_tags),
            "priority_weights": dict(self.priority_weights),
        }


@dataclass(frozen=True)
class Mask:
    """
    Activation persona. Only `filters` influences scoring; the remaining
    attributes describe the persona for catalogs and user interfaces.
    """

    filters: MaskFilters = field(default_factory=MaskFilters)
    id: Optional[str] = None
    name: Optional[str] = None
    ontology: Optional[str] = None
    functional_scope: Optional[str] = None
    activation_contexts: Tuple[str, ...] = ()
    activation_triggers: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.filters, MaskFilters):
            object.__setattr__(self, "filters", MaskFilters.from_dict(self.filters))
        object.__setattr__(
            self, "activation_contexts", _string_collection(self.activation_contexts, "activation_contexts")
        )
        object.__setattr__(
            self, "activation_triggers", _string_collection(self.activation_triggers, "activation_triggers")
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Mask":
        """
        Build a mask from its JSON shape.

        Args:
            data: {filters: {include_tags, exclude_tags, priority_weights}, id?, name?, ...}
        """
        if not isinstance(data, Mapping):
            raise InvalidNarrativeInputError(f"Mask must be a mapping, got {type(data).__name__}")
        rules = data.get("activation_rules") or {}
        return cls(
            filters=MaskFilters.from_dict(data.get("filters")),
            id=data.get("id"),
            name=data.get("name"),
            ontology=data.get("ontology"),
            functional_scope=data.get("functional_scope"),
            activation_contexts=rules.get("contexts") or (),
            activation_triggers=rules.get("triggers") or (),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"filters": self.filters.to_dict()}
        for key in ("id", "name", "ontology", "functional_scope"):
            if getattr(self, key) is not None:
                result[key] = getattr(self, key)
        if self.activation_contexts or self.activation_triggers:
            result["activation_rules"] = {
                "contexts": list(self.activation_contexts),
                "triggers": list(self.activation_triggers),
            }
        return result


@dataclass(frozen=True)
class NarrativeContext:
    """
    Activation state shared by every block in one scoring call.

    Attributes:
        mask: Active persona, if any
        active_contexts: Advisory context labels (not read by scoring)
        active_tags: Tags that earn exact-match relevance (lowercased)
        active_epoch: Reserved; not read by scoring
        active_stage: Reserved; not read by scoring
        created_at: Effective creation time applied to every block in the call
        context_arc: Ordered stage/epoch ids; accepted but not read by coherence
    """

    mask: Optional[Mask] = None
    active_contexts: FrozenSet[str] = field(default_factory=frozenset)
    active_tags: FrozenSet[str] = field(default_factory=frozenset)
    active_epoch: Optional[str] = None
    active_stage: Optional[str] = None
    created_at: Optional[Union[str, datetime]] = None
    context_arc: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.mask is not None and not isinstance(self.mask, Mask):
            object.__setattr__(self, "mask", Mask.from_dict(self.mask))
        object.__setattr__(
            self, "active_contexts", frozenset(_string_collection(self.active_contexts, "active_contexts"))
        )
        # Active tags are lowercased like block tags, so "Analysis" matches "analysis"
        object.__setattr__(self, "active_tags", _lowercase_set(self.active_tags, "active_tags"))
        object.__setattr__(self, "context_arc", _string_collection(self.context_arc, "context_arc"))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "NarrativeContext":
        """
        Build a context from its JSON shape.

        Args:
            data: {mask?, activeContexts?, activeTags?, activeEpoch?, activeStage?,
                   createdAt?, contextArc?}; snake_case keys are also accepted
        """
        data = data or {}
        if not isinstance(data, Mapping):
            raise InvalidNarrativeInputError(f"Context must be a mapping, got {type(data).__name__}")

        def _identifier(value):
            # Epochs and stages may arrive as full objects; only the id is kept
            if isinstance(value, Mapping):
                return value.get("id")
            return value

        return cls(
            mask=data.get("mask"),
            active_contexts=_pick(data, "activeContexts", "active_contexts", ()),
            active_tags=_pick(data, "activeTags", "active_tags", ()),
            active_epoch=_identifier(_pick(data, "activeEpoch", "active_epoch")),
            active_stage=_identifier(_pick(data, "activeStage", "active_stage")),
            created_at=_pick(data, "createdAt", "created_at"),
            context_arc=_pick(data, "contextArc", "context_arc", ()),
        )


# Boundary key -> attribute name for WeightingConfig.from_dict
_CONFIG_KEYS = {
    "baseWeightFactor": "base_weight_factor",
    "recencyFactor": "recency_factor",
    "relevanceFactor": "relevance_factor",
    "coherenceFactor": "coherence_factor",
    "confidenceFactor": "confidence_factor",
    "recencyWindowDays": "recency_window_days",
    "keywordBoostFactor": "keyword_boost_factor",
    "priorityKeywords": "priority_keywords",
}


@dataclass(frozen=True)
class WeightingConfig:
    """
    Factor weights and tuning knobs for block scoring.

    Factor weights are intended to sum to 1.0. A config that does not is
    still honored; a warning is logged at construction.

    Attributes:
        base_weight_factor: Weight of the author-assigned base weight
        recency_factor: Weight of recency
        relevance_factor: Weight of tag/mask relevance
        coherence_factor: Weight of narrative coherence
        confidence_factor: Weight of confidence
        recency_window_days: Age at which recency reaches zero
        keyword_boost_factor: Relevance points earned by a priority-keyword tag
        priority_keywords: Tags that earn a partial relevance boost (lowercased)
    """

    base_weight_factor: float = DEFAULT_BASE_WEIGHT_FACTOR
    recency_factor: float = DEFAULT_RECENCY_FACTOR
    relevance_factor: float = DEFAULT_RELEVANCE_FACTOR
    coherence_factor: float = DEFAULT_COHERENCE_FACTOR
    confidence_factor: float = DEFAULT_CONFIDENCE_FACTOR
    recency_window_days: float = DEFAULT_RECENCY_WINDOW_DAYS
    keyword_boost_factor: float = DEFAULT_KEYWORD_BOOST
    priority_keywords: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        for name, value in self.factors.items():
            if not _is_number(value) or value < 0:
                raise InvalidWeightingConfigError(
                    f"Factor weights must be non-negative numbers, got {value!r}", name
                )
        if not _is_number(self.recency_window_days) or self.recency_window_days <= 0:
            raise InvalidWeightingConfigError(
                f"Recency window must be a positive number of days, got {self.recency_window_days!r}",
                "recency_window_days",
            )
        if not _is_number(self.keyword_boost_factor) or self.keyword_boost_factor < 0:
            raise InvalidWeightingConfigError(
                f"Keyword boost must be a non-negative number, got {self.keyword_boost_factor!r}",
                "keyword_boost_factor",
            )
        object.__setattr__(
            self, "priority_keywords", _lowercase_set(self.priority_keywords, "priority_keywords")
        )

        if abs(self.factor_sum - 1.0) > FACTOR_SUM_TOLERANCE:
            _log_warning(
                f"Weighting factors sum to {self.factor_sum:.3f}, expected 1.0; "
                f"total scores are clamped to 1.0"
            )

    @property
    def factors(self) -> Dict[str, float]:
        """The five factor weights keyed by attribute name."""
        return {
            "base_weight_factor": self.base_weight_factor,
            "recency_factor": self.recency_factor,
            "relevance_factor": self.relevance_factor,
            "coherence_factor": self.coherence_factor,
            "confidence_factor": self.confidence_factor,
        }

    @property
    def factor_sum(self) -> float:
        return sum(self.factors.values())

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "WeightingConfig":
        """
        Build a config from camelCase or snake_case keys; None values keep defaults.

        Raises:
            InvalidWeightingConfigError: On unknown keys or invalid values
        """
        data = data or {}
        known = set(_CONFIG_KEYS) | set(_CONFIG_KEYS.values())
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidWeightingConfigError(f"Unknown weighting config keys: {unknown}")

        kwargs = {}
        for key, value in data.items():
            if value is None:
                continue
            kwargs[_CONFIG_KEYS.get(key, key)] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseWeightFactor": self.base_weight_factor,
            "recencyFactor": self.recency_factor,
            "relevanceFactor": self.relevance_factor,
            "coherenceFactor": self.coherence_factor,
            "confidenceFactor": self.confidence_factor,
            "recencyWindowDays": self.recency_window_days,
            "keywordBoostFactor": self.keyword_boost_factor,
            "priorityKeywords": sorted(self.priority_keywords),
        }


# ============================================================================
# Outputs
# ============================================================================


@dataclass(frozen=True)
class ScoreBreakdown:
    """Sub-scores already multiplied by their factor weights."""

    base_weight: float
    recency_score: float
    relevance_score: float
    coherence_score: float
    confidence_score: float

    @property
    def total(self) -> float:
        return (
            self.base_weight
            + self.recency_score
            + self.relevance_score
            + self.coherence_score
            + self.confidence_score
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "baseWeight": self.base_weight,
            "recencyScore": self.recency_score,
            "relevanceScore": self.relevance_score,
            "coherenceScore": self.coherence_score,
            "confidenceScore": self.confidence_score,
        }


@dataclass(frozen=True)
class ScoreFactors:
    """Derived diagnostics explaining a score."""

    is_recent: bool
    has_relevant_tags: bool
    has_keyword_boost: bool
    tag_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isRecent": self.is_recent,
            "hasRelevantTags": self.has_relevant_tags,
            "hasKeywordBoost": self.has_keyword_boost,
            "tagCount": self.tag_count,
        }


@dataclass(frozen=True)
class BlockScore:
    """
    Score computed for one block in one call. Never cached or mutated.

    Attributes:
        block_id: Title of the scored block
        total_score: Weighted sum of sub-scores, clamped to at most 1.0
        breakdown: Weighted sub-scores
        factors: Boolean and count diagnostics
    """

    block_id: str
    total_score: float
    breakdown: ScoreBreakdown
    factors: ScoreFactors

    @property
    def content_richness(self) -> float:
        """Weighted base-weight contribution."""
        return self.breakdown.base_weight

    @property
    def relevance_score(self) -> float:
        """Weighted relevance contribution."""
        return self.breakdown.relevance_score

    @property
    def confidence(self) -> float:
        """Weighted confidence contribution."""
        return self.breakdown.confidence_score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blockId": self.block_id,
            "totalScore": self.total_score,
            "breakdown": self.breakdown.to_dict(),
            "factors": self.factors.to_dict(),
        }


@dataclass(frozen=True)
class RankedBlock:
    """A block paired with its score."""

    block: NarrativeBlock
    score: BlockScore

    def to_dict(self) -> Dict[str, Any]:
        return {"block": self.block.to_dict(), "score": self.score.to_dict()}
