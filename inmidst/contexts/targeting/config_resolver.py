"""
Weighting Preset Resolution

Builds a WeightingConfig from named presets plus explicit overrides. Presets
are composable and can override each other, so factor mixes, recency windows,
and keyword lists can be combined freely.

Examples:
    # Relevance-heavy factors with a short recency window
    >>> resolve_weighting_config(["factors_relevance_first", "window_quarter"])

    # Preset plus an explicit override
    >>> resolve_weighting_config(["factors_balanced"], overrides={"recency_window_days": 730})
"""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from dotenv import load_dotenv
from omegaconf import OmegaConf

from inmidst.contexts.targeting.logger import _log_debug
from inmidst.contexts.targeting.narrative_data_structures import WeightingConfig

load_dotenv()
DEFAULT_PRESETS_PATH = Path(__file__).parent / "catalog" / "weighting_presets.yaml"
WEIGHTING_PRESETS_PATH = Path(os.getenv("WEIGHTING_PRESETS_PATH", str(DEFAULT_PRESETS_PATH)))


def load_weighting_presets(config_path: Path = None) -> Dict[str, Dict[str, Any]]:
    """
    Load weighting_presets.yaml and flatten to a single-level dict.

    Collapses nested structure: factors.balanced -> factors_balanced

    Args:
        config_path: Optional path to presets file (defaults to WEIGHTING_PRESETS_PATH)

    Returns:
        Flattened dict mapping preset names to config fragments
        Example: {"factors_balanced": {...}, "window_quarter": {...}}
    """
    if config_path is None:
        config_path = WEIGHTING_PRESETS_PATH

    nested = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True) or {}

    flattened = {}
    for category, presets in nested.items():
        for name, fragment in (presets or {}).items():
            flattened[f"{category}_{name}"] = fragment or {}

    return flattened


def resolve_weighting_config(
    preset_names: Sequence[str] = (),
    overrides: Optional[Mapping[str, Any]] = None,
    config_path: Path = None,
) -> WeightingConfig:
    """
    Resolve presets and overrides into a WeightingConfig.

    Presets are applied in order, later presets overriding earlier ones;
    explicit overrides are applied last and None values are ignored. Keys not
    set by either keep WeightingConfig defaults.

    Args:
        preset_names: Preset names (e.g., ["factors_relevance_first", "keywords_technical"])
        overrides: Config keys in snake_case or camelCase
        config_path: Optional path to weighting_presets.yaml

    Returns:
        Validated WeightingConfig

    Raises:
        ValueError: If a preset is not found
        InvalidWeightingConfigError: If the merged config is invalid
    """
    data: Dict[str, Any] = {}

    if preset_names:
        presets = load_weighting_presets(config_path)
        for preset_name in preset_names:
            if preset_name not in presets:
                available = sorted(presets)
                raise ValueError(f"Preset '{preset_name}' not found. Available presets: {available}")
            _log_debug(f"Applying weighting preset: {preset_name}")
            data.update(presets[preset_name])

    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})

    return WeightingConfig.from_dict(data)
