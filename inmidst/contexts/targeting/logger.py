"""
Targeting context logger.

Provides logging interface for targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from inmidst.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[target]"


def setup_targeting_logger(log_dir: Path, extra_provenance: dict = None) -> Path:
    """
    Setup logger for targeting context.

    Configures loguru with provenance tracking. The engine itself never
    configures sinks; command-line entry points call this once per session.

    Args:
        log_dir: Directory for this targeting session
        extra_provenance: Additional provenance lines (mask, presets, input file)

    Returns:
        Path to log file

    Example:
        from inmidst.contexts.targeting.logger import setup_targeting_logger, _log_info

        log_file = setup_targeting_logger(log_dir, {"Mask": "analyst"})
        _log_info("Ranking 12 blocks...")
    """
    return _setup_logger(
        context_name="target",
        log_dir=log_dir,
        extra_provenance=extra_provenance,
    )


# Wrapper functions with automatic [target] prefix


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [target] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level targeting-specific logging helpers


def log_ranking_start(pool_size: int, mask_id: str = None, active_tag_count: int = 0) -> None:
    """Log start of a ranking pass with its activation context."""
    _log_debug(f"Ranking {pool_size} block(s)")
    _log_debug(f"  Mask: {mask_id or '(none)'}")
    _log_debug(f"  Active tags: {active_tag_count}")


def log_ranking_result(ranked, vetoed: int) -> None:
    """
    Log summary of a completed ranking pass.

    Args:
        ranked: List of RankedBlock from rank_narrative_blocks()
        vetoed: Number of blocks whose relevance was vetoed by mask exclusions
    """
    if not ranked:
        _log_debug("Ranking produced no entries (empty pool)")
        return
    top = ranked[0].score
    _log_debug(f"Ranked {len(ranked)} block(s); top: '{top.block_id}' ({top.total_score:.3f})")
    if vetoed:
        _log_debug(f"  {vetoed} block(s) vetoed by mask exclusions")
