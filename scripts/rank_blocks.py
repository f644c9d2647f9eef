#!/usr/bin/env python3
"""
Command-line interface for ranking narrative blocks.

Reads a block pool from a YAML or JSON file and scores it against an
activation context. The file holds a `blocks` list and, optionally, a
`context` mapping, both in the shapes exchanged with the web application.

Commands:
    rank    - Print a weighting report table for every block
    select  - Print the top N block titles (or JSON)
    report  - Print the full ranked output as JSON
    masks   - List masks in the mask catalog
"""

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

import typer
import yaml
from loguru import logger
from typing_extensions import Annotated

from inmidst.contexts.targeting import (
    InvalidNarrativeInputError,
    MaskNotFoundError,
    MaskRegistry,
    NarrativeBlock,
    NarrativeContext,
    WeightingConfig,
    format_weighting_report,
    generate_weighting_report,
    rank_narrative_blocks,
    report_to_dicts,
    resolve_weighting_config,
    select_top_blocks,
)
from inmidst.contexts.targeting.logger import _log_info, setup_targeting_logger

app = typer.Typer(
    add_completion=False,
    help="Rank narrative blocks against a mask and activation context",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# Shared options
InputFile = Annotated[
    Path,
    typer.Argument(help="YAML or JSON file with `blocks` and optional `context`", exists=True, dir_okay=False),
]
MaskOption = Annotated[Optional[str], typer.Option("--mask", "-m", help="Mask id from the catalog")]
TagOption = Annotated[Optional[List[str]], typer.Option("--tag", "-t", help="Active tag (repeatable)")]
PresetOption = Annotated[
    Optional[List[str]], typer.Option("--preset", "-p", help="Weighting preset (repeatable, applied in order)")
]
WindowOption = Annotated[Optional[int], typer.Option("--window-days", help="Recency window in days")]
KeywordOption = Annotated[
    Optional[List[str]], typer.Option("--keyword", "-k", help="Priority keyword (repeatable)")
]
CatalogOption = Annotated[Optional[Path], typer.Option("--catalog", help="Mask catalog YAML")]
LogDirOption = Annotated[Optional[Path], typer.Option("--log-dir", help="Write a session log to this directory")]


def _fail(message: str) -> None:
    """Print an error to stderr and exit 1."""
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _configure_logging(log_dir: Optional[Path], provenance: dict) -> None:
    """Session log when --log-dir is given; otherwise warnings only, on stderr."""
    if log_dir is not None:
        session_dir = log_dir / f"rank_{datetime.now():%Y%m%d_%H%M%S}"
        setup_targeting_logger(session_dir, provenance)
        return
    logger.remove()
    logger.add(lambda message: typer.echo(message, err=True, nl=False), level="WARNING", format="{level}: {message}\n")


def _load_pool(input_file: Path) -> Tuple[List[NarrativeBlock], dict]:
    """
    Load blocks and the optional context mapping from a YAML/JSON file.

    Plain YAML, not OmegaConf: `${...}` in block content stays literal text.
    """
    try:
        with open(input_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise InvalidNarrativeInputError(f"Could not read {input_file}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("blocks"), list):
        raise InvalidNarrativeInputError(f"{input_file} must contain a `blocks` list")

    blocks = [NarrativeBlock.from_dict(entry) for entry in data["blocks"]]
    return blocks, data.get("context") or {}


def _build_inputs(
    input_file: Path,
    mask_id: Optional[str],
    tags: Optional[List[str]],
    presets: Optional[List[str]],
    window_days: Optional[int],
    keywords: Optional[List[str]],
    catalog: Optional[Path],
) -> Tuple[List[NarrativeBlock], NarrativeContext, WeightingConfig]:
    """Resolve the block pool, context, and config from file contents and CLI options."""
    blocks, context_data = _load_pool(input_file)

    if mask_id:
        context_data["mask"] = MaskRegistry(catalog).get_mask(mask_id)
    if tags:
        existing = context_data.get("activeTags") or context_data.get("active_tags") or []
        context_data["activeTags"] = list(existing) + list(tags)
        context_data.pop("active_tags", None)

    context = NarrativeContext.from_dict(context_data)
    config = resolve_weighting_config(
        presets or [],
        overrides={"recency_window_days": window_days, "priority_keywords": keywords or None},
    )
    _log_info(f"Loaded {len(blocks)} block(s) from {input_file}")
    return blocks, context, config


@app.command("rank")
def rank_command(
    input_file: InputFile,
    mask: MaskOption = None,
    tag: TagOption = None,
    preset: PresetOption = None,
    window_days: WindowOption = None,
    keyword: KeywordOption = None,
    catalog: CatalogOption = None,
    top: Annotated[Optional[int], typer.Option("--top", "-n", help="Only show the first N rows")] = None,
    log_dir: LogDirOption = None,
):
    """
    Print a weighting report table for every block.

    Examples:\n

        $ rank_blocks.py rank pool.yaml --mask analyst

        $ rank_blocks.py rank pool.yaml -t metrics -p factors_relevance_first
    """
    _configure_logging(log_dir, {"Input": input_file, "Mask": mask, "Presets": preset})
    try:
        blocks, context, config = _build_inputs(input_file, mask, tag, preset, window_days, keyword, catalog)
        ranked = rank_narrative_blocks(blocks, context, config)
    except (ValueError, MaskNotFoundError, FileNotFoundError) as e:
        _fail(str(e))

    typer.echo(format_weighting_report(ranked, top_n=top))


@app.command("select")
def select_command(
    input_file: InputFile,
    top: Annotated[int, typer.Option("--top", "-n", help="Number of blocks to select")] = 5,
    mask: MaskOption = None,
    tag: TagOption = None,
    preset: PresetOption = None,
    window_days: WindowOption = None,
    keyword: KeywordOption = None,
    catalog: CatalogOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print selected blocks as JSON")] = False,
    log_dir: LogDirOption = None,
):
    """Print the top N blocks, best first."""
    _configure_logging(log_dir, {"Input": input_file, "Mask": mask, "Top": top})
    try:
        blocks, context, config = _build_inputs(input_file, mask, tag, preset, window_days, keyword, catalog)
        selected = select_top_blocks(blocks, top, context, config)
    except (ValueError, MaskNotFoundError, FileNotFoundError) as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps([block.to_dict() for block in selected], indent=2, ensure_ascii=False))
        return
    for block in selected:
        typer.echo(block.title)


@app.command("report")
def report_command(
    input_file: InputFile,
    mask: MaskOption = None,
    tag: TagOption = None,
    preset: PresetOption = None,
    window_days: WindowOption = None,
    keyword: KeywordOption = None,
    catalog: CatalogOption = None,
    log_dir: LogDirOption = None,
):
    """Print the ranked blocks with full score breakdowns as JSON."""
    _configure_logging(log_dir, {"Input": input_file, "Mask": mask})
    try:
        blocks, context, config = _build_inputs(input_file, mask, tag, preset, window_days, keyword, catalog)
        report = generate_weighting_report(blocks, context, config)
    except (ValueError, MaskNotFoundError, FileNotFoundError) as e:
        _fail(str(e))

    typer.echo(json.dumps(report_to_dicts(report), indent=2, ensure_ascii=False))


@app.command("masks")
def masks_command(catalog: CatalogOption = None, log_dir: LogDirOption = None):
    """List masks in the catalog with their include/exclude tags."""
    _configure_logging(log_dir, {"Catalog": catalog or "(bundled)"})
    registry = MaskRegistry(catalog)
    try:
        mask_ids = registry.list_mask_ids()
    except (ValueError, FileNotFoundError) as e:
        _fail(str(e))

    for mask_id in mask_ids:
        mask = registry.get_mask(mask_id)
        include = ", ".join(sorted(mask.filters.include_tags)) or "-"
        exclude = ", ".join(sorted(mask.filters.exclude_tags)) or "-"
        typer.echo(f"{mask_id:<12} {mask.name or '':<12} +[{include}] -[{exclude}]")


if __name__ == "__main__":
    app()
