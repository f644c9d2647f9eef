"""
Weighting report rendering.

Turns generate_weighting_report() output into an aligned text table or into
JSON-ready dicts for diagnostic consumers.
"""

from typing import Any, Dict, List, Optional, Sequence

from inmidst.contexts.targeting.narrative_data_structures import RankedBlock
from inmidst.utils.report_formatter import Column, TableFormatter, format_flags

REPORT_COLUMNS = [
    Column("#", 3, ">"),
    Column("Block", 30),
    Column("Total", 6, ">", precision=3),
    Column("Base", 6, ">", precision=3),
    Column("Recency", 7, ">", precision=3),
    Column("Relev", 6, ">", precision=3),
    Column("Coher", 6, ">", precision=3),
    Column("Conf", 6, ">", precision=3),
    Column("Tags", 4, ">"),
    Column("Flags", 24),
]


def format_weighting_report(
    report: Sequence[RankedBlock],
    top_n: Optional[int] = None,
    title: str = "NARRATIVE WEIGHTING REPORT",
) -> str:
    """
    Render a weighting report as a text table.

    Args:
        report: Output of generate_weighting_report()
        top_n: Only show the first N entries (None shows all)
        title: Section header text

    Returns:
        Formatted table, one row per block, with weighted breakdown columns
    """
    shown = list(report) if top_n is None else list(report)[: max(top_n, 0)]

    table = TableFormatter(REPORT_COLUMNS)
    table.add_section_header(title).add_table_header().add_separator()

    for rank, item in enumerate(shown, 1):
        score = item.score
        breakdown = score.breakdown
        table.add_row(
            [
                rank,
                score.block_id,
                score.total_score,
                breakdown.base_weight,
                breakdown.recency_score,
                breakdown.relevance_score,
                breakdown.coherence_score,
                breakdown.confidence_score,
                score.factors.tag_count,
                format_flags(
                    recent=score.factors.is_recent,
                    relevant=score.factors.has_relevant_tags,
                    keyword=score.factors.has_keyword_boost,
                ),
            ]
        )

    summary = f"{len(report)} block(s) scored"
    if len(shown) < len(report):
        summary += f", top {len(shown)} shown"
    return table.add_summary(summary).render()


def report_to_dicts(report: Sequence[RankedBlock]) -> List[Dict[str, Any]]:
    """JSON-ready [{block, score}] entries."""
    return [item.to_dict() for item in report]
