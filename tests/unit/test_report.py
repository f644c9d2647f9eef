"""Unit tests for weighting report rendering."""

import json

import pytest

from inmidst.contexts.targeting import (
    NarrativeContext,
    format_weighting_report,
    generate_weighting_report,
    report_to_dicts,
)
from inmidst.utils.report_formatter import Column, TableFormatter, format_flags


@pytest.fixture
def report(narrative_blocks, analyst_mask, now):
    return generate_weighting_report(narrative_blocks, NarrativeContext(mask=analyst_mask), now=now)


@pytest.mark.unit
def test_table_lists_blocks_in_rank_order(report):
    text = format_weighting_report(report)
    lines = text.splitlines()

    assert lines[1] == "NARRATIVE WEIGHTING REPORT"
    assert "Recency" in lines[3]
    assert lines[5].split()[0] == "1"
    assert "Data Analysis Project" in lines[5]
    assert "0.420" in lines[5]
    assert lines[5].rstrip().endswith("-")
    assert text.endswith("4 block(s) scored")


@pytest.mark.unit
def test_table_top_n(report):
    text = format_weighting_report(report, top_n=2)

    assert "Leadership Initiative" in text
    assert "Technical Architecture" not in text
    assert text.endswith("4 block(s) scored, top 2 shown")


@pytest.mark.unit
def test_empty_report():
    text = format_weighting_report([], title="EMPTY")
    assert "EMPTY" in text
    assert text.endswith("0 block(s) scored")


@pytest.mark.unit
def test_report_to_dicts_is_json_ready(report):
    entries = report_to_dicts(report)
    json.dumps(entries)

    first = entries[0]
    assert first["block"]["title"] == "Data Analysis Project"
    assert first["score"]["blockId"] == "Data Analysis Project"
    assert first["score"]["totalScore"] == pytest.approx(0.42)
    assert set(first["score"]["breakdown"]) == {
        "baseWeight",
        "recencyScore",
        "relevanceScore",
        "coherenceScore",
        "confidenceScore",
    }
    assert first["score"]["factors"] == {
        "isRecent": False,
        "hasRelevantTags": False,
        "hasKeywordBoost": False,
        "tagCount": 3,
    }


@pytest.mark.unit
def test_column_truncates_overflow():
    column = Column("Block", 8)
    assert column.format_value("Technical Architecture") == "Technic…"
    assert column.format_value(0.5) == "0.5     "
    assert Column("Total", 6, ">", precision=3).format_value(0.42) == " 0.420"


@pytest.mark.unit
def test_table_row_length_mismatch():
    table = TableFormatter([Column("A", 3), Column("B", 3)])
    with pytest.raises(ValueError):
        table.add_row([1])


@pytest.mark.unit
def test_format_flags():
    assert format_flags(recent=True, relevant=False, keyword=True) == "recent,keyword"
    assert format_flags(recent=False) == "-"
