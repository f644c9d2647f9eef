"""Integration tests for the rank_blocks command-line script."""

import json
import sys

import pytest
from loguru import logger
from typer.testing import CliRunner

from scripts.rank_blocks import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logger():
    """The script reconfigures loguru sinks; restore the default sink afterwards."""
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def pool_file(fixtures_path):
    return fixtures_path / "narrative_pool.yaml"


@pytest.mark.integration
def test_no_command_shows_help():
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    assert "select" in result.output


@pytest.mark.integration
def test_rank_prints_table(pool_file):
    result = runner.invoke(app, ["rank", str(pool_file), "--mask", "analyst"])

    assert result.exit_code == 0
    assert "NARRATIVE WEIGHTING REPORT" in result.output
    assert "5 block(s) scored" in result.output


@pytest.mark.integration
def test_rank_top_n(pool_file):
    result = runner.invoke(app, ["rank", str(pool_file), "--top", "1"])

    assert result.exit_code == 0
    assert "top 1 shown" in result.output


@pytest.mark.integration
def test_report_json_with_mask(pool_file):
    result = runner.invoke(app, ["report", str(pool_file), "--mask", "analyst"])

    assert result.exit_code == 0
    entries = json.loads(result.output)
    assert len(entries) == 5
    assert entries[0]["block"]["title"] == "Data Analysis Project"
    assert entries[0]["score"]["factors"]["hasRelevantTags"] is True

    vetoed = next(entry for entry in entries if entry["block"]["title"] == "Market Speculation")
    assert vetoed["score"]["breakdown"]["relevanceScore"] == 0.0


@pytest.mark.integration
def test_select_top_two_with_mask(pool_file):
    result = runner.invoke(app, ["select", str(pool_file), "--top", "2", "--mask", "analyst"])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["Data Analysis Project", "Technical Architecture"]


@pytest.mark.integration
def test_select_top_zero_prints_nothing(pool_file):
    result = runner.invoke(app, ["select", str(pool_file), "--top", "0"])

    assert result.exit_code == 0
    assert result.output == ""


@pytest.mark.integration
def test_select_json(pool_file):
    result = runner.invoke(app, ["select", str(pool_file), "-n", "1", "-m", "analyst", "--json"])

    assert result.exit_code == 0
    selected = json.loads(result.output)
    assert selected[0]["title"] == "Data Analysis Project"
    assert selected[0]["tags"] == ["analysis", "metrics", "impact"]


@pytest.mark.integration
def test_preset_and_tags_change_ranking(pool_file):
    result = runner.invoke(
        app,
        ["select", str(pool_file), "-n", "1", "-p", "factors_relevance_first", "-t", "leadership", "-t", "management"],
    )

    assert result.exit_code == 0
    assert result.output.splitlines() == ["Leadership Initiative"]


@pytest.mark.integration
def test_json_input_uses_file_context(fixtures_path):
    result = runner.invoke(app, ["select", str(fixtures_path / "narrative_pool.json"), "-n", "1"])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["Delivery Metrics"]


@pytest.mark.integration
def test_unknown_mask_fails(pool_file):
    result = runner.invoke(app, ["select", str(pool_file), "--mask", "wizard"])

    assert result.exit_code == 1
    assert "not found" in result.output


@pytest.mark.integration
def test_unknown_preset_fails(pool_file):
    result = runner.invoke(app, ["rank", str(pool_file), "--preset", "factors_nope"])

    assert result.exit_code == 1
    assert "Preset 'factors_nope' not found" in result.output


@pytest.mark.integration
def test_pool_without_blocks_fails(tmp_path):
    pool = tmp_path / "pool.yaml"
    pool.write_text("context:\n  activeTags: [metrics]\n")

    result = runner.invoke(app, ["rank", str(pool)])

    assert result.exit_code == 1
    assert "blocks" in result.output


@pytest.mark.integration
def test_invalid_block_fails(tmp_path):
    pool = tmp_path / "pool.yaml"
    pool.write_text("blocks:\n  - title: Overweight\n    weight: 500\n")

    result = runner.invoke(app, ["rank", str(pool)])

    assert result.exit_code == 1
    assert "Weight must be" in result.output


@pytest.mark.integration
def test_masks_lists_catalog():
    result = runner.invoke(app, ["masks"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert len(lines) == 16
    assert lines[0].startswith("analyst")
    assert lines[-1].startswith("calibrator")
    assert "-[speculation]" in lines[0]


@pytest.mark.integration
def test_log_dir_writes_session_log(pool_file, tmp_path):
    result = runner.invoke(app, ["rank", str(pool_file), "--log-dir", str(tmp_path)])

    assert result.exit_code == 0
    log_files = list(tmp_path.glob("rank_*/target.log"))
    assert len(log_files) == 1
    assert "[target] Loaded 5 block(s)" in log_files[0].read_text()


@pytest.mark.integration
@pytest.mark.parametrize("body", ["Templated ${oc.env:INMIDST_TEST_SECRET}", "Saved ${amount} per quarter"])
def test_block_content_is_not_interpolated(tmp_path, monkeypatch, body):
    monkeypatch.setenv("INMIDST_TEST_SECRET", "hunter2")
    pool = tmp_path / "pool.json"
    pool.write_text(json.dumps({"blocks": [{"title": "Savings ${title}", "body": body, "tags": ["impact"]}]}))

    result = runner.invoke(app, ["select", str(pool), "--json"])

    assert result.exit_code == 0
    selected = json.loads(result.output)
    assert selected[0]["body"] == body
    assert selected[0]["title"] == "Savings ${title}"
