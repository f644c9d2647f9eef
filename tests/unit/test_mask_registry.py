"""Unit tests for the mask catalog registry."""

import pytest

from inmidst.contexts.targeting import InvalidNarrativeInputError, MaskNotFoundError, MaskRegistry


def _write_catalog(tmp_path, body):
    path = tmp_path / "masks.yaml"
    path.write_text(body)
    return path


@pytest.mark.unit
def test_bundled_catalog_lists_all_masks():
    registry = MaskRegistry()
    mask_ids = registry.list_mask_ids()

    assert len(mask_ids) == 16
    assert mask_ids[0] == "analyst"
    assert mask_ids[-1] == "calibrator"
    assert len(set(mask_ids)) == len(mask_ids)


@pytest.mark.unit
def test_get_analyst_mask():
    mask = MaskRegistry().get_mask("analyst")

    assert mask.id == "analyst"
    assert mask.name == "Analyst"
    assert mask.filters.include_tags == frozenset({"analysis", "metrics", "impact"})
    assert mask.filters.exclude_tags == frozenset({"speculation"})
    assert "analysis" in mask.activation_contexts


@pytest.mark.unit
def test_lookup_is_case_insensitive():
    registry = MaskRegistry()
    assert registry.get_mask("Analyst") is registry.get_mask("analyst")


@pytest.mark.unit
def test_unknown_mask_raises():
    with pytest.raises(MaskNotFoundError) as exc_info:
        MaskRegistry().get_mask("wizard")

    assert exc_info.value.mask_id == "wizard"
    assert "analyst" in exc_info.value.available
    assert str(exc_info.value).startswith("Mask 'wizard' not found")


@pytest.mark.unit
def test_registry_caches_until_cleared(tmp_path):
    path = _write_catalog(tmp_path, "masks:\n  - id: solo\n    filters: {include_tags: [a]}\n")
    registry = MaskRegistry(path)

    assert not registry.is_loaded()
    registry.get_mask("solo")
    assert registry.is_loaded()

    registry.clear_cache()
    assert not registry.is_loaded()


@pytest.mark.unit
def test_missing_catalog_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        MaskRegistry(tmp_path / "absent.yaml").list_mask_ids()


@pytest.mark.unit
def test_entry_without_id_raises(tmp_path):
    path = _write_catalog(tmp_path, "masks:\n  - name: Nameless\n    filters: {}\n")
    with pytest.raises(InvalidNarrativeInputError):
        MaskRegistry(path).list_mask_ids()


@pytest.mark.unit
def test_duplicate_id_raises(tmp_path):
    path = _write_catalog(tmp_path, "masks:\n  - id: twin\n  - id: Twin\n")
    with pytest.raises(InvalidNarrativeInputError, match="Duplicate mask id"):
        MaskRegistry(path).list_mask_ids()
