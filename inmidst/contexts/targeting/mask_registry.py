import os
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv
from omegaconf import OmegaConf

from inmidst.contexts.targeting.exceptions import InvalidNarrativeInputError, MaskNotFoundError
from inmidst.contexts.targeting.logger import _log_debug
from inmidst.contexts.targeting.narrative_data_structures import Mask

load_dotenv()
DEFAULT_CATALOG_PATH = Path(__file__).parent / "catalog" / "masks.yaml"
MASK_CATALOG_PATH = Path(os.getenv("MASK_CATALOG_PATH", str(DEFAULT_CATALOG_PATH)))


class MaskRegistry:
    """
    Registry for loading and caching the mask catalog.

    The catalog is a YAML file with a top-level `masks` list; each entry has an
    `id`, descriptive fields, and `filters`. The registry only supplies masks
    by id; deciding which mask is active belongs to the caller.
    """

    def __init__(self, catalog_path: Path = None):
        """
        Initialize the mask registry.

        Args:
            catalog_path: Path to the catalog YAML. Defaults to MASK_CATALOG_PATH
                          from environment, or the bundled catalog
        """
        if catalog_path is None:
            catalog_path = MASK_CATALOG_PATH

        self.catalog_path = Path(catalog_path)
        self._cache: Dict[str, Mask] = {}

    def _load(self) -> Dict[str, Mask]:
        if self._cache:
            return self._cache

        if not self.catalog_path.exists():
            raise FileNotFoundError(f"Mask catalog not found at {self.catalog_path}")

        data = OmegaConf.to_container(OmegaConf.load(self.catalog_path), resolve=True) or {}
        masks: Dict[str, Mask] = {}
        for entry in data.get("masks") or []:
            mask = Mask.from_dict(entry)
            if not mask.id:
                raise InvalidNarrativeInputError(f"Mask entry without id in {self.catalog_path}", "id")
            mask_id = mask.id.lower()
            if mask_id in masks:
                raise InvalidNarrativeInputError(f"Duplicate mask id '{mask.id}' in {self.catalog_path}", "id")
            masks[mask_id] = mask

        _log_debug(f"Loaded {len(masks)} mask(s) from {self.catalog_path}")
        self._cache = masks
        return self._cache

    def get_mask(self, mask_id: str) -> Mask:
        """
        Get a mask by id (case-insensitive).

        Raises:
            MaskNotFoundError: If the id is not in the catalog
            FileNotFoundError: If the catalog file doesn't exist
        """
        masks = self._load()
        try:
            return masks[mask_id.lower()]
        except KeyError:
            raise MaskNotFoundError(mask_id, masks.keys()) from None

    def list_mask_ids(self) -> List[str]:
        """Mask ids in catalog order."""
        return list(self._load())

    def clear_cache(self):
        """Clear the loaded catalog."""
        self._cache = {}

    def is_loaded(self) -> bool:
        return bool(self._cache)
