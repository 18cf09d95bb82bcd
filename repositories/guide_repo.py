"""
repositories/guide_repo.py
--------------------------
Read-only access to the guides catalog (a JSON list) and the guide files.

The catalog is re-read on every call so operators can add guides without
restarting the bot. Each call parses one complete file, so a concurrent
edit is observed on the next call, never half-applied.
"""

import json
from pathlib import Path
from typing import Optional

from config import GUIDES_DIR, GUIDES_PATH
from models.guide import GuideRecord
from utils.logger import get_logger

logger = get_logger(__name__)


class GuideRepository:
    """Repository for the guides catalog and its asset files."""

    def __init__(self, catalog_path: Path = GUIDES_PATH, storage_root: Path = GUIDES_DIR):
        self.catalog_path = Path(catalog_path)
        self.storage_root = Path(storage_root)

    # ── READ ──────────────────────────────────────────────

    def list_guides(self) -> list[GuideRecord]:
        """
        Load all guides in catalog order.

        Returns:
            The guides, or an empty list if the catalog is missing or malformed.
            Invalid entries are skipped; for duplicate slugs the first entry wins.
        """
        try:
            with open(self.catalog_path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            logger.error(f"Guides catalog not found: {self.catalog_path}")
            return []
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load guides catalog {self.catalog_path}: {e}")
            return []

        if not isinstance(raw, list):
            logger.error(
                f"Guides catalog {self.catalog_path} must be a JSON list, "
                f"got {type(raw).__name__}"
            )
            return []

        guides: list[GuideRecord] = []
        seen: set[str] = set()
        for index, entry in enumerate(raw):
            try:
                guide = GuideRecord.from_dict(entry)
            except ValueError as e:
                logger.warning(f"Skipping guides catalog entry #{index}: {e}")
                continue
            if guide.slug in seen:
                logger.warning(f"Duplicate guide slug '{guide.slug}' in catalog, keeping the first")
                continue
            seen.add(guide.slug)
            guides.append(guide)
        return guides

    def find_by_slug(self, slug: str) -> Optional[GuideRecord]:
        """
        Fetch a guide by its exact (case-sensitive) slug.

        Returns:
            The GuideRecord or None.
        """
        for guide in self.list_guides():
            if guide.slug == slug:
                return guide
        return None

    # ── FILES ─────────────────────────────────────────────

    def asset_path(self, guide: GuideRecord) -> Optional[Path]:
        """
        Resolve the guide's file against the storage root.

        Returns:
            The absolute path if the file exists right now, else None.
            Paths pointing outside the storage root are treated as missing.
        """
        root = self.storage_root.resolve()
        path = (root / guide.file).resolve()
        if not path.is_relative_to(root):
            logger.warning(f"Guide '{guide.slug}' points outside the storage root: {guide.file}")
            return None
        if not path.is_file():
            logger.warning(f"Guide file is missing for '{guide.slug}': {path}")
            return None
        return path
