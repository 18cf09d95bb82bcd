"""
models/guide.py
---------------
Domain model for downloadable guides (the "gifts" offered to subscribers).
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class GuideRecord:
    """
    A single entry of the guides catalog.

    Attributes:
        slug: Unique, case-sensitive identifier used in deep links and buttons.
        title: Display title (may be empty).
        file: Asset path relative to the guides storage directory.
        description: Optional one-line description.
    """
    slug: str
    title: str
    file: str
    description: Optional[str] = None

    @property
    def display_title(self) -> str:
        return self.title or "Без названия"

    @classmethod
    def from_dict(cls, data: Any) -> "GuideRecord":
        """
        Build a record from one catalog entry.

        Raises:
            ValueError: If the entry is not an object, lacks slug/file,
                or its slug has surrounding whitespace.
        """
        if not isinstance(data, dict):
            raise ValueError(f"catalog entry must be an object, got {type(data).__name__}")

        values = {}
        for key in ("slug", "file"):
            value = data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"catalog entry is missing '{key}'")
            values[key] = value.strip()

        # Slugs are matched exactly and never normalised.
        if values["slug"] != data["slug"]:
            raise ValueError(f"slug {data['slug']!r} has surrounding whitespace")

        title = data.get("title")
        values["title"] = title.strip() if isinstance(title, str) else ""

        description = data.get("description")
        if not isinstance(description, str) or not description.strip():
            description = None

        return cls(description=description.strip() if description else None, **values)

    def __str__(self) -> str:
        return f"{self.slug} ({self.title}) -> {self.file}"
