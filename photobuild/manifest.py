"""
Manifest - The published description of the site's collections.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from .descriptors import CollectionDescriptor

logger = logging.getLogger(__name__)


def sort_key(collection: CollectionDescriptor) -> Tuple[bool, float, int, str]:
    """
    Total order for collections.

    Explicit order ascending (collections without one come last), then
    year descending, then title ascending (case-sensitive).
    """
    has_no_order = collection.order is None
    return (has_no_order, collection.order if not has_no_order else 0, -collection.year, collection.title)


@dataclass
class Manifest:
    """
    Complete site manifest handed to the templating layer.

    Attributes:
        site_title: Title of the site
        collections: Collections in display order
    """
    site_title: str
    collections: List[CollectionDescriptor] = field(default_factory=list)

    @property
    def total_photos(self) -> int:
        """Total number of photos across all collections."""
        return sum(len(c.photos) for c in self.collections)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'site': {'title': self.site_title},
            'collections': [c.to_dict() for c in self.collections],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Manifest':
        """Create from dictionary."""
        return cls(
            site_title=data.get('site', {}).get('title', ''),
            collections=[CollectionDescriptor.from_dict(c) for c in data.get('collections', [])],
        )

    def save(self, filepath: Union[str, Path]) -> Path:
        """Save manifest to a JSON file."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

        logger.info(f"Wrote {path} with {len(self.collections)} collection(s)")
        return path

    @classmethod
    def load(cls, filepath: Union[str, Path]) -> 'Manifest':
        """Load manifest from a JSON file."""
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)


def build_manifest(collections: Iterable[CollectionDescriptor], site_title: str) -> Manifest:
    """
    Sort assembled collections into a manifest.

    The whole collection set must be assembled first; sorting needs it all.
    """
    return Manifest(site_title=site_title, collections=sorted(collections, key=sort_key))
