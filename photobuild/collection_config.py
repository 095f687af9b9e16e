"""
CollectionConfig - Optional per-collection sidecar (meta.json).
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

SIDECAR_FILENAME = 'meta.json'

logger = logging.getLogger(__name__)


def prettify_slug(slug: str) -> str:
    """
    Derive a display title from a directory slug.

    Separators ('-' and '_') become spaces and the first letter of every
    word is upper-cased; the rest of each word is left untouched.

    >>> prettify_slug('summer_in-iceland')
    'Summer In Iceland'
    """
    spaced = re.sub(r'[-_]', ' ', slug)
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), spaced)


@dataclass
class CollectionConfig:
    """
    Overrides read from a collection's meta.json.

    Year and slug always come from the directory structure and cannot be
    overridden.

    Attributes:
        title: Display title (default: prettified slug)
        cover: Source filename of the cover (default: first image by name)
        order: Sort weight; collections with one sort before those without
    """
    title: Optional[str] = None
    cover: Optional[str] = None
    order: Optional[Union[int, float]] = None

    def resolve_title(self, slug: str) -> str:
        return self.title or prettify_slug(slug)

    @classmethod
    def from_dict(cls, data: dict, source: str = SIDECAR_FILENAME) -> 'CollectionConfig':
        """
        Create from a parsed sidecar, dropping fields of the wrong type.

        Args:
            data: Parsed JSON object
            source: Name used in warnings
        """
        config = cls()

        title = data.get('title')
        if isinstance(title, str) and title:
            config.title = title
        elif title is not None:
            logger.warning(f"  Ignoring invalid 'title' in {source}: {title!r}")

        cover = data.get('cover')
        if isinstance(cover, str) and cover:
            config.cover = cover
        elif cover is not None:
            logger.warning(f"  Ignoring invalid 'cover' in {source}: {cover!r}")

        order = data.get('order')
        if isinstance(order, (int, float)) and not isinstance(order, bool):
            config.order = order
        elif order is not None:
            logger.warning(f"  Ignoring invalid 'order' in {source}: {order!r}")

        return config


def load_collection_config(
    collection_dir: Union[str, Path],
    label: Optional[str] = None
) -> CollectionConfig:
    """
    Read the sidecar of a collection directory.

    A missing sidecar gives the defaults. A sidecar that cannot be read or
    parsed logs a warning and also gives the defaults; it never aborts.

    Args:
        collection_dir: Directory that may contain meta.json
        label: Name used in warnings (e.g., '2024/iceland')

    Returns:
        CollectionConfig
    """
    path = Path(collection_dir) / SIDECAR_FILENAME
    label = label or str(collection_dir)

    if not path.is_file():
        return CollectionConfig()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"  Warning: could not parse {SIDECAR_FILENAME} in {label}: {e}")
        return CollectionConfig()

    if not isinstance(data, dict):
        logger.warning(f"  Warning: {SIDECAR_FILENAME} in {label} is not an object")
        return CollectionConfig()

    return CollectionConfig.from_dict(data, source=f"{label}/{SIDECAR_FILENAME}")
