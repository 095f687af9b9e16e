"""
Descriptors - The externally visible shapes of photos and collections.
"""

from dataclasses import dataclass, field, asdict
from typing import List, Optional, Union


@dataclass
class PhotoDescriptor:
    """
    A processed source image as the front end sees it.

    Attributes:
        src: Path of the canonical file, relative to the site root
        srcset: srcset attribute value, ascending by width
        width: Canonical width
        height: Canonical height
    """
    src: str
    srcset: str
    width: int
    height: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'PhotoDescriptor':
        return cls(**data)


@dataclass
class CollectionDescriptor:
    """
    One output gallery.

    Attributes:
        slug: Collection directory name
        title: Display title
        year: Year from the parent directory
        order: Explicit sort weight, or None
        cover: src of the cover photo, or None for an empty collection
        cover_srcset: srcset of the cover photo, or None
        photos: Photos in display order, cover first
    """
    slug: str
    title: str
    year: int
    order: Optional[Union[int, float]] = None
    cover: Optional[str] = None
    cover_srcset: Optional[str] = None
    photos: List[PhotoDescriptor] = field(default_factory=list)

    def to_dict(self) -> dict:
        """
        Convert to dictionary for JSON serialization.

        The order field only drives sorting and is not part of the output.
        """
        return {
            'slug': self.slug,
            'title': self.title,
            'year': self.year,
            'cover': self.cover,
            'coverSrcset': self.cover_srcset,
            'photos': [p.to_dict() for p in self.photos],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'CollectionDescriptor':
        """Create from dictionary."""
        return cls(
            slug=data['slug'],
            title=data['title'],
            year=data['year'],
            order=data.get('order'),
            cover=data.get('cover'),
            cover_srcset=data.get('coverSrcset'),
            photos=[PhotoDescriptor.from_dict(p) for p in data.get('photos', [])],
        )
