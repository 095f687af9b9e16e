"""
CacheEntry - Persisted record of the variants generated for one source image.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class VariantInfo:
    """
    One generated variant of a source image.

    Attributes:
        name: Output filename (e.g., 'beach-800w.webp')
        width: Pixel width
        height: Pixel height
    """
    name: str
    width: int
    height: int


@dataclass
class CacheEntry:
    """
    Cache record for a single source image.

    Field names follow the on-disk index schema, which is shared with
    earlier builds, so they are mapped explicitly in to_dict/from_dict.

    Attributes:
        hash: SHA-256 fingerprint of the source bytes
        files: Variant filenames, ascending by width
        srcset_parts: One '<path> <width>w' fragment per variant
        full_name: Canonical (widest) variant filename
        full_width: Canonical width
        full_height: Canonical height
    """
    hash: str
    files: List[str] = field(default_factory=list)
    srcset_parts: List[str] = field(default_factory=list)
    full_name: str = ''
    full_width: int = 0
    full_height: int = 0

    @classmethod
    def from_variants(
        cls,
        hash: str,
        variants: List[VariantInfo],
        srcset_parts: List[str]
    ) -> 'CacheEntry':
        """
        Build an entry from freshly generated variants.

        Args:
            hash: Source fingerprint
            variants: Generated variants, ascending by width (must not be empty)
            srcset_parts: Matching srcset fragments
        """
        if not variants:
            raise ValueError("A cache entry needs at least one variant")
        canonical = variants[-1]
        return cls(
            hash=hash,
            files=[v.name for v in variants],
            srcset_parts=list(srcset_parts),
            full_name=canonical.name,
            full_width=canonical.width,
            full_height=canonical.height,
        )

    @property
    def srcset(self) -> str:
        """The srcset attribute value."""
        return ', '.join(self.srcset_parts)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'hash': self.hash,
            'files': list(self.files),
            'srcsetParts': list(self.srcset_parts),
            'fullName': self.full_name,
            'fullWidth': self.full_width,
            'fullHeight': self.full_height,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'CacheEntry':
        """
        Create from dictionary.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed
        """
        files = data['files']
        srcset_parts = data['srcsetParts']
        if not isinstance(files, list) or not isinstance(srcset_parts, list):
            raise TypeError("'files' and 'srcsetParts' must be lists")
        return cls(
            hash=str(data['hash']),
            files=[str(f) for f in files],
            srcset_parts=[str(p) for p in srcset_parts],
            full_name=str(data['fullName']),
            full_width=int(data['fullWidth']),
            full_height=int(data['fullHeight']),
        )
