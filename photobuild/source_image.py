"""
SourceImage - A single source photo discovered under a collection directory.
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourceImage:
    """
    A leaf image file under photos/<year>/<slug>/.

    Attributes:
        path: Absolute path to the source file
        year: Year directory name (e.g., '2024')
        slug: Collection directory name
        filename: Base filename (e.g., 'beach.jpg')
        output_stem: Stem used for derived filenames, unique within the collection
    """
    path: Path
    year: str
    slug: str
    filename: str
    output_stem: str = ''

    def __post_init__(self):
        if not self.output_stem:
            object.__setattr__(self, 'output_stem', os.path.splitext(self.filename)[0])

    @property
    def cache_key(self) -> str:
        """Cache index key: '<year>/<slug>/<filename>'."""
        return f"{self.year}/{self.slug}/{self.filename}"

    @property
    def fallback_name(self) -> str:
        """Output filename for an unprocessed copy: output stem plus original extension."""
        return self.output_stem + os.path.splitext(self.filename)[1]

    def read_bytes(self) -> bytes:
        """Read the file content. Not cached; each call hits the disk."""
        return self.path.read_bytes()
