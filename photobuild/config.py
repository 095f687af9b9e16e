"""
BuildConfig - Configuration for a site build.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

from .pipeline import DEFAULT_WIDTHS, PLACEHOLDER_SIZE


@dataclass
class BuildConfig:
    """
    Configuration for a site build.

    Attributes:
        source_root: Source photos directory (contains <year>/<slug>/)
        output_root: Site output directory; deleted and recreated every run
        cache_dir: Persistent variant cache, shared between runs
        site_title: Title written to the manifest
        widths: Responsive widths generated for every image
        quality: WebP quality (1-100)
        url_prefix: Site-relative folder for photos (output_root/url_prefix)
        workers: Images processed in parallel within a collection
        placeholder_width: Width used when a fallback image has no readable header
        placeholder_height: Height used when a fallback image has no readable header
    """
    source_root: Path
    output_root: Path
    cache_dir: Path
    site_title: str = 'Photos'
    widths: Tuple[int, ...] = DEFAULT_WIDTHS
    quality: int = 85
    url_prefix: str = 'photos'
    workers: int = 1
    placeholder_width: int = PLACEHOLDER_SIZE[0]
    placeholder_height: int = PLACEHOLDER_SIZE[1]
    manifest_name: str = field(default='manifest.json')

    def __post_init__(self):
        self.source_root = Path(self.source_root)
        self.output_root = Path(self.output_root)
        self.cache_dir = Path(self.cache_dir)
        self.widths = tuple(self.widths)

    @property
    def photos_output(self) -> Path:
        """Directory receiving processed photos."""
        return self.output_root / self.url_prefix

    @property
    def manifest_path(self) -> Path:
        return self.output_root / self.manifest_name

    @property
    def placeholder(self) -> Tuple[int, int]:
        return self.placeholder_width, self.placeholder_height

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not self.source_root.is_dir():
            errors.append(f"Source photos directory not found: {self.source_root}")

        source = self.source_root.resolve()
        output = self.output_root.resolve()
        cache = self.cache_dir.resolve()
        if output == source or output in source.parents:
            errors.append(f"Output directory {self.output_root} must not contain the source directory")
        if output == cache or output in cache.parents:
            errors.append(f"Output directory {self.output_root} must not contain the cache directory")

        if not self.widths:
            errors.append("At least one width is required")
        elif any(w <= 0 for w in self.widths):
            errors.append(f"Widths must be positive: {list(self.widths)}")

        if not 1 <= self.quality <= 100:
            errors.append(f"Quality must be between 1 and 100: {self.quality}")

        if self.workers < 1:
            errors.append(f"Workers must be at least 1: {self.workers}")

        if not self.url_prefix.strip('/'):
            errors.append("URL prefix must not be empty")

        return errors

    @classmethod
    def from_paths(
        cls,
        source_root: Union[str, Path],
        output_root: Union[str, Path],
        cache_dir: Union[str, Path],
        **overrides
    ) -> 'BuildConfig':
        """Create a config, ignoring overrides that are None."""
        kwargs = {k: v for k, v in overrides.items() if v is not None}
        return cls(source_root=Path(source_root), output_root=Path(output_root),
                   cache_dir=Path(cache_dir), **kwargs)
