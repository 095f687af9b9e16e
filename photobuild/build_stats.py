"""
BuildStats - Statistics for a build run.
"""

import time
from dataclasses import dataclass, field
from typing import List

from .pipeline import Outcome, ProcessResult


@dataclass
class BuildStats:
    """
    Statistics for a build run.

    Attributes:
        total_images: Source images processed
        cache_hits: Images restored from the cache
        generated: Images freshly encoded
        fallbacks: Images copied as-is after a failure
        variants_written: Variant files encoded this run
        bytes_generated: Total bytes of freshly encoded variants
        collections: Collections assembled
        root_photos: Root-level photos copied
        start_time: Start timestamp
        error_details: List of warning messages for fallback images
    """
    total_images: int = 0
    cache_hits: int = 0
    generated: int = 0
    fallbacks: int = 0
    variants_written: int = 0
    bytes_generated: int = 0
    collections: int = 0
    root_photos: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    def record(self, result: ProcessResult) -> None:
        """Account for one pipeline result."""
        self.total_images += 1
        if result.outcome is Outcome.CACHE_HIT:
            self.cache_hits += 1
        elif result.outcome is Outcome.GENERATED:
            self.generated += 1
            self.variants_written += len(result.variants)
            self.bytes_generated += result.bytes_written
        else:
            self.fallbacks += 1
            self.error_details.append(f"{result.image.cache_key}: {result.error}")

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def rate_per_second(self) -> float:
        """Processing rate in images per second."""
        if self.elapsed_seconds > 0:
            return self.total_images / self.elapsed_seconds
        return 0.0

    @property
    def hit_ratio(self) -> float:
        """Share of images served from the cache (0.0 - 1.0)."""
        if self.total_images == 0:
            return 0.0
        return self.cache_hits / self.total_images
