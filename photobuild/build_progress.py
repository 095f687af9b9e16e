"""
BuildProgress - Tracks and displays build progress.
"""

import logging
from typing import Optional

from .build_stats import BuildStats
from .pipeline import Outcome, ProcessResult


class BuildProgress:
    """
    Tracks and displays build progress with optional per-file output.
    """

    LABELS = {
        Outcome.CACHE_HIT: 'CACHED',
        Outcome.GENERATED: 'OK',
        Outcome.FALLBACK: 'COPIED',
    }

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 100,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each file as it's processed
            log_interval: Log summary progress every N images (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.last_logged = 0

    def on_collection_start(self, collection_key: str, image_count: int) -> None:
        """Called before the images of a collection are processed."""
        if self.show_files:
            print(f"\n=== {collection_key} ({image_count} images) ===")

    def on_file_processed(self, result: ProcessResult) -> None:
        """
        Called when a file is processed.

        Args:
            result: Pipeline result for the file
        """
        if not self.show_files:
            return
        label = self.LABELS[result.outcome]
        photo = result.photo
        line = f"  [{label}] {result.image.filename} -> {result.output_name} ({photo.width}x{photo.height})"
        if result.error:
            line += f" - {result.error}"
        print(line)

    def on_collection_complete(self, collection_key: str, photo_count: int, stats: BuildStats) -> None:
        """
        Called when a collection is assembled; logs a summary every log_interval images.

        Args:
            collection_key: '<year>/<slug>'
            photo_count: Photos in the collection
            stats: Running build statistics
        """
        if self.show_files:
            print(f"--- {collection_key}: {photo_count} photos ---")
            return

        if stats.total_images - self.last_logged >= self.log_interval:
            self.last_logged = stats.total_images
            self.logger.info(
                f"Progress: {stats.total_images} images "
                f"({stats.cache_hits} cached, {stats.generated} generated, "
                f"{stats.fallbacks} copied, {stats.rate_per_second:.1f}/sec)"
            )
