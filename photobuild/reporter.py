"""
Reporter - Generates human-readable reports for builds and the cache.
"""

import sys
from collections import defaultdict
from typing import Dict, Optional, TextIO

from .build_stats import BuildStats
from .cache_store import CacheStore
from .manifest import Manifest


class Reporter:
    """
    Generates human-readable reports from build statistics and cache state.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
        """
        self.output = output or sys.stdout

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def _format_bytes(self, bytes_val: float) -> str:
        """Format bytes as human-readable string."""
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes_val < 1024:
                return f"{bytes_val:.1f} {unit}"
            bytes_val /= 1024
        return f"{bytes_val:.1f} PB"

    def _format_duration(self, seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{seconds:.1f} seconds"
        elif seconds < 3600:
            return f"{seconds / 60:.1f} minutes"
        else:
            return f"{seconds / 3600:.1f} hours"

    def report_build(self, stats: BuildStats, manifest: Optional[Manifest] = None) -> None:
        """
        Print a summary of a finished build.

        Args:
            stats: Statistics of the build
            manifest: Manifest written by the build, if any
        """
        self._print("=" * 60)
        self._print("BUILD SUMMARY")
        self._print("=" * 60)
        self._print()

        if manifest is not None:
            self._print(f"  Site:              {manifest.site_title}")
            self._print(f"  Collections:       {len(manifest.collections):>8,}")
            self._print(f"  Photos:            {manifest.total_photos:>8,}")
            self._print()

        self._print(f"  Images processed:  {stats.total_images:>8,}")
        self._print(f"  From cache:        {stats.cache_hits:>8,}  ({stats.hit_ratio * 100:.1f}%)")
        self._print(f"  Generated:         {stats.generated:>8,}  ({stats.variants_written:,} variants, "
                    f"{self._format_bytes(stats.bytes_generated)})")
        self._print(f"  Copied as-is:      {stats.fallbacks:>8,}")
        if stats.root_photos:
            self._print(f"  Root photos:       {stats.root_photos:>8,}")
        self._print(f"  Duration:          {self._format_duration(stats.elapsed_seconds)}")
        self._print()

        if stats.error_details:
            self._print("  Images that could not be optimised:")
            for detail in stats.error_details:
                self._print(f"    - {detail}")
            self._print()

    def report_cache(self, cache: CacheStore) -> None:
        """
        Print the contents of a cache index, per collection.

        Entries with missing variant files are listed: they will be
        regenerated in full on the next build.

        Args:
            cache: A loaded cache store
        """
        by_collection: Dict[str, Dict[str, int]] = defaultdict(lambda: {'entries': 0, 'files': 0, 'broken': 0})
        broken = []

        for key, entry in cache.entries():
            collection_key = key.rsplit('/', 1)[0]
            stats = by_collection[collection_key]
            stats['entries'] += 1
            stats['files'] += len(entry.files)
            missing = cache.missing_files(key, entry)
            if missing:
                stats['broken'] += 1
                broken.append((key, missing))

        self._print("=" * 60)
        self._print("CACHE SUMMARY")
        self._print("=" * 60)
        self._print()
        self._print(f"  Cache directory:   {cache.cache_dir}")
        self._print(f"  Entries:           {len(cache):>8,}")
        self._print()

        if not by_collection:
            self._print("  Cache is empty.")
            self._print()
            return

        self._print(f"  {'Collection':<36} {'Entries':>8} {'Files':>8} {'Broken':>8}")
        self._print(f"  {'-'*36} {'-'*8} {'-'*8} {'-'*8}")
        for collection_key in sorted(by_collection):
            stats = by_collection[collection_key]
            self._print(
                f"  {collection_key:<36} {stats['entries']:>8,} {stats['files']:>8,} {stats['broken']:>8,}"
            )
        self._print()

        if broken:
            self._print("  Entries with missing files (will be regenerated):")
            for key, missing in broken:
                self._print(f"    {key}: {', '.join(missing)}")
            self._print()
