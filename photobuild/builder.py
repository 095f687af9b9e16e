"""
SiteBuilder - Runs a full build: output scaffold, photos, manifest, cache.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .assembler import CollectionAssembler, is_image_file
from .build_progress import BuildProgress
from .build_stats import BuildStats
from .cache_store import CacheStore
from .config import BuildConfig
from .manifest import Manifest, build_manifest
from .pipeline import AssetPipeline
from .variant_generator import VariantGenerator


class SourceRootNotFoundError(FileNotFoundError):
    """The source photos directory does not exist."""


@dataclass
class BuildContext:
    """
    Everything one build run shares, passed explicitly instead of kept in
    module globals so several builds can run in one process.

    Attributes:
        config: Build configuration
        cache: Cache store for this run
        stats: Statistics accumulator
        logger: Logger for the run
    """
    config: BuildConfig
    cache: CacheStore
    stats: BuildStats = field(default_factory=BuildStats)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger('photobuild'))


@dataclass
class BuildResult:
    """
    Outcome of a build.

    Attributes:
        manifest: The manifest written to disk
        manifest_path: Where it was written
        stats: Build statistics
        cache_saved: False if the cache index could not be persisted
    """
    manifest: Manifest
    manifest_path: Path
    stats: BuildStats
    cache_saved: bool


class SiteBuilder:
    """
    Builds the output directory from the source photos tree.
    """

    def __init__(
        self,
        config: BuildConfig,
        generator: Optional[VariantGenerator] = None,
        progress: Optional[BuildProgress] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize builder.

        Args:
            config: Build configuration
            generator: Variant generator (default: WebP at config.quality)
            progress: Optional progress tracker
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.generator = generator or VariantGenerator(quality=config.quality, logger=self.logger)
        self.progress = progress

    def create_context(self) -> BuildContext:
        return BuildContext(
            config=self.config,
            cache=CacheStore(self.config.cache_dir, logger=self.logger),
            logger=self.logger,
        )

    def build(self) -> BuildResult:
        """
        Run a full build.

        Returns:
            BuildResult

        Raises:
            SourceRootNotFoundError: If the source directory is missing; the
                output directory is left untouched
            ValueError: If the configuration is otherwise invalid
        """
        config = self.config
        if not config.source_root.is_dir():
            raise SourceRootNotFoundError(f"Source photos directory not found: {config.source_root}")
        errors = config.validate()
        if errors:
            raise ValueError("; ".join(errors))

        context = self.create_context()

        self._recreate_output(context)
        self._copy_root_photos(context)

        context.cache.load()

        pipeline = AssetPipeline(
            cache=context.cache,
            generator=self.generator,
            widths=config.widths,
            url_prefix=config.url_prefix,
            placeholder=config.placeholder,
            logger=self.logger,
        )
        assembler = CollectionAssembler(
            pipeline=pipeline,
            output_root=config.photos_output,
            workers=config.workers,
            stats=context.stats,
            progress=self.progress,
            logger=self.logger,
        )
        collections = assembler.assemble(config.source_root)

        manifest = build_manifest(collections, config.site_title)
        manifest_path = manifest.save(config.manifest_path)

        cache_saved = context.cache.save()

        stats = context.stats
        self.logger.info(
            f"Build complete: {stats.collections} collection(s), {stats.total_images} image(s) "
            f"({stats.cache_hits} cached, {stats.generated} generated, {stats.fallbacks} copied as-is) "
            f"in {stats.elapsed_seconds:.1f}s"
        )

        return BuildResult(
            manifest=manifest,
            manifest_path=manifest_path,
            stats=stats,
            cache_saved=cache_saved,
        )

    def _recreate_output(self, context: BuildContext) -> None:
        """Delete and recreate the output directory."""
        output_root = context.config.output_root
        if output_root.exists():
            shutil.rmtree(output_root)
        context.config.photos_output.mkdir(parents=True, exist_ok=True)

    def _copy_root_photos(self, context: BuildContext) -> None:
        """
        Copy image files sitting directly in the source root (e.g. profile.JPG).

        They are published unprocessed under a lower-cased filename so pages
        can reference them regardless of the source file's case.
        """
        source_root = context.config.source_root
        destination = context.config.photos_output

        for entry in sorted(source_root.iterdir()):
            if not entry.is_file() or not is_image_file(entry.name):
                continue
            dest_name = entry.name.lower()
            try:
                shutil.copyfile(entry, destination / dest_name)
            except OSError as e:
                self.logger.warning(f"Could not copy root photo {entry.name}: {e}")
                continue
            context.stats.root_photos += 1
            if dest_name != entry.name:
                self.logger.info(f"Copied root photo: {entry.name} -> {dest_name}")
            else:
                self.logger.info(f"Copied root photo: {entry.name}")


def build_site(
    config: BuildConfig,
    progress: Optional[BuildProgress] = None,
    logger: Optional[logging.Logger] = None
) -> BuildResult:
    """Build the site described by config."""
    return SiteBuilder(config, progress=progress, logger=logger).build()
