"""
AssetPipeline - Turns one source image into its published variants.
"""

import enum
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .cache_entry import CacheEntry, VariantInfo
from .cache_store import CacheStore
from .descriptors import PhotoDescriptor
from .fingerprint import fingerprint
from .source_image import SourceImage
from .variant_generator import DecodeError, VariantGenerator, read_dimensions

DEFAULT_WIDTHS = (400, 800, 1200, 1920)
PLACEHOLDER_SIZE = (1920, 1080)


class Outcome(enum.Enum):
    """Terminal state of one pipeline run for a source image."""
    CACHE_HIT = 'cache_hit'
    GENERATED = 'generated'
    FALLBACK = 'fallback'


@dataclass
class ProcessResult:
    """
    Result of processing a single source image.

    Attributes:
        image: The source image
        outcome: How the photo was produced
        photo: Descriptor for the manifest
        output_name: Canonical output filename
        variants: Variants written (empty for a fallback copy)
        bytes_written: Bytes placed in the output directory
        error: Error message for a fallback, else None
    """
    image: SourceImage
    outcome: Outcome
    photo: PhotoDescriptor
    output_name: str
    variants: List[VariantInfo] = field(default_factory=list)
    bytes_written: int = 0
    error: Optional[str] = None


def format_srcset(parts: Sequence[str]) -> str:
    """Join srcset fragments ('<path> <width>w') into an attribute value."""
    return ', '.join(parts)


class AssetPipeline:
    """
    Processes source images one at a time: cache lookup, restore or
    generate, fallback copy on failure, cache write-back.

    No per-image error escapes process(); one bad photo never breaks the build.
    """

    def __init__(
        self,
        cache: CacheStore,
        generator: VariantGenerator,
        widths: Sequence[int] = DEFAULT_WIDTHS,
        url_prefix: str = 'photos',
        placeholder: Tuple[int, int] = PLACEHOLDER_SIZE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            cache: Loaded cache store
            generator: Variant generator
            widths: Responsive target widths
            url_prefix: Site-relative prefix for output paths
            placeholder: (width, height) used when dimensions cannot be read
            logger: Optional logger instance
        """
        self.cache = cache
        self.generator = generator
        self.widths = tuple(sorted(set(widths)))
        self.url_prefix = url_prefix.strip('/')
        self.placeholder = placeholder
        self.logger = logger or logging.getLogger(__name__)

    def public_path(self, image: SourceImage, name: str) -> str:
        """Site-relative path of an output file."""
        return f"{self.url_prefix}/{image.year}/{image.slug}/{name}"

    def process(self, image: SourceImage, output_dir: Union[str, Path]) -> ProcessResult:
        """
        Process one source image into output_dir.

        Args:
            image: Source image
            output_dir: Output directory for the image's collection

        Returns:
            ProcessResult; never raises for per-image failures
        """
        output_dir = Path(output_dir)
        key = image.cache_key

        try:
            data = image.read_bytes()
        except OSError as e:
            return self._fallback(image, None, output_dir, e)

        digest = fingerprint(data)

        entry = self.cache.lookup(key)
        if entry is not None and self.cache.is_valid(key, entry, digest) and self.matches_plan(image, entry):
            try:
                restored = self.cache.restore(key, entry, output_dir)
            except OSError as e:
                self.logger.warning(f"  Could not restore {image.filename} from cache: {e}")
            else:
                self.cache.touch(key, entry)
                self.logger.info(
                    f"  {image.filename} -> {entry.full_name} "
                    f"{entry.full_width}x{entry.full_height} (cached)"
                )
                return ProcessResult(
                    image=image,
                    outcome=Outcome.CACHE_HIT,
                    photo=PhotoDescriptor(
                        src=self.public_path(image, entry.full_name),
                        srcset=entry.srcset,
                        width=entry.full_width,
                        height=entry.full_height,
                    ),
                    output_name=entry.full_name,
                    variants=[],
                    bytes_written=restored,
                )

        try:
            variants, srcset_parts, written = self._generate_variants(image, data, output_dir)
        except Exception as e:
            return self._fallback(image, data, output_dir, e)

        entry = CacheEntry.from_variants(digest, variants, srcset_parts)
        self.cache.commit(key, entry, output_dir)

        return ProcessResult(
            image=image,
            outcome=Outcome.GENERATED,
            photo=PhotoDescriptor(
                src=self.public_path(image, entry.full_name),
                srcset=entry.srcset,
                width=entry.full_width,
                height=entry.full_height,
            ),
            output_name=entry.full_name,
            variants=variants,
            bytes_written=written,
        )

    def target_widths(self, native_width: int) -> List[int]:
        """Configured widths that do not upscale a source of native_width."""
        return [w for w in self.widths if w <= native_width]

    def plan_variants(self, image: SourceImage, native_width: int) -> List[Tuple[Optional[int], str]]:
        """
        Variant (target width, filename) pairs for a source of native_width.

        A source narrower than every configured width gets a single
        native-size variant, whose target width is None.
        """
        extension = VariantGenerator.OUTPUT_EXTENSION
        plan: List[Tuple[Optional[int], str]] = [
            (w, f"{image.output_stem}-{w}w{extension}") for w in self.target_widths(native_width)
        ]
        if not plan:
            plan = [(None, f"{image.output_stem}{extension}")]
        return plan

    def matches_plan(self, image: SourceImage, entry: CacheEntry) -> bool:
        """
        Check that a cached entry is what this pipeline would generate now.

        The canonical width of an entry is the widest variant, so planning
        against it reproduces the original plan. An entry written for another
        output stem, width set or URL prefix does not match.
        """
        plan = self.plan_variants(image, entry.full_width)
        files = [name for _, name in plan]
        srcset_parts = [
            f"{self.public_path(image, name)} {width or entry.full_width}w" for width, name in plan
        ]
        if entry.files == files and entry.srcset_parts == srcset_parts:
            return True
        self.logger.info(f"  Cache entry {image.cache_key} was built with other settings, regenerating")
        return False

    def _generate_variants(
        self,
        image: SourceImage,
        data: bytes,
        output_dir: Path
    ) -> Tuple[List[VariantInfo], List[str], int]:
        """
        Encode every qualifying width, or one native-size variant.

        Files already written are removed again if a later variant fails.

        Returns:
            Tuple of (variants ascending by width, srcset parts, bytes written)
        """
        native_width, native_height = self.generator.probe(data)
        output_dir.mkdir(parents=True, exist_ok=True)

        plan = self.plan_variants(image, native_width)
        native_only = plan[0][0] is None

        variants: List[VariantInfo] = []
        srcset_parts: List[str] = []
        written = 0
        try:
            for target_width, name in plan:
                generated = self.generator.generate(data, native_width, native_height, target_width)
                (output_dir / name).write_bytes(generated.data)
                written += len(generated.data)
                variants.append(VariantInfo(name=name, width=generated.width, height=generated.height))
                srcset_parts.append(f"{self.public_path(image, name)} {generated.width}w")
                suffix = " (native size)" if native_only else ""
                self.logger.info(
                    f"  {image.filename} -> {name} {generated.width}x{generated.height}{suffix}"
                )
        except Exception:
            for variant in variants:
                (output_dir / variant.name).unlink(missing_ok=True)
            raise

        return variants, srcset_parts, written

    def _fallback(
        self,
        image: SourceImage,
        data: Optional[bytes],
        output_dir: Path,
        error: Exception
    ) -> ProcessResult:
        """
        Publish the source unmodified with best-effort dimensions.

        The copy is named after the output stem (see SourceImage.fallback_name)
        so it cannot overwrite a variant of another source. The result is not
        cached: there are no variants to cache.
        """
        self.logger.warning(f"  Warning: could not optimise {image.filename}: {error}")

        written = 0
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            target = output_dir / image.fallback_name
            if data is not None:
                target.write_bytes(data)
            else:
                shutil.copyfile(image.path, target)
            written = target.stat().st_size
        except OSError as e:
            self.logger.error(f"  Could not copy {image.filename} to output: {e}")

        width, height = self.placeholder
        if data is not None:
            try:
                width, height = read_dimensions(data)
            except DecodeError:
                self.logger.debug(f"  No readable header in {image.filename}, using placeholder size")

        self.logger.info(f"  {image.filename} -> {image.fallback_name} {width}x{height} (copied as-is)")

        path = self.public_path(image, image.fallback_name)
        return ProcessResult(
            image=image,
            outcome=Outcome.FALLBACK,
            photo=PhotoDescriptor(
                src=path,
                srcset=format_srcset([f"{path} {width}w"]),
                width=width,
                height=height,
            ),
            output_name=image.fallback_name,
            variants=[],
            bytes_written=written,
            error=str(error),
        )
