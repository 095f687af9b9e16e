"""
CollectionAssembler - Walks photos/<year>/<slug>/ and assembles collections.
"""

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .build_progress import BuildProgress
from .build_stats import BuildStats
from .collection_config import load_collection_config
from .descriptors import CollectionDescriptor, PhotoDescriptor
from .pipeline import AssetPipeline, ProcessResult
from .source_image import SourceImage

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp', '.gif'}


def is_image_file(name: str) -> bool:
    """True if the filename has a supported image extension (case-insensitive)."""
    return os.path.splitext(name)[1].lower() in IMAGE_EXTENSIONS


def promote_cover(photos: List[PhotoDescriptor], cover: PhotoDescriptor) -> List[PhotoDescriptor]:
    """Return photos with cover moved to index 0, others keeping their order."""
    rest = [p for p in photos if p is not cover]
    return [cover] + rest


class CollectionAssembler:
    """
    Discovers collections from the two-level year/slug directory structure
    and runs every image through the asset pipeline.
    """

    YEAR_PATTERN = re.compile(r'^\d{4}$')
    VARIANT_SUFFIX = re.compile(r'^(?P<base>.+)-\d+w$')

    def __init__(
        self,
        pipeline: AssetPipeline,
        output_root: Union[str, Path],
        workers: int = 1,
        stats: Optional[BuildStats] = None,
        progress: Optional[BuildProgress] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize assembler.

        Args:
            pipeline: Asset pipeline used for every image
            output_root: Directory receiving <year>/<slug>/ output folders
            workers: Images processed in parallel within a collection
            stats: Optional statistics accumulator
            progress: Optional progress tracker
            logger: Optional logger instance
        """
        self.pipeline = pipeline
        self.output_root = Path(output_root)
        self.workers = max(1, workers)
        self.stats = stats or BuildStats()
        self.progress = progress
        self.logger = logger or logging.getLogger(__name__)

    def discover_years(self, source_root: Union[str, Path]) -> List[str]:
        """Year directory names directly under source_root, sorted."""
        root = Path(source_root)
        return sorted(
            entry.name for entry in root.iterdir()
            if entry.is_dir() and self.YEAR_PATTERN.match(entry.name)
        )

    def discover_collections(self, source_root: Union[str, Path]) -> Iterator[Tuple[str, str, Path]]:
        """
        Yield (year, slug, path) for every collection directory, sorted.

        Only immediate children of each year directory are considered.
        """
        root = Path(source_root)
        for year in self.discover_years(root):
            year_dir = root / year
            slugs = sorted(entry.name for entry in year_dir.iterdir() if entry.is_dir())
            for slug in slugs:
                yield year, slug, year_dir / slug

    def assemble(self, source_root: Union[str, Path]) -> List[CollectionDescriptor]:
        """
        Assemble every collection under source_root.

        Returns:
            Collections in discovery order (the manifest re-sorts them)
        """
        collections = []
        for year, slug, path in self.discover_collections(source_root):
            collections.append(self.assemble_collection(year, slug, path))

        if not collections:
            self.logger.warning(f"No year/collection folders found in {source_root}")

        return collections

    def list_images(self, year: str, slug: str, collection_dir: Path) -> List[SourceImage]:
        """
        List the images of a collection, sorted by filename.

        Output stems are made unique within the collection so no two sources
        publish a file under the same name. When two sources share a stem
        (a.jpg, a.png) the later one gets its extension appended (a-png). A
        stem that looks like another stem's width variant (a-400w next to a)
        is renamed the same way.
        """
        names = sorted(
            entry.name for entry in collection_dir.iterdir()
            if entry.is_file() and is_image_file(entry.name)
        )
        split = [os.path.splitext(name) for name in names]
        taken = {stem for stem, _ in split}

        stems: List[str] = []
        for stem, ext in split:
            output_stem = stem
            if output_stem in stems:
                output_stem = self._alternate_stem(stem, ext, taken)
            stems.append(output_stem)

        changed = True
        while changed:
            changed = False
            for i, (_, ext) in enumerate(split):
                match = self.VARIANT_SUFFIX.match(stems[i])
                if match and match.group('base') in stems:
                    stems[i] = self._alternate_stem(stems[i], ext, taken)
                    changed = True

        images = []
        for name, output_stem in zip(names, stems):
            if output_stem != os.path.splitext(name)[0]:
                self.logger.warning(
                    f"  {name} shares its published name with another image, publishing as {output_stem}"
                )
            images.append(SourceImage(
                path=collection_dir / name,
                year=year,
                slug=slug,
                filename=name,
                output_stem=output_stem,
            ))
        return images

    @staticmethod
    def _alternate_stem(stem: str, ext: str, taken: set) -> str:
        """Return '<stem>-<ext>' (numbered if needed) not yet in taken, and reserve it."""
        base = f"{stem}-{ext.lstrip('.').lower()}"
        candidate = base
        n = 2
        while candidate in taken:
            candidate = f"{base}-{n}"
            n += 1
        taken.add(candidate)
        return candidate

    def assemble_collection(self, year: str, slug: str, collection_dir: Path) -> CollectionDescriptor:
        """
        Process one collection directory.

        Args:
            year: Year directory name
            slug: Collection directory name
            collection_dir: Path of the collection

        Returns:
            CollectionDescriptor with the cover promoted to index 0
        """
        collection_key = f"{year}/{slug}"
        self.logger.info(f"Processing: {collection_key}")

        config = load_collection_config(collection_dir, label=collection_key)
        images = self.list_images(year, slug, collection_dir)
        output_dir = self.output_root / year / slug
        output_dir.mkdir(parents=True, exist_ok=True)

        if self.progress:
            self.progress.on_collection_start(collection_key, len(images))

        results = self._process_images(images, output_dir)

        photos: List[PhotoDescriptor] = []
        photo_of: Dict[str, PhotoDescriptor] = {}
        for result in results:
            photos.append(result.photo)
            photo_of[result.image.filename] = result.photo

        cover_photo = self._resolve_cover(config.cover, images, photo_of, photos, collection_key)
        if cover_photo is not None:
            photos = promote_cover(photos, cover_photo)

        self.stats.collections += 1
        if self.progress:
            self.progress.on_collection_complete(collection_key, len(photos), self.stats)

        return CollectionDescriptor(
            slug=slug,
            title=config.resolve_title(slug),
            year=int(year),
            order=config.order,
            cover=cover_photo.src if cover_photo else None,
            cover_srcset=cover_photo.srcset if cover_photo else None,
            photos=photos,
        )

    def _process_images(self, images: List[SourceImage], output_dir: Path) -> List[ProcessResult]:
        """Run the pipeline over images, returning results in input order."""
        if self.workers > 1 and len(images) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                results = list(pool.map(lambda image: self.pipeline.process(image, output_dir), images))
        else:
            results = [self.pipeline.process(image, output_dir) for image in images]

        for result in results:
            self.stats.record(result)
            if self.progress:
                self.progress.on_file_processed(result)
        return results

    def _resolve_cover(
        self,
        configured: Optional[str],
        images: List[SourceImage],
        photo_of: Dict[str, PhotoDescriptor],
        photos: List[PhotoDescriptor],
        collection_key: str
    ) -> Optional[PhotoDescriptor]:
        """
        Map the configured cover (or the first image) to its photo.

        Falls back to the first processed photo when the cover is unknown.
        """
        if not photos:
            return None

        cover_name = configured or (images[0].filename if images else None)
        cover = photo_of.get(cover_name) if cover_name else None
        if cover is None:
            if configured:
                self.logger.warning(
                    f"  Cover {configured} not found in {collection_key}, using first photo"
                )
            cover = photos[0]
        return cover
