"""
Photo Site Build Package

Converts a photos/<year>/<slug>/ tree into responsive WebP variants and a
manifest.json describing the published galleries.

Unchanged photos are restored from a content-addressed cache instead of
being re-encoded.
"""

__version__ = "1.0.0"

from .fingerprint import fingerprint, fingerprint_file
from .source_image import SourceImage
from .variant_generator import (
    VariantGenerator,
    GeneratedVariant,
    VariantError,
    DecodeError,
    EncodeError,
    read_dimensions,
)
from .cache_entry import CacheEntry, VariantInfo
from .cache_store import CacheStore
from .descriptors import PhotoDescriptor, CollectionDescriptor
from .collection_config import CollectionConfig, load_collection_config, prettify_slug
from .pipeline import AssetPipeline, Outcome, ProcessResult
from .build_stats import BuildStats
from .build_progress import BuildProgress
from .assembler import CollectionAssembler
from .manifest import Manifest, build_manifest, sort_key
from .config import BuildConfig
from .builder import BuildContext, BuildResult, SiteBuilder, SourceRootNotFoundError, build_site
from .reporter import Reporter

__all__ = [
    "fingerprint",
    "fingerprint_file",
    "SourceImage",
    "VariantGenerator",
    "GeneratedVariant",
    "VariantError",
    "DecodeError",
    "EncodeError",
    "read_dimensions",
    "CacheEntry",
    "VariantInfo",
    "CacheStore",
    "PhotoDescriptor",
    "CollectionDescriptor",
    "CollectionConfig",
    "load_collection_config",
    "prettify_slug",
    "AssetPipeline",
    "Outcome",
    "ProcessResult",
    "BuildStats",
    "BuildProgress",
    "CollectionAssembler",
    "Manifest",
    "build_manifest",
    "sort_key",
    "BuildConfig",
    "BuildContext",
    "BuildResult",
    "SiteBuilder",
    "SourceRootNotFoundError",
    "build_site",
    "Reporter",
]
