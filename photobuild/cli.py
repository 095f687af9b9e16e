"""
Command Line Interface for the photo site build.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .build_progress import BuildProgress
from .builder import SiteBuilder, SourceRootNotFoundError
from .cache_store import CacheStore
from .config import BuildConfig
from .reporter import Reporter


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('photobuild')


def get_build_config(args: argparse.Namespace) -> BuildConfig:
    """Build configuration from CLI arguments."""
    return BuildConfig.from_paths(
        source_root=args.source,
        output_root=args.output,
        cache_dir=args.cache,
        site_title=args.site_title,
        widths=tuple(args.width) if args.width else None,
        quality=args.quality,
        workers=args.workers,
    )


def cmd_build(args: argparse.Namespace) -> int:
    """Execute build command."""
    logger = setup_logging(args.verbose)
    config = get_build_config(args)

    if not config.source_root.is_dir():
        logger.error(f"Source photos directory not found: {config.source_root}")
        return 1

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    logger.info(f"Source: {config.source_root}")
    logger.info(f"Output: {config.output_root}")
    logger.info(f"Cache: {config.cache_dir}")
    logger.info(f"Widths: {', '.join(str(w) for w in config.widths)} (quality {config.quality})")

    progress = None
    if not args.quiet:
        progress = BuildProgress(show_files=args.show_files, logger=logger)

    try:
        result = SiteBuilder(config, progress=progress, logger=logger).build()
    except SourceRootNotFoundError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Build failed: {e}")
        return 1

    if not result.cache_saved:
        logger.warning("Cache index was not saved; the next build will regenerate more images")

    if not args.quiet:
        print()
        Reporter().report_build(result.stats, result.manifest)

    return 0


def cmd_cache(args: argparse.Namespace) -> int:
    """Execute cache report command."""
    logger = setup_logging(args.verbose)

    cache_dir = Path(args.cache)
    if not cache_dir.is_dir():
        logger.error(f"Cache directory not found: {cache_dir}")
        return 1

    cache = CacheStore(cache_dir, logger=logger)
    cache.load()
    Reporter().report_cache(cache)
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='photobuild',
        description='Build optimised photo galleries and a manifest from a photos/<year>/<slug>/ tree',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  1. Build:  python -m photobuild build --source src/photos --output _site
  2. Inspect the cache:  python -m photobuild cache --cache .cache/photos

The output directory is recreated on every build; the cache directory is
kept between builds so unchanged photos are not re-encoded.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    build_parser = subparsers.add_parser('build', help='Build photos and manifest.json')
    build_parser.add_argument('-s', '--source', default='src/photos', help='Source photos directory')
    build_parser.add_argument('-o', '--output', default='_site', help='Output site directory')
    build_parser.add_argument('--cache', default='.cache/photos', help='Persistent variant cache directory')
    build_parser.add_argument('--site-title', help='Site title written to the manifest')
    build_parser.add_argument('-w', '--width', type=int, action='append', metavar='PX',
                              help='Responsive width to generate (repeatable; default: 400 800 1200 1920)')
    build_parser.add_argument('--quality', type=int, help='WebP quality (default: 85)')
    build_parser.add_argument('-j', '--workers', type=int, help='Images processed in parallel (default: 1)')
    build_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    build_parser.add_argument('--show-files', action='store_true',
                              help='Print each file as processed with result')
    build_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    cache_parser = subparsers.add_parser('cache', help='Report on the variant cache')
    cache_parser.add_argument('--cache', default='.cache/photos', help='Persistent variant cache directory')
    cache_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'build':
        return cmd_build(parsed_args)
    elif parsed_args.command == 'cache':
        return cmd_cache(parsed_args)

    return 1
