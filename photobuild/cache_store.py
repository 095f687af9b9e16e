"""
CacheStore - Durable index of generated variants plus a mirror of their bytes.

Layout under the cache directory:

    index.json                                  key -> CacheEntry (see CacheEntry.to_dict)
    <year>/<slug>/<filename>/<variant files>    byte-for-byte copies of generated variants

Each entry is mirrored under its own key directory, so two sources of one
collection never share cached files even when their variant names match.

The index is the only source of truth for validity, but physical presence
of every variant file is re-checked on each lookup.
"""

import json
import logging
import shutil
import threading
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .cache_entry import CacheEntry


class CacheStore:
    """
    Persistent mapping from '<year>/<slug>/<filename>' to CacheEntry.

    Loaded once before processing, mutated during the build and saved once
    at the end. Index access is serialised with a lock so images can be
    processed from a worker pool.
    """

    INDEX_FILENAME = 'index.json'

    def __init__(
        self,
        cache_dir: Union[str, Path],
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize cache store.

        Args:
            cache_dir: Directory holding the index and cached variant files
            logger: Optional logger instance
        """
        self.cache_dir = Path(cache_dir)
        self.index_path = self.cache_dir / self.INDEX_FILENAME
        self.logger = logger or logging.getLogger(__name__)
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def load(self) -> int:
        """
        Load the index from disk.

        A missing index starts an empty cache. An unreadable or corrupt index
        is logged and also starts empty; malformed entries are skipped.

        Returns:
            Number of entries loaded
        """
        with self._lock:
            self._entries = {}

            if not self.index_path.exists():
                self.logger.info(f"No cache index at {self.index_path}, starting empty")
                return 0

            try:
                with open(self.index_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                self.logger.warning(f"Could not read cache index {self.index_path}: {e}")
                return 0

            if not isinstance(data, dict):
                self.logger.warning(f"Cache index {self.index_path} is not an object, ignoring it")
                return 0

            for key, entry_data in data.items():
                try:
                    self._entries[key] = CacheEntry.from_dict(entry_data)
                except (KeyError, TypeError, ValueError) as e:
                    self.logger.warning(f"Skipping malformed cache entry {key}: {e}")

            self.logger.info(f"Loaded cache index: {len(self._entries)} entries")
            return len(self._entries)

    def save(self) -> bool:
        """
        Persist the index to disk.

        A write failure is logged, not raised; the build must still complete.

        Returns:
            True if the index was written
        """
        with self._lock:
            data = {key: entry.to_dict() for key, entry in self._entries.items()}

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = self.index_path.with_suffix('.json.tmp')
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, sort_keys=True, ensure_ascii=False)
            tmp_path.replace(self.index_path)
        except OSError as e:
            self.logger.error(f"Could not save cache index {self.index_path}: {e}")
            return False

        self.logger.info(f"Saved cache index: {len(data)} entries")
        return True

    def lookup(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for a key, or None."""
        with self._lock:
            return self._entries.get(key)

    def entries(self) -> Iterator[Tuple[str, CacheEntry]]:
        """Yield (key, entry) pairs sorted by key."""
        with self._lock:
            items = sorted(self._entries.items())
        yield from items

    def entry_dir(self, key: str) -> Path:
        """Physical directory holding the cached variants for a key."""
        return self.cache_dir / key

    def missing_files(self, key: str, entry: CacheEntry) -> List[str]:
        """List the variant files of an entry that are not present on disk."""
        directory = self.entry_dir(key)
        return [name for name in entry.files if not (directory / name).is_file()]

    def is_valid(self, key: str, entry: CacheEntry, current_fingerprint: str) -> bool:
        """
        Check whether an entry can be restored.

        Args:
            key: Cache key of the entry
            entry: Entry returned by lookup()
            current_fingerprint: Fingerprint of the current source bytes

        Returns:
            True iff the fingerprint matches and every variant file exists
        """
        if entry.hash != current_fingerprint:
            return False
        if not entry.files:
            return False
        missing = self.missing_files(key, entry)
        if missing:
            self.logger.info(f"  Cache entry {key} is missing {len(missing)} file(s), regenerating")
            return False
        return True

    def restore(self, key: str, entry: CacheEntry, destination_dir: Union[str, Path]) -> int:
        """
        Copy every cached variant of an entry into the output directory.

        Args:
            key: Cache key of the entry
            entry: A valid entry
            destination_dir: Output directory for the collection

        Returns:
            Total bytes copied

        Raises:
            OSError: If a copy fails
        """
        source_dir = self.entry_dir(key)
        destination = Path(destination_dir)
        destination.mkdir(parents=True, exist_ok=True)

        total = 0
        for name in entry.files:
            target = destination / name
            shutil.copyfile(source_dir / name, target)
            total += target.stat().st_size
        return total

    def touch(self, key: str, entry: CacheEntry) -> None:
        """Record an entry in the index without copying any files."""
        with self._lock:
            self._entries[key] = entry

    def commit(self, key: str, entry: CacheEntry, source_dir: Union[str, Path]) -> bool:
        """
        Store an entry and mirror its freshly generated files into the cache.

        If a file cannot be mirrored the entry is dropped from the index, so an
        older file with the same name is never restored under the new hash.
        The failure is logged, not raised: the output directory already holds
        the generated files.

        Args:
            key: Cache key
            entry: Entry describing the generated variants
            source_dir: Directory holding the generated variant files

        Returns:
            True if the entry was committed
        """
        source = Path(source_dir)
        target_dir = self.entry_dir(key)

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            for name in entry.files:
                shutil.copyfile(source / name, target_dir / name)
        except OSError as e:
            self.logger.warning(f"  Could not cache variants for {key}: {e}")
            with self._lock:
                self._entries.pop(key, None)
            return False

        with self._lock:
            self._entries[key] = entry
        return True
