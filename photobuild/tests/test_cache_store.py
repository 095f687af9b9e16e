"""Tests for CacheStore class."""

import json

import pytest

from photobuild.cache_entry import CacheEntry
from photobuild.cache_store import CacheStore

KEY = '2024/iceland/a.jpg'


def make_entry(hash='h1', files=('a-400w.webp', 'a-800w.webp')):
    return CacheEntry(
        hash=hash,
        files=list(files),
        srcset_parts=[f"photos/2024/iceland/{name} 400w" for name in files],
        full_name=files[-1],
        full_width=800,
        full_height=400,
    )


@pytest.fixture
def generated_dir(tmp_path):
    """Fixture providing a directory with freshly generated variant files."""
    directory = tmp_path / 'out' / '2024' / 'iceland'
    directory.mkdir(parents=True)
    (directory / 'a-400w.webp').write_bytes(b'small')
    (directory / 'a-800w.webp').write_bytes(b'large')
    return directory


class TestCacheStoreLoad:
    """Tests for loading the index."""

    def test_missing_index_starts_empty(self, tmp_path, logger):
        """Test a missing index is not an error."""
        store = CacheStore(tmp_path / 'nowhere', logger=logger)

        assert store.load() == 0
        assert len(store) == 0

    def test_corrupt_index_starts_empty(self, tmp_path, logger):
        """Test a corrupt index is ignored."""
        cache_dir = tmp_path / 'cache'
        cache_dir.mkdir()
        (cache_dir / 'index.json').write_text('{not json', encoding='utf-8')
        store = CacheStore(cache_dir, logger=logger)

        assert store.load() == 0

    def test_non_object_index_starts_empty(self, tmp_path, logger):
        """Test an index that is not a JSON object is ignored."""
        cache_dir = tmp_path / 'cache'
        cache_dir.mkdir()
        (cache_dir / 'index.json').write_text('[1, 2]', encoding='utf-8')
        store = CacheStore(cache_dir, logger=logger)

        assert store.load() == 0

    def test_malformed_entry_skipped(self, tmp_path, logger):
        """Test one bad entry does not discard the others."""
        cache_dir = tmp_path / 'cache'
        cache_dir.mkdir()
        data = {KEY: make_entry().to_dict(), '2024/iceland/bad.jpg': {'hash': 'x'}}
        (cache_dir / 'index.json').write_text(json.dumps(data), encoding='utf-8')
        store = CacheStore(cache_dir, logger=logger)

        assert store.load() == 1
        assert KEY in store
        assert '2024/iceland/bad.jpg' not in store


class TestCacheStoreCommit:
    """Tests for committing, validating and restoring entries."""

    def test_commit_mirrors_files(self, cache_store, generated_dir):
        """Test commit copies variants into the cache area."""
        assert cache_store.commit(KEY, make_entry(), generated_dir) is True

        cached = cache_store.cache_dir / '2024' / 'iceland' / 'a.jpg'
        assert (cached / 'a-400w.webp').read_bytes() == b'small'
        assert (cached / 'a-800w.webp').read_bytes() == b'large'
        assert cache_store.lookup(KEY) == make_entry()

    def test_commit_copy_failure_drops_entry(self, cache_store, generated_dir):
        """Test an entry whose files cannot be cached is not kept."""
        cache_store.touch(KEY, make_entry(hash='old'))
        (generated_dir / 'a-800w.webp').unlink()

        assert cache_store.commit(KEY, make_entry(), generated_dir) is False
        assert cache_store.lookup(KEY) is None

    def test_is_valid(self, cache_store, generated_dir):
        """Test a committed entry is valid for its fingerprint only."""
        entry = make_entry()
        cache_store.commit(KEY, entry, generated_dir)

        assert cache_store.is_valid(KEY, entry, 'h1') is True
        assert cache_store.is_valid(KEY, entry, 'other') is False

    def test_is_valid_rechecks_files(self, cache_store, generated_dir):
        """Test a missing cached file invalidates the entry."""
        entry = make_entry()
        cache_store.commit(KEY, entry, generated_dir)
        (cache_store.cache_dir / '2024' / 'iceland' / 'a.jpg' / 'a-400w.webp').unlink()

        assert cache_store.is_valid(KEY, entry, 'h1') is False
        assert cache_store.missing_files(KEY, entry) == ['a-400w.webp']

    def test_restore_copies_bytes(self, cache_store, generated_dir, tmp_path):
        """Test restore copies every variant byte-for-byte."""
        entry = make_entry()
        cache_store.commit(KEY, entry, generated_dir)
        destination = tmp_path / 'fresh'

        restored = cache_store.restore(KEY, entry, destination)

        assert restored == len(b'small') + len(b'large')
        assert (destination / 'a-400w.webp').read_bytes() == b'small'
        assert (destination / 'a-800w.webp').read_bytes() == b'large'

    def test_entries_of_one_collection_do_not_share_files(self, cache_store, generated_dir, tmp_path):
        """Test two keys with the same variant names keep their own cached bytes."""
        cache_store.commit(KEY, make_entry(), generated_dir)
        other_dir = tmp_path / 'other'
        other_dir.mkdir()
        (other_dir / 'a-400w.webp').write_bytes(b'other small')
        (other_dir / 'a-800w.webp').write_bytes(b'other large')
        cache_store.commit('2024/iceland/a.gif', make_entry(hash='h2'), other_dir)

        destination = tmp_path / 'fresh'
        cache_store.restore(KEY, make_entry(), destination)

        assert (destination / 'a-400w.webp').read_bytes() == b'small'
        assert cache_store.entry_dir(KEY) != cache_store.entry_dir('2024/iceland/a.gif')


class TestCacheStoreSave:
    """Tests for persisting the index."""

    def test_save_and_load(self, cache_store, generated_dir, logger):
        """Test the index survives a save/load cycle."""
        cache_store.commit(KEY, make_entry(), generated_dir)

        assert cache_store.save() is True

        reloaded = CacheStore(cache_store.cache_dir, logger=logger)
        assert reloaded.load() == 1
        assert reloaded.lookup(KEY) == make_entry()

    def test_saved_index_schema(self, cache_store, generated_dir):
        """Test the index file is keyed by year/slug/filename."""
        cache_store.commit(KEY, make_entry(), generated_dir)
        cache_store.save()

        data = json.loads(cache_store.index_path.read_text(encoding='utf-8'))
        assert set(data) == {KEY}
        assert set(data[KEY]) == {'hash', 'files', 'srcsetParts', 'fullName', 'fullWidth', 'fullHeight'}

    def test_save_failure_is_not_fatal(self, tmp_path, logger):
        """Test a cache directory that cannot be created is reported, not raised."""
        blocker = tmp_path / 'blocker'
        blocker.write_text('a file, not a directory', encoding='utf-8')
        store = CacheStore(blocker / 'cache', logger=logger)
        store.touch(KEY, make_entry())

        assert store.save() is False

    def test_entries_sorted(self, cache_store):
        """Test entries are yielded sorted by key."""
        cache_store.touch('2024/b/z.jpg', make_entry())
        cache_store.touch('2023/a/y.jpg', make_entry())

        assert [key for key, _ in cache_store.entries()] == ['2023/a/y.jpg', '2024/b/z.jpg']
