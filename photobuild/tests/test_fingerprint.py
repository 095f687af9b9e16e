"""Tests for content fingerprints."""

from photobuild.fingerprint import fingerprint, fingerprint_file


class TestFingerprint:
    """Tests for fingerprint functions."""

    def test_known_digest(self):
        """Test the digest is SHA-256 hex."""
        assert fingerprint(b'') == 'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'

    def test_identical_bytes_identical_fingerprint(self):
        """Test identical content gives identical fingerprints."""
        assert fingerprint(b'photo') == fingerprint(b'photo')

    def test_changed_bytes_change_fingerprint(self):
        """Test a one-byte change gives a different fingerprint."""
        assert fingerprint(b'photo') != fingerprint(b'photO')

    def test_file_fingerprint_ignores_name(self, tmp_path):
        """Test files with the same bytes but different names match."""
        first = tmp_path / 'a.jpg'
        second = tmp_path / 'sub' / 'b.jpg'
        second.parent.mkdir()
        first.write_bytes(b'same bytes')
        second.write_bytes(b'same bytes')

        assert fingerprint_file(first) == fingerprint_file(second)
        assert fingerprint_file(first) == fingerprint(b'same bytes')
