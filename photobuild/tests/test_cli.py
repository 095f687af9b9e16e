"""Tests for CLI module."""

import json

from photobuild.cli import cmd_build, create_parser, main


class TestCreateParser:
    """Tests for argument parser creation."""

    def test_parser_created(self):
        """Test parser is created successfully."""
        parser = create_parser()
        assert parser is not None

    def test_build_command(self):
        """Test build command parsing."""
        parser = create_parser()
        args = parser.parse_args([
            'build', '--source', 'photos', '--output', 'out',
            '-w', '320', '-w', '640', '--quality', '80', '-j', '4',
        ])

        assert args.command == 'build'
        assert args.source == 'photos'
        assert args.width == [320, 640]
        assert args.quality == 80
        assert args.workers == 4

    def test_build_defaults(self):
        """Test build defaults."""
        parser = create_parser()
        args = parser.parse_args(['build'])

        assert args.source == 'src/photos'
        assert args.output == '_site'
        assert args.cache == '.cache/photos'
        assert args.width is None

    def test_cache_command(self):
        """Test cache command parsing."""
        parser = create_parser()
        args = parser.parse_args(['cache', '--cache', 'c'])

        assert args.command == 'cache'
        assert args.cache == 'c'


class TestMain:
    """Tests for main entry point."""

    def test_no_command(self):
        """Test running without command shows help."""
        assert main([]) == 1

    def test_build_missing_source(self, tmp_path):
        """Test a missing source directory exits with status 1."""
        result = main(['build', '--source', str(tmp_path / 'missing'), '--output', str(tmp_path / 'out'),
                       '--cache', str(tmp_path / 'cache'), '-q'])

        assert result == 1
        assert not (tmp_path / 'out').exists()

    def test_build_success(self, source_root, tmp_path, capsys):
        """Test a successful build exits 0 and prints a summary."""
        result = main(['build', '--source', str(source_root), '--output', str(tmp_path / 'out'),
                       '--cache', str(tmp_path / 'cache'), '--site-title', 'CLI Site'])

        assert result == 0
        manifest = json.loads((tmp_path / 'out' / 'manifest.json').read_text(encoding='utf-8'))
        assert manifest['site']['title'] == 'CLI Site'
        assert 'BUILD SUMMARY' in capsys.readouterr().out

    def test_build_with_corrupt_image_succeeds(self, source_root, tmp_path):
        """Test per-image failures do not fail the build."""
        (source_root / '2024' / 'iceland' / 'zz.jpg').write_bytes(b'corrupt')

        result = main(['build', '--source', str(source_root), '--output', str(tmp_path / 'out'),
                       '--cache', str(tmp_path / 'cache'), '-q'])

        assert result == 0
        assert (tmp_path / 'out' / 'photos' / '2024' / 'iceland' / 'zz.jpg').exists()

    def test_build_invalid_quality(self, source_root, tmp_path):
        """Test configuration errors exit with status 1."""
        parser = create_parser()
        args = parser.parse_args(['build', '--source', str(source_root), '--output', str(tmp_path / 'out'),
                                  '--cache', str(tmp_path / 'cache'), '--quality', '0', '-q'])

        assert cmd_build(args) == 1

    def test_cache_report(self, source_root, tmp_path, capsys):
        """Test the cache command reports a built cache."""
        main(['build', '--source', str(source_root), '--output', str(tmp_path / 'out'),
              '--cache', str(tmp_path / 'cache'), '-q'])

        result = main(['cache', '--cache', str(tmp_path / 'cache')])

        assert result == 0
        out = capsys.readouterr().out
        assert 'CACHE SUMMARY' in out
        assert '2024/iceland' in out

    def test_cache_report_missing_dir(self, tmp_path):
        """Test the cache command fails for a missing directory."""
        assert main(['cache', '--cache', str(tmp_path / 'none')]) == 1
