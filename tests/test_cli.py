# tests/test_cli.py
"""Test the plm command-line interface"""

import pytest
from click.testing import CliRunner

from playlist_mangler import __version__
from playlist_mangler.cli import cli


@pytest.fixture
def runner(temp_dir, monkeypatch):
    """CliRunner working inside temp_dir, so no stray config file is picked up"""
    monkeypatch.chdir(temp_dir)
    return CliRunner()


class TestInfo:
    """Test plm info"""

    def test_version(self, runner):
        """Test --version"""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_info(self, runner, write_playlist, extm3u_text):
        """Test listing an extended M3U playlist"""
        path = write_playlist("road_trip.m3u8", extm3u_text)
        result = runner.invoke(cli, ["info", str(path)])

        assert result.exit_code == 0, result.output
        assert "Road Trip" in result.output
        assert "extm3u" in result.output
        assert "Entries:  3" in result.output
        assert "Artist - Song [3:35]" in result.output
        assert "plain.flac  ->  music/plain.flac" in result.output

    def test_info_forced_format(self, runner, write_playlist, extm3u_text):
        """Test --format skips detection"""
        path = write_playlist("road_trip.m3u8", extm3u_text)
        result = runner.invoke(cli, ["info", "--format", "plain", str(path)])

        assert result.exit_code == 0, result.output
        assert "Entries:  7" in result.output

    def test_info_missing_file(self, runner, temp_dir):
        """Test an unreadable playlist"""
        result = runner.invoke(cli, ["info", str(temp_dir / "missing.m3u")])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_info_malformed(self, runner, write_playlist):
        """Test a grammar violation is reported with its line"""
        path = write_playlist("bad.m3u8", "#EXTM3U\n#EXTINF:abc,X\nx.mp3\n")
        result = runner.invoke(cli, ["info", str(path)])
        assert result.exit_code == 1
        assert "line 2" in result.output


class TestDedup:
    """Test plm dedup"""

    def test_dedup_in_place(self, runner, write_playlist):
        """Test removing duplicates and saving over the input"""
        path = write_playlist("list.txt", "a.mp3\nb.mp3\na.mp3\n")
        result = runner.invoke(cli, ["dedup", str(path)])

        assert result.exit_code == 0, result.output
        assert "1 removed" in result.output
        assert path.read_text(encoding="utf-8") == "a.mp3\nb.mp3\n"

    def test_dedup_to_output(self, runner, write_playlist, temp_dir):
        """Test -o leaves the input alone"""
        path = write_playlist("list.txt", "a.mp3\na.mp3\n")
        out = temp_dir / "clean.txt"
        result = runner.invoke(cli, ["dedup", str(path), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8") == "a.mp3\n"
        assert path.read_text(encoding="utf-8") == "a.mp3\na.mp3\n"


class TestMerge:
    """Test plm merge"""

    def test_merge_mixed_dialects(self, runner, write_playlist, extm3u_text, temp_dir):
        """Test that inputs are converted to the first playlist's dialect"""
        first = write_playlist("road_trip.m3u8", extm3u_text)
        second = write_playlist("extra.txt", "extra/one.mp3\nextra/two.mp3\n")
        out = temp_dir / "all.m3u8"

        result = runner.invoke(cli, ["merge", str(first), str(second), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert "5 entries" in result.output
        text = out.read_text(encoding="utf-8")
        assert text.startswith("#EXTM3U\n#PLAYLIST:Road Trip\n")
        assert text.endswith("music/plain.flac\nextra/one.mp3\nextra/two.mp3\n")

    def test_merge_with_dedup(self, runner, write_playlist, extm3u_text, temp_dir):
        """Test --dedup after merging a playlist with itself"""
        path = write_playlist("road_trip.m3u8", extm3u_text)
        out = temp_dir / "twice.m3u8"

        result = runner.invoke(cli, ["merge", str(path), str(path), "-o", str(out), "--dedup"])

        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8") == extm3u_text

    def test_merge_target_dialect(self, runner, write_playlist, extm3u_text, temp_dir):
        """Test --to"""
        path = write_playlist("road_trip.m3u8", extm3u_text)
        out = temp_dir / "all.txt"

        result = runner.invoke(cli, ["merge", str(path), "-o", str(out), "--to", "plain"])

        assert result.exit_code == 0, result.output
        assert out.read_text(encoding="utf-8") == (
            "music/song.mp3\nhttp://radio.example/stream\nmusic/plain.flac\n"
        )

    def test_merge_invalid_input(self, runner, write_playlist, extm3u_text, temp_dir):
        """Test stopping on, or skipping, a malformed input"""
        good = write_playlist("good.m3u8", extm3u_text)
        bad = write_playlist("bad.m3u8", "#EXTM3U\n#EXTINF:1,Dangling\n")
        out = temp_dir / "out.m3u8"

        result = runner.invoke(cli, ["merge", str(good), str(bad), "-o", str(out)])
        assert result.exit_code == 1
        assert not out.exists()

        result = runner.invoke(
            cli, ["merge", str(good), str(bad), "-o", str(out), "--skip-invalid"]
        )
        assert result.exit_code == 0, result.output
        assert "3 entries" in result.output

    def test_merge_nothing_readable(self, runner, temp_dir):
        """Test that skipping every input is an error"""
        result = runner.invoke(
            cli, ["merge", str(temp_dir / "nope.m3u"), "-o", str(temp_dir / "o.m3u"),
                  "--skip-invalid"]
        )
        assert result.exit_code == 1
        assert "No playlist could be read" in result.output


class TestConvert:
    """Test plm convert"""

    def test_plain_to_extm3u(self, runner, write_playlist, temp_dir):
        """Test converting a listing"""
        path = write_playlist("files.txt", "a.mp3\nb.mp3\n")
        out = temp_dir / "files.m3u8"

        result = runner.invoke(cli, ["convert", str(path), "--to", "extm3u", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert "plain -> extm3u" in result.output
        assert out.read_text(encoding="utf-8") == "#EXTM3U\na.mp3\nb.mp3\n"

    def test_unknown_target(self, runner, write_playlist, temp_dir):
        """Test that click rejects an unknown dialect"""
        path = write_playlist("files.txt", "a.mp3\n")
        result = runner.invoke(
            cli, ["convert", str(path), "--to", "pls", "-o", str(temp_dir / "x")]
        )
        assert result.exit_code == 2


class TestConfigOption:
    """Test --config"""

    def test_missing_config(self, runner, write_playlist, temp_dir):
        """Test an explicit config file that does not exist"""
        path = write_playlist("files.txt", "a.mp3\n")
        result = runner.invoke(
            cli, ["--config", str(temp_dir / "none.yaml"), "info", str(path)]
        )
        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_log_directory(self, runner, write_playlist, temp_dir):
        """Test that logging.directory enables the failures report"""
        config = temp_dir / "plm.yaml"
        config.write_text(f"logging:\n  directory: {temp_dir / 'logs'}\n", encoding="utf-8")
        bad = write_playlist("bad.m3u8", "#EXTM3U\n#EXTINF:x,Y\ny.mp3\n")

        result = runner.invoke(cli, ["--config", str(config), "info", str(bad)])

        assert result.exit_code == 1
        report = next((temp_dir / "logs").glob("format_failures_*.log")).read_text(encoding="utf-8")
        assert report.startswith(f"{bad}\nline 2: #EXTINF:x,Y\n")
        assert report.count("line 2") == 1
        assert "EXTINF needs an integer duration followed by a comma\n" in report
