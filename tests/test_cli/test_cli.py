"""Tests for the csspurge command line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from csspurge import __version__
from csspurge.cli.main import cli


def _dist(tmp_path: Path, js: str = "document.querySelector('main').className = 'hero';") -> Path:
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "app.js").write_text(js)
    (dist / "style.css").write_text(".hero{a:b}.ghost{a:b}")
    (dist / "logo.png").write_bytes(b"\x89PNG")
    return dist


class TestCliBasics:
    def test_help(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "purge" in result.output
        assert "selectors" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ---------------------------------------------------------------------------
# purge
# ---------------------------------------------------------------------------


class TestPurgeCommand:
    def test_purges_in_place(self, tmp_path: Path) -> None:
        dist = _dist(tmp_path)
        result = CliRunner().invoke(cli, ["purge", str(dist)])
        assert result.exit_code == 0, result.output
        assert "style.css: 21 -> 10 bytes, 1 selector(s) rejected" in result.output
        assert (dist / "style.css").read_text() == ".hero{a:b}"
        assert (dist / "logo.png").read_bytes() == b"\x89PNG"

    def test_rejected_listing(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["purge", str(_dist(tmp_path)), "--rejected"])
        assert "  - .ghost" in result.output

    def test_dry_run(self, tmp_path: Path) -> None:
        dist = _dist(tmp_path)
        result = CliRunner().invoke(cli, ["purge", str(dist), "--dry-run"])
        assert result.exit_code == 0
        assert "Dry run: no files written" in result.output
        assert (dist / "style.css").read_text() == ".hero{a:b}.ghost{a:b}"

    def test_safelist_flag(self, tmp_path: Path) -> None:
        dist = _dist(tmp_path)
        CliRunner().invoke(cli, ["purge", str(dist), "--safelist", "/^gh/"])
        assert (dist / "style.css").read_text() == ".hero{a:b}.ghost{a:b}"

    def test_content_flag(self, tmp_path: Path) -> None:
        dist = _dist(tmp_path)
        (tmp_path / "extra.txt").write_text("ghost")
        CliRunner().invoke(cli, ["purge", str(dist), "--content", str(tmp_path / "*.txt")])
        assert (dist / "style.css").read_text() == ".hero{a:b}.ghost{a:b}"

    def test_config_file(self, tmp_path: Path) -> None:
        dist = _dist(tmp_path)
        config = tmp_path / "purge.json"
        config.write_text(json.dumps({"safelist": {"standard": ["ghost"]}}))
        result = CliRunner().invoke(
            cli, ["purge", str(dist), "--config", str(config), "--safelist", "other"]
        )
        assert result.exit_code == 0, result.output
        assert (dist / "style.css").read_text() == ".hero{a:b}.ghost{a:b}"

    def test_invalid_config(self, tmp_path: Path) -> None:
        config = tmp_path / "purge.json"
        config.write_text(json.dumps({"whitelist": ["x"]}))
        result = CliRunner().invoke(cli, ["purge", str(_dist(tmp_path)), "--config", str(config)])
        assert result.exit_code == 1
        assert "Config error" in result.output

    def test_malformed_json(self, tmp_path: Path) -> None:
        config = tmp_path / "purge.json"
        config.write_text("{nope")
        result = CliRunner().invoke(cli, ["purge", str(_dist(tmp_path)), "--config", str(config)])
        assert result.exit_code == 1
        assert "invalid JSON" in result.output

    def test_parse_error(self, tmp_path: Path) -> None:
        dist = _dist(tmp_path, js="const = ;")
        result = CliRunner().invoke(cli, ["purge", str(dist)])
        assert result.exit_code == 1
        assert "Parse error" in result.output
        assert "app.js" in result.output
        assert (dist / "style.css").read_text() == ".hero{a:b}.ghost{a:b}"

    def test_reports_stylesheet_that_is_not_utf8(self, tmp_path: Path) -> None:
        dist = _dist(tmp_path)
        (dist / "legacy.css").write_bytes(b"\xff.ghost{a:b}")
        result = CliRunner().invoke(cli, ["purge", str(dist)])
        assert result.exit_code == 0, result.output
        assert "legacy.css: unchanged (not UTF-8)" in result.output
        assert (dist / "legacy.css").read_bytes() == b"\xff.ghost{a:b}"

    def test_no_stylesheets(self, tmp_path: Path) -> None:
        dist = tmp_path / "dist"
        dist.mkdir()
        (dist / "app.js").write_text("x()")
        result = CliRunner().invoke(cli, ["purge", str(dist)])
        assert result.exit_code == 0
        assert "No stylesheets found" in result.output

    def test_missing_directory(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["purge", str(tmp_path / "nope")])
        assert result.exit_code != 0


# ---------------------------------------------------------------------------
# selectors
# ---------------------------------------------------------------------------


class TestSelectorsCommand:
    def test_lists_selectors(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["selectors", str(_dist(tmp_path))])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert "hero" in lines
        assert "main" in lines
        assert lines == sorted(lines)

    def test_parse_error(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(cli, ["selectors", str(_dist(tmp_path, js="if ("))])
        assert result.exit_code == 1
        assert "Parse error" in result.output
