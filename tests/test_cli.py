"""Tests for catalogen.cli module."""

import json
from pathlib import Path

import pytest

from catalogen.cli import build_parser, main


@pytest.fixture
def site(tmp_path):
    """Temp site with a small catalog."""
    site = tmp_path / "site"
    data_dir = site / "data" / "catalog"
    data_dir.mkdir(parents=True)
    (data_dir / "servers.json").write_text(json.dumps([
        {"id": "a", "slug": "alpha", "name": "Alpha", "category": "Search"},
        {"id": "b", "slug": "beta", "name": "Beta", "category": "Database"},
        {"id": "c", "name": "Gamma"},
    ]))
    return site


class TestBuildParser:
    def test_creates_parser(self):
        assert build_parser() is not None

    def test_version_flag(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])
        assert exc_info.value.code == 0

    def test_no_command_parses(self):
        args = build_parser().parse_args([])
        assert args.command is None

    def test_build_command(self):
        args = build_parser().parse_args(
            ["build", "--seed", "3", "-p", "8", "--dry-run", "-o", "out", "-d", "data"]
        )
        assert args.command == "build"
        assert args.seed == 3
        assert args.parallel == 8
        assert args.dry_run is True
        assert args.output_dir == "out"
        assert args.data_dir == "data"

    def test_list_json(self):
        args = build_parser().parse_args(["list", "-j"])
        assert args.command == "list"
        assert args.json_output is True


class TestMain:
    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "catalogen" in capsys.readouterr().out

    def test_build(self, site, capsys):
        assert main(["--base-path", str(site), "build", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "Records: 3" in out
        assert (site / ".catalogen" / "data" / "routes.json").exists()

    def test_build_dry_run(self, site, capsys):
        assert main(["--base-path", str(site), "build", "--dry-run"]) == 0
        assert "Dry run" in capsys.readouterr().out
        assert not (site / ".catalogen").exists()

    def test_build_output_override(self, site, tmp_path):
        out = tmp_path / "out"
        assert main(["--base-path", str(site), "build", "-o", str(out)]) == 0
        assert (out / "routes.json").exists()

    def test_list(self, site, capsys):
        assert main(["--base-path", str(site), "list"]) == 0
        out = capsys.readouterr().out
        assert "alpha" in out
        assert "(no slug)" in out
        assert "Total: 3" in out

    def test_list_json(self, site, capsys):
        assert main(["--base-path", str(site), "list", "-j"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [r["id"] for r in data] == ["a", "b", "c"]

    def test_categories_json(self, site, capsys):
        assert main(["--base-path", str(site), "categories", "-j"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == [
            {"name": "Search", "count": 1, "permalink": "/catalog/categories/search/"},
            {"name": "Database", "count": 1, "permalink": "/catalog/categories/database/"},
        ]

    def test_routes(self, site, capsys):
        assert main(["--base-path", str(site), "routes"]) == 0
        out = capsys.readouterr().out
        assert "/catalog/alpha" in out
        assert "/catalog/categories/" in out
        assert not (site / ".catalogen").exists()

    def test_routes_json(self, site, capsys):
        assert main(["--base-path", str(site), "routes", "-j"]) == 0
        data = json.loads(capsys.readouterr().out)
        paths = [r["path"] for r in data]
        assert "/catalog/beta" in paths
        assert len(paths) == len(set(paths))

    def test_status(self, site, capsys):
        assert main(["--base-path", str(site), "status"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["data_dir_exists"] is True

    def test_clean(self, site, capsys):
        main(["--base-path", str(site), "build"])
        assert (site / ".catalogen" / "data").exists()
        assert main(["--base-path", str(site), "clean"]) == 0
        assert not (site / ".catalogen" / "data").exists()

    def test_clean_nothing(self, site, capsys):
        assert main(["--base-path", str(site), "clean"]) == 0
        assert "Nothing to clean" in capsys.readouterr().out

    def test_missing_data_dir_reports_error(self, tmp_path, capsys):
        assert main(["--base-path", str(tmp_path / "nowhere"), "build"]) == 1
        assert "Error" in capsys.readouterr().out
