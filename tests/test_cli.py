"""Tests for the command-line interface."""

import json

import pytest
from conftest import numbered_record, sample_record, write_record

from maginhawa import cli
from maginhawa.cli import EXIT_ERROR, EXIT_INVALID, EXIT_OK, main


@pytest.fixture(autouse=True)
def use_config(monkeypatch, config):
    monkeypatch.setattr(cli, "get_config", lambda: config)


class TestValidateCommand:
    """Tests for `maginhawa validate`."""

    def test_valid_directory(self, places_dir, capsys):
        for n in range(3):
            write_record(places_dir, numbered_record(n))

        assert main(["validate", str(places_dir)]) == EXIT_OK

        out = capsys.readouterr().out
        assert "✓ All validations passed!" in out
        assert "Total: 3" in out

    def test_invalid_directory(self, places_dir, capsys):
        write_record(places_dir, numbered_record(0))
        write_record(places_dir, numbered_record(1, priceRange="free"))

        assert main(["validate", str(places_dir)]) == EXIT_INVALID

        out = capsys.readouterr().out
        assert "✗ place-001.json" in out
        assert "priceRange: Price range must be $, $$, $$$, or $$$$" in out

    def test_single_file(self, places_dir):
        path = write_record(places_dir, sample_record())
        assert main(["validate", str(path)]) == EXIT_OK

    def test_json_summary(self, places_dir, capsys):
        write_record(places_dir, numbered_record(0))
        write_record(places_dir, numbered_record(1, description="short"))

        assert main(["validate", "--json", str(places_dir)]) == EXIT_INVALID

        summary = json.loads(capsys.readouterr().out)
        assert summary["total"] == 2
        assert summary["valid"] == 1
        assert summary["invalid"] == 1

    def test_missing_path(self, tmp_path, capsys):
        assert main(["validate", str(tmp_path / "missing")]) == EXIT_ERROR
        assert "Path does not exist" in capsys.readouterr().err


class TestBuildCommands:
    """Tests for the artifact build commands."""

    def test_build_index(self, places_dir, config, capsys):
        write_record(places_dir, numbered_record(0))

        assert main(["build-index"]) == EXIT_OK

        entries = json.loads(config.index_path.read_text(encoding="utf-8"))
        assert [entry["slug"] for entry in entries] == ["place-000"]
        assert "Index built: 1 places" in capsys.readouterr().out

    def test_build_stats_with_overrides(self, tmp_path, capsys):
        other = tmp_path / "other"
        other.mkdir()
        write_record(other, numbered_record(0, cuisineTypes=["korean", "filipino"]))
        output = tmp_path / "custom-stats.json"

        assert main(["build-stats", "--places-dir", str(other), "--output", str(output)]) == EXIT_OK

        stats = json.loads(output.read_text(encoding="utf-8"))
        assert stats["cuisineTypes"] == ["filipino", "korean"]
        assert "Unique cuisines: 2" in capsys.readouterr().out

    def test_build_both(self, places_dir, config):
        write_record(places_dir, numbered_record(0))

        assert main(["build"]) == EXIT_OK

        assert config.index_path.exists()
        assert config.stats_path.exists()

    def test_build_reads_records_once(self, places_dir, monkeypatch):
        write_record(places_dir, numbered_record(0))
        calls = []
        original = cli.load_collection

        def counting_load(directory):
            calls.append(directory)
            return original(directory)

        monkeypatch.setattr(cli, "load_collection", counting_load)

        assert main(["build"]) == EXIT_OK
        assert calls == [places_dir]

    def test_build_with_output_overrides(self, places_dir, tmp_path, config):
        write_record(places_dir, numbered_record(0))
        index_path = tmp_path / "site" / "places.json"
        stats_path = tmp_path / "site" / "stats.json"

        code = main(
            ["build", "--index-output", str(index_path), "--stats-output", str(stats_path)]
        )

        assert code == EXIT_OK
        assert json.loads(index_path.read_text(encoding="utf-8"))[0]["slug"] == "place-000"
        assert json.loads(stats_path.read_text(encoding="utf-8"))["totalPlaces"] == 1
        assert not config.index_path.exists()
        assert not config.stats_path.exists()

    def test_build_fails_on_empty_directory(self, config, capsys):
        assert main(["build-index"]) == EXIT_ERROR

        assert "No place files found" in capsys.readouterr().err
        assert not config.index_path.exists()

    def test_build_lists_failing_records(self, places_dir, config, capsys):
        write_record(places_dir, numbered_record(0))
        write_record(places_dir, numbered_record(1, slug="Bad Slug"), name="place-001.json")

        assert main(["build"]) == EXIT_ERROR

        err = capsys.readouterr().err
        assert "✗ place-001.json" in err
        assert "slug: Slug must be kebab-case" in err
        assert not config.index_path.exists()
        assert not config.stats_path.exists()


def test_command_required():
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 2
