"""CLI behavior tests."""

import json

import pytest

import plantlog.cli as cli
from plantlog.database.document_store import StoreError
from plantlog.plants.coordinator import FETCH_ERROR_MESSAGE, HEADER_ALL, HEADER_FILTERED
from plantlog.query.filters import FILTER_REQUIRED_MESSAGE


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "plantlog.config.yaml"
    path.write_text(
        f"storage:\n  sqlite_path: {tmp_path / 'plants.db'}\nlogging:\n  level: WARNING\n"
    )
    return str(path)


def _run(config_path, *argv):
    cli.main(["--config", config_path, *argv])


def test_add_then_list(config_path, capsys):
    _run(config_path, "add", "--name", "Fern", "--type", "Shade", "--location", "Patio")
    _run(config_path, "add", "--name", "Cactus", "--type", "Sun", "--location", "Window")
    capsys.readouterr()

    _run(config_path, "list")
    out = capsys.readouterr().out

    assert out.startswith(HEADER_ALL)
    assert "🌱 Fern 🌱" in out
    assert "🌱 Cactus 🌱" in out
    assert "Time Added: " in out


def test_filter_json(config_path, capsys):
    _run(config_path, "add", "--name", "Fern", "--type", "Shade", "--location", "Patio")
    _run(config_path, "add", "--name", "Cactus", "--type", "Sun", "--location", "Window")
    capsys.readouterr()

    _run(config_path, "filter", "--type", "Sun", "--format", "json")
    payload = json.loads(capsys.readouterr().out)

    assert payload["header"] == HEADER_FILTERED
    assert [p["name"] for p in payload["plants"]] == ["Cactus"]


def test_filter_without_criteria_exits_with_validation_message(config_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        _run(config_path, "filter", "--name", "  ")

    assert exc_info.value.code == 2
    assert FILTER_REQUIRED_MESSAGE in capsys.readouterr().out


def test_filter_with_no_match_prints_empty_message(config_path, capsys):
    _run(config_path, "filter", "--name", "Orchid")

    assert "No plants found matching the criteria." in capsys.readouterr().out


def test_list_store_failure_exits_nonzero(config_path, capsys, monkeypatch):
    class BrokenStore:
        async def get_documents(self, collection, predicates=()):
            raise StoreError("database is locked")

    monkeypatch.setattr(cli, "_open_store", lambda _storage: BrokenStore())

    with pytest.raises(SystemExit) as exc_info:
        _run(config_path, "list")

    assert exc_info.value.code == 1
    assert FETCH_ERROR_MESSAGE in capsys.readouterr().out


def test_add_requires_non_blank_name(config_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        _run(config_path, "add", "--name", " ")

    assert exc_info.value.code == 2
    assert "name is required" in capsys.readouterr().out


def test_missing_explicit_config_is_an_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        cli.main(["--config", str(tmp_path / "missing.yaml"), "list"])


def test_no_command_prints_help(capsys):
    cli.main([])

    assert "usage: plantlog" in capsys.readouterr().out
