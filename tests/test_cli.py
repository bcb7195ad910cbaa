"""Tests for the click command line."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from claudeviewer import cli as cli_module
from tests.factories import make_conversation, make_message, to_bytes


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_module, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(cli_module, "STORE_PATH", tmp_path / "data" / "store.db")
    return CliRunner()


@pytest.fixture
def export_file(tmp_path):
    path = tmp_path / "conversations.json"
    path.write_bytes(
        to_bytes(
            [
                make_conversation(
                    uuid="c1",
                    name="Python questions",
                    messages=[
                        make_message(uuid="m2", text="Sure!", sender="assistant"),
                        make_message(uuid="m1", text="Can you help?", sender="human"),
                    ],
                ),
                make_conversation(uuid="c2", name="Empty", messages=[make_message(text=" ")]),
            ]
        )
    )
    return path


def test_import_then_list_and_show(runner, export_file):
    result = runner.invoke(cli_module.cli, ["import", str(export_file)])
    assert result.exit_code == 0, result.output
    assert "Imported: 1 conversations (2 messages)" in result.output
    assert "Skipped:  1" in result.output

    result = runner.invoke(cli_module.cli, ["list"])
    assert "Python questions" in result.output
    assert "Empty" not in result.output

    result = runner.invoke(cli_module.cli, ["show", "c1"])
    assert result.exit_code == 0
    assert result.output.index("Can you help?") < result.output.index("Sure!")


def test_list_search(runner, export_file):
    runner.invoke(cli_module.cli, ["import", str(export_file)])

    result = runner.invoke(cli_module.cli, ["list", "--search", "PYTHON"])
    assert "Python questions" in result.output

    result = runner.invoke(cli_module.cli, ["list", "--search", "help"])
    assert "No conversations found." in result.output

    result = runner.invoke(cli_module.cli, ["list", "--search", "help", "--full-text"])
    assert "Python questions" in result.output


def test_import_invalid_json(runner, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    result = runner.invoke(cli_module.cli, ["import", str(path)])
    assert result.exit_code == 1
    assert "valid JSON file" in result.output


def test_import_nothing_retained_keeps_previous(runner, export_file, tmp_path):
    runner.invoke(cli_module.cli, ["import", str(export_file)])

    empty = tmp_path / "empty.json"
    empty.write_text("[]")
    result = runner.invoke(cli_module.cli, ["import", str(empty)])
    assert result.exit_code == 1
    assert "No valid conversations found" in result.output

    result = runner.invoke(cli_module.cli, ["list"])
    assert "Python questions" in result.output


def test_show_not_found(runner):
    result = runner.invoke(cli_module.cli, ["show", "missing"])
    assert result.exit_code == 0
    assert "Conversation not found: missing" in result.output


def test_list_before_import(runner):
    result = runner.invoke(cli_module.cli, ["list"])
    assert "No conversations imported yet" in result.output


def test_stats(runner, export_file):
    runner.invoke(cli_module.cli, ["import", str(export_file)])
    result = runner.invoke(cli_module.cli, ["stats"])
    assert "Conversations:  1" in result.output
    assert "Messages:       2" in result.output


def test_reset(runner, export_file, tmp_path):
    runner.invoke(cli_module.cli, ["import", str(export_file)])
    result = runner.invoke(cli_module.cli, ["reset", "--yes"])
    assert result.exit_code == 0
    assert not (tmp_path / "data").exists()


@pytest.fixture
def corrupt_store(tmp_path):
    path = tmp_path / "data" / "store.db"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"this is not a sqlite database at all" * 100)
    return path


def test_views_treat_corrupt_store_as_empty(runner, corrupt_store):
    result = runner.invoke(cli_module.cli, ["show", "x"])
    assert result.exit_code == 0, result.output
    assert "Conversation not found: x" in result.output

    result = runner.invoke(cli_module.cli, ["list"])
    assert result.exit_code == 0, result.output
    assert "No conversations imported yet" in result.output


def test_import_into_corrupt_store_reports_error(runner, corrupt_store, export_file):
    result = runner.invoke(cli_module.cli, ["import", str(export_file)])
    assert result.exit_code == 1
    assert "Could not save conversations" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_import_unreadable_file(runner, export_file, monkeypatch):
    from claudeviewer import importer

    def deny(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(importer, "read_upload", deny)
    result = runner.invoke(cli_module.cli, ["import", str(export_file)])
    assert result.exit_code == 1
    assert f"Could not read file: {export_file}" in result.output
