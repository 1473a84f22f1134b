"""Tests for the command-line front end."""

import json
from pathlib import Path

import pytest

from bee_sync import cli


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ["BEE_API_KEY", "BEE_SYNC_FOLDER", "BEE_SYNC_BASE_URL"]:
        monkeypatch.delenv(key, raising=False)


def test_config_saves_and_masks(tmp_path: Path, capsys):
    settings = tmp_path / "settings.json"
    rc = cli.main(["--settings", str(settings), "--api-key", "abcd1234efgh", "--folder", "Vault/Bee", "config", "--show"])
    assert rc == 0
    assert json.loads(settings.read_text())["folderPath"] == "Vault/Bee"
    out = capsys.readouterr().out
    assert "abcd****efgh" in out
    assert "abcd1234efgh" not in out

def test_config_rejects_bad_start_date(tmp_path: Path, capsys):
    settings = tmp_path / "settings.json"
    assert cli.main(["--settings", str(settings), "config", "--start-date", "tomorrow"]) == 1
    assert not settings.exists()
    assert "Invalid date" in capsys.readouterr().err

def test_daily_without_key_fails_quietly(tmp_path: Path, capsys):
    folder = tmp_path / "vault"
    rc = cli.main(["--settings", str(tmp_path / "settings.json"), "--folder", str(folder), "daily"])
    assert rc == 1
    assert "Please set your Bee API key" in capsys.readouterr().err
    assert not folder.exists()

def test_quiet_suppresses_notifications(tmp_path: Path, capsys):
    rc = cli.main(["--quiet", "--settings", str(tmp_path / "settings.json"), "--folder", str(tmp_path / "v"), "conversations"])
    assert rc == 1
    assert capsys.readouterr().err == ""

def test_command_required():
    with pytest.raises(SystemExit):
        cli.main([])
