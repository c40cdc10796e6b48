import pytest

from backend import otp_cli
from database import db_manager

RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture
def db(tmp_path):
    return str(tmp_path / "cli.db")


def run(db, *argv):
    return otp_cli.main(["--db", db, *argv])


def test_code_at_fixed_time(db, capsys):
    assert run(db, "code", RFC_SECRET, "--time", "59") == 0
    assert capsys.readouterr().out.strip() == "287082"


def test_code_with_cryptography_provider(db, capsys):
    assert run(db, "--provider", "cryptography", "code", RFC_SECRET, "--time", "1234567890") == 0
    assert capsys.readouterr().out.strip() == "005924"


def test_code_invalid_secret(db, capsys):
    assert run(db, "code", "GEZDG1BV", "--time", "59") == 1
    assert capsys.readouterr().out.startswith("[!] invalid Base32 character")


def test_add_list_rename_delete(db, capsys, monkeypatch):
    assert run(db, "add", "github", "GEZD GNBV GY3T QOJQ GEZD GNBV GY3T QOJQ") == 0
    assert "added (id=1)" in capsys.readouterr().out

    monkeypatch.setattr(otp_cli, "now", lambda: 59)
    assert run(db, "list") == 0
    out = capsys.readouterr().out
    assert "[  1] github: 287082" in out
    assert "valid ~1s" in out

    assert run(db, "rename", "1", "work") == 0
    assert db_manager.get_account(1, db).name == "work"
    assert run(db, "rename", "7", "x") == 1

    assert run(db, "delete", "1") == 0
    assert run(db, "delete", "1") == 1
    assert db_manager.list_accounts(db) == []


def test_add_invalid_secret(db, capsys):
    assert run(db, "add", "github", "0189") == 1
    assert "Invalid secret key" in capsys.readouterr().out


def test_enable_disable_theme(db):
    run(db, "enable")
    assert db_manager.get_settings(db).enabled is True
    run(db, "disable")
    assert db_manager.get_settings(db).enabled is False
    run(db, "theme")
    assert db_manager.get_settings(db).dark_mode is True


def test_notify_once(db, caplog, monkeypatch):
    import logging

    run(db, "add", "github", RFC_SECRET)
    monkeypatch.setattr(otp_cli, "now", lambda: 59)
    with caplog.at_level(logging.INFO, logger="backend.notifier"):
        assert run(db, "notify", "--once") == 0
    assert "github: 287082" in caplog.text


def test_notify_once_without_accounts(db, capsys):
    assert run(db, "notify", "--once") == 0
    assert "Nothing to notify" in capsys.readouterr().out


def test_watch_rejects_zero_period(db, capsys):
    assert run(db, "--period", "0", "watch") == 1
    assert "[!] time step must be a positive integer" in capsys.readouterr().out
