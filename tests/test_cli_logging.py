"""Tests for the command-line entry point, session factory and logging setup."""

import logging

import pytest
from sqlalchemy import text
from sqlalchemy.orm import Session

from core.database import get_db
from core.logging_config import setup_logging
from main import main, run


def test_no_command_prints_usage(capsys):
    assert run([]) == 2
    assert "init-db" in capsys.readouterr().out


def test_unknown_command(capsys):
    assert run(["bogus"]) == 2
    assert "Unknown command: bogus" in capsys.readouterr().out


def test_init_db():
    assert run(["init-db"]) == 0


def test_create_super_admin(capsys):
    assert run(["create-super-admin", "root-admin", "root@example.edu"]) == 0
    assert "Created super admin 'root-admin'" in capsys.readouterr().out
    assert run(["create-super-admin", "root-admin", "root@example.edu"]) == 1


def test_create_super_admin_needs_two_arguments():
    assert run(["create-super-admin", "lonely"]) == 2


def test_main_exits_with_status():
    with pytest.raises(SystemExit) as exc_info:
        main(["bogus"])
    assert exc_info.value.code == 2


def test_setup_logging_does_not_stack_handlers():
    root = setup_logging("debug")
    setup_logging("info")

    tagged = [h for h in root.handlers if getattr(h, "_campus_events", False)]
    assert len(tagged) == 1
    assert root.level == logging.INFO
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_get_db_yields_and_closes_session():
    sessions = get_db()
    db = next(sessions)
    assert isinstance(db, Session)
    db.execute(text("SELECT 1"))
    assert db.in_transaction()

    with pytest.raises(StopIteration):
        next(sessions)
    assert not db.in_transaction()
