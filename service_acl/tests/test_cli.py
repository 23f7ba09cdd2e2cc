"""
Tests for the acl-admin command line.
"""

import json

import pytest

from service_acl.cli import EXIT_DENIED, EXIT_ERROR, EXIT_OK, main


@pytest.fixture
def db_args(tmp_path, monkeypatch):
    """CLI arguments pointing at a fresh SQLite file, with the schema created."""
    monkeypatch.delenv("ACL_REDIS_URL", raising=False)
    args = ["--database-url", f"sqlite:///{tmp_path / 'cli.db'}"]
    assert main(args + ["init-db"]) == EXIT_OK
    return args


def last_json_line(text: str):
    return json.loads(text.strip().splitlines()[-1])


def test_init_db(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("ACL_REDIS_URL", raising=False)
    code = main(["--database-url", f"sqlite:///{tmp_path / 'init.db'}", "--table", "cli_permissions", "init-db"])

    assert code == EXIT_OK
    assert last_json_line(capsys.readouterr().out) == {"table": "cli_permissions", "status": "ready"}


def test_grant_and_show(db_args, capsys):
    capsys.readouterr()

    assert main(db_args + ["grant", "alice", "foo", "view", "edit"]) == EXIT_OK
    granted = last_json_line(capsys.readouterr().out)
    assert granted == {"requester": "alice", "resource": "foo", "mask": 3, "actions": ["view", "edit"]}

    assert main(db_args + ["show", "alice", "foo"]) == EXIT_OK
    assert last_json_line(capsys.readouterr().out)["mask"] == 3


def test_revoke_to_zero(db_args, capsys):
    main(db_args + ["grant", "alice", "foo", "view"])
    capsys.readouterr()

    assert main(db_args + ["revoke", "alice", "foo", "view"]) == EXIT_OK
    assert last_json_line(capsys.readouterr().out) == {
        "requester": "alice", "resource": "foo", "mask": 0, "actions": []
    }


def test_check(db_args, capsys):
    main(db_args + ["grant", "ROLE_EDITOR", "foo", "edit"])
    capsys.readouterr()

    assert main(db_args + ["check", "alice", "foo", "edit"]) == EXIT_DENIED
    assert last_json_line(capsys.readouterr().out)["granted"] is False

    assert main(db_args + ["check", "alice", "foo", "edit", "--parent", "ROLE_EDITOR"]) == EXIT_OK
    assert last_json_line(capsys.readouterr().out)["granted"] is True


def test_unknown_action(db_args, capsys):
    capsys.readouterr()

    assert main(db_args + ["grant", "alice", "foo", "publish"]) == EXIT_ERROR

    error = last_json_line(capsys.readouterr().err)
    assert error["code"] == "UNKNOWN_ACTION"
    assert error["details"]["action"] == "publish"


def test_invalid_action_codec(db_args, capsys):
    capsys.readouterr()

    assert main(db_args + ["--action-codec", "nowhere.Builder", "show", "alice", "foo"]) == EXIT_ERROR
    assert last_json_line(capsys.readouterr().err)["code"] == "CONFIGURATION_ERROR"
