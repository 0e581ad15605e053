"""Tests for the Typer command dispatcher."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from sitectl.cli import app
from sitectl.services.prompt import TyperConfirmer

from conftest import FakeArchiver, FakePrivileges

runner = CliRunner()


@pytest.fixture
def invoke(manager):
    def _invoke(*args, obj=None, input=None):
        return runner.invoke(app, list(args), obj=obj or manager, input=input)

    return _invoke


class TestDispatch:
    def test_no_args_shows_help(self, invoke):
        result = invoke()
        assert result.exit_code == 0
        assert "Usage" in result.output
        assert "backup-all" in result.output

    def test_help_command(self, invoke):
        result = invoke("help")
        assert result.exit_code == 0
        assert "permissions" in result.output

    def test_unknown_command(self, invoke):
        result = invoke("frobnicate", "example.com")
        assert result.exit_code != 0
        assert "No such command" in result.output

    def test_missing_site_argument(self, invoke):
        result = invoke("new")
        assert result.exit_code != 0


class TestCommands:
    def test_new_then_list(self, invoke, tmp_config):
        result = invoke("new", "example.com")
        assert result.exit_code == 0, result.output
        assert "Done!" in result.output

        result = invoke("list")
        assert result.exit_code == 0
        assert "example.com" in result.output
        assert "Disabled" in result.output

    def test_enable_then_list(self, invoke):
        invoke("new", "example.com")
        result = invoke("enable", "example.com")
        assert result.exit_code == 0, result.output

        result = invoke("list")
        assert "Enabled" in result.output

    def test_list_empty(self, invoke):
        result = invoke("list")
        assert result.exit_code == 0
        assert "No sites found." in result.output

    def test_privilege_error(self, invoke, make_manager, tmp_config):
        result = invoke("new", "example.com", obj=make_manager(privileges=FakePrivileges(root=False)))
        assert result.exit_code == 1
        assert "must be run as root" in result.output
        assert not (tmp_config.sites_root / "example.com").exists()
        assert not tmp_config.audit_jsonl_path.exists()

    def test_unknown_service_group(self, invoke):
        err = LookupError("no such group: 'no-such-group-xyz'")
        with patch("sitectl.services.filesystem.shutil.chown", side_effect=err):
            result = invoke("new", "example.com")
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "no-such-group-xyz" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_invalid_name(self, invoke):
        result = invoke("new", "../etc")
        assert result.exit_code == 2
        assert "Invalid site name" in result.output

    def test_delete_missing_site(self, invoke):
        result = invoke("delete", "ghost.com", "--yes")
        assert result.exit_code == 1
        assert "Site does not exist." in result.output

    def test_delete_with_yes(self, invoke, tmp_config):
        invoke("new", "example.com")
        result = invoke("delete", "example.com", "-y")
        assert result.exit_code == 0, result.output
        assert "Backup:" in result.output
        assert not (tmp_config.sites_root / "example.com").exists()

    def test_backup_all_partial_failure(self, invoke, make_manager):
        mgr = make_manager(archiver=FakeArchiver(fail_for=["a.com"]))
        invoke("new", "a.com", obj=mgr)
        invoke("new", "b.com", obj=mgr)

        result = invoke("backup-all", obj=mgr)

        assert result.exit_code == 1
        assert "1 succeeded, 1 failed." in result.output
        assert "Backup failed for: a.com" in result.output
        assert mgr.archiver.calls[-1][0].name == "b.com"

    def test_repo(self, invoke, tmp_config):
        result = invoke("repo", "example.com")
        assert result.exit_code == 0, result.output
        assert (tmp_config.git_root / "example.com.git" / "hooks" / "post-receive").exists()

    def test_repo_exists(self, invoke):
        invoke("repo", "example.com")
        result = invoke("repo", "example.com")
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_cert(self, invoke, manager):
        result = invoke("cert", "example.com")
        assert result.exit_code == 0, result.output
        assert manager.certs.calls == [["example.com", "www.example.com"]]


class TestConfirmation:
    @pytest.fixture
    def prompting(self, make_manager):
        mgr = make_manager(confirmer=TyperConfirmer())
        mgr.new("example.com")
        mgr.enable("example.com")
        return mgr

    def test_declined(self, invoke, prompting, tmp_config):
        result = invoke("disable", "example.com", obj=prompting, input="n\n")
        assert result.exit_code == 1
        assert "Aborted." in result.output
        assert (tmp_config.enabled_dir / "example.com").is_symlink()

    def test_empty_answer_is_yes(self, invoke, prompting, tmp_config):
        result = invoke("disable", "example.com", obj=prompting, input="\n")
        assert result.exit_code == 0, result.output
        assert not (tmp_config.enabled_dir / "example.com").is_symlink()

    def test_already_disabled(self, invoke, prompting):
        invoke("disable", "example.com", "--yes", obj=prompting)
        result = invoke("disable", "example.com", "--yes", obj=prompting)
        assert result.exit_code == 0
        assert "already disabled" in result.output


class TestAuditTrail:
    def test_records_success_and_failure(self, invoke, tmp_config):
        invoke("new", "example.com")
        invoke("backup", "ghost.com")

        events = [json.loads(line) for line in tmp_config.audit_jsonl_path.read_text().splitlines()]
        assert [(e["action"], e["result"]) for e in events] == [
            ("site.new", "success"),
            ("site.backup", "failure"),
        ]
        assert events[1]["error"] == "Site does not exist."

    def test_unprivileged_commands_not_audited(self, invoke, tmp_config):
        invoke("list")
        invoke("repo", "example.com")
        assert not tmp_config.audit_jsonl_path.exists()

    def test_backup_records_archive(self, invoke, tmp_config):
        invoke("new", "example.com")
        result = invoke("backup", "example.com")
        assert result.exit_code == 0, result.output

        events = [json.loads(line) for line in tmp_config.audit_jsonl_path.read_text().splitlines()]
        archive = tmp_config.backup_dir / "example.com" / "example.com_2024-03-01.tar.gz"
        assert events[-1]["params"] == {"archive": str(archive)}

    def test_declined_prompt_recorded_as_aborted(self, invoke, make_manager, tmp_config):
        mgr = make_manager(confirmer=TyperConfirmer())
        invoke("new", "example.com", obj=mgr)
        result = invoke("disable", "example.com", obj=mgr, input="n\n")
        assert result.exit_code == 1

        events = [json.loads(line) for line in tmp_config.audit_jsonl_path.read_text().splitlines()]
        assert (events[-1]["action"], events[-1]["result"], events[-1]["exit_code"]) == (
            "site.disable",
            "aborted",
            1,
        )
