"""Tests for the vault-secrets-action CLI."""
from argparse import Namespace
from unittest import mock

import pytest

from vault_secrets_action.cli import main as cli
from vault_secrets_action.cli.validators import validate_manifest
from vault_secrets_action.secrets.domains.errors import VaultCheckoutFailed


@pytest.fixture
def quiet_logging():
    """Keep cmd_export from reconfiguring the root logger."""
    with mock.patch("vault_secrets_action.secrets.domains.actions_core.configure_logging") as patched:
        yield patched


class TestValidateManifest:
    """Test suite for manifest validation in the check command."""

    def test_valid_manifest(self):
        requests = validate_manifest("box1.sec1 | OUT1; box2.sec2 | OUT2")

        assert [r.destination for r in requests] == ["OUT1", "OUT2"]

    @pytest.mark.parametrize("manifest", ["", "   ", ";;"])
    def test_empty_manifest(self, manifest, capsys):
        with pytest.raises(SystemExit) as exc_info:
            validate_manifest(manifest)

        assert exc_info.value.code == 2
        assert "Error" in capsys.readouterr().err

    def test_malformed_manifest(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            validate_manifest("box1.sec1 | OUT1; box2 | OUT2")

        assert exc_info.value.code == 2
        err = capsys.readouterr().err
        assert "box2 | OUT2" in err
        assert "Examples of valid entries" in err


class TestCommands:
    """Test suite for command handlers."""

    def test_version(self, capsys):
        cli.cmd_version(Namespace())

        assert capsys.readouterr().out.strip() == f"vault-secrets-action {cli.VERSION}"

    def test_check_lists_requests(self, capsys):
        cli.cmd_check(Namespace(manifest="box1.sec1 | OUT1; certs.ks | KS | p12"))

        out = capsys.readouterr().out
        assert "box1.sec1 -> OUT1 (standard)" in out
        assert "certs.ks -> KS (p12)" in out
        assert "2 entries OK" in out

    def test_export_success(self, quiet_logging):
        with mock.patch("vault_secrets_action.secrets.workflows.export_secrets.export_secrets") as export:
            with pytest.raises(SystemExit) as exc_info:
                cli.cmd_export(Namespace(config=None))

        assert exc_info.value.code == 0
        export.assert_called_once()
        assert export.call_args.args[1] is None

    def test_export_failure_exit_code(self, quiet_logging):
        with mock.patch(
            "vault_secrets_action.secrets.workflows.export_secrets.export_secrets",
            side_effect=VaultCheckoutFailed("box1", "sec1", "API Error"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                cli.cmd_export(Namespace(config=None))

        assert exc_info.value.code == 1

    def test_export_with_config_file(self, quiet_logging, tmp_path):
        config_file = tmp_path / "vault-secrets.yml"
        config_file.write_text("base_url: https://vault.example.com\n")

        with mock.patch("vault_secrets_action.secrets.workflows.export_secrets.export_secrets") as export:
            with pytest.raises(SystemExit):
                cli.cmd_export(Namespace(config=str(config_file)))

        assert export.call_args.args[1] == {"base_url": "https://vault.example.com"}

    def test_export_bad_config_file(self, quiet_logging, tmp_path, capsys):
        with mock.patch("vault_secrets_action.secrets.workflows.export_secrets.export_secrets") as export:
            with pytest.raises(SystemExit) as exc_info:
                cli.cmd_export(Namespace(config=str(tmp_path / "missing.yml")))

        assert exc_info.value.code == 1
        export.assert_not_called()
        assert "::error::Configuration file not found" in capsys.readouterr().out


class TestMain:
    """Test suite for argument routing."""

    def test_no_command_outside_runner(self, monkeypatch, capsys):
        monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
        monkeypatch.setattr("sys.argv", ["vault-secrets-action"])

        with pytest.raises(SystemExit) as exc_info:
            cli.main()

        assert exc_info.value.code == 2
        assert "usage" in capsys.readouterr().out.lower()

    def test_no_command_inside_runner_exports(self, monkeypatch):
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        monkeypatch.setattr("sys.argv", ["vault-secrets-action"])

        with mock.patch.object(cli, "cmd_export") as cmd_export:
            cli.main()

        cmd_export.assert_called_once()

    def test_check_command(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["vault-secrets-action", "check", "box1.sec1 | OUT1"])

        cli.main()

        assert "1 entry OK" in capsys.readouterr().out
