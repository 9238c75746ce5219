"""Tests for the action.yml runner definition."""
from pathlib import Path

import pytest
import yaml

ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(scope="module")
def action():
    with open(ROOT / "action.yml", encoding="utf-8") as f:
        return yaml.safe_load(f)


class TestActionDefinition:
    """Test suite for the action metadata the runner reads."""

    def test_runs_in_container(self, action):
        """Test that the CLI runs as the action step itself so dynamic outputs reach the caller."""
        assert action["runs"]["using"] == "docker"
        assert (ROOT / action["runs"]["image"]).is_file()
        assert action["runs"]["args"] == ["export"]

    def test_verify_skip_has_no_default(self, action):
        """Test that an unset tls_verify_skip stays empty so the config file can supply it."""
        assert "default" not in action["inputs"]["tls_verify_skip"]

    def test_inputs_match_resolved_names(self, action):
        assert set(action["inputs"]) == {
            "base_url", "api_token", "username", "password", "vault_uid",
            "ca_cert", "tls_verify_skip", "secrets", "config_file",
        }
