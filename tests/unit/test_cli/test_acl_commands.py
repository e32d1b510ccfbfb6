"""Tests for the ACL CLI commands.

Testing approach:
- Uses Click's CliRunner for command invocation
- Patches store creation so every command shares one InMemoryKVStore
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from smartdns_web.cli.main import cli
from smartdns_web.features.acl.service import host_key
from smartdns_web.infra.kv import InMemoryKVStore


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def shared_store():
    """Make every command use the same in-memory store."""
    store = InMemoryKVStore()
    with patch("smartdns_web.cli.commands.acl.create_kv_store", return_value=store):
        yield store


@pytest.mark.unit
class TestAclCommands:
    """Tests for `smartdns-web acl ...`."""

    def test_submit_writes_hosts(self, cli_runner, shared_store):
        result = cli_runner.invoke(
            cli,
            ["acl", "submit", "10.0.0.0/30", "--netmask", "30", "--master-dns", "1.1.1.1"],
        )

        assert result.exit_code == 0, result.output
        assert "2 of 2 hosts written" in result.output
        assert host_key("10.0.0.1") in shared_store.data
        assert shared_store.closed

    def test_submit_reports_skipped_hosts(self, cli_runner, shared_store):
        cli_runner.invoke(cli, ["acl", "submit", "10.0.0.0/30", "--netmask", "30"])

        result = cli_runner.invoke(cli, ["acl", "submit", "10.0.0.0/29", "--netmask", "29"])

        assert result.exit_code == 0, result.output
        assert "2 hosts kept by a more specific block" in result.output

    def test_submit_invalid_cidr_exits_nonzero(self, cli_runner, shared_store):
        result = cli_runner.invoke(cli, ["acl", "submit", "10.0.0.0/40", "--netmask", "24"])

        assert result.exit_code == 1
        assert shared_store.data == {}

    def test_list_and_hosts(self, cli_runner, shared_store):
        cli_runner.invoke(cli, ["acl", "submit", "10.0.0.0/30", "--netmask", "30"])

        listed = cli_runner.invoke(cli, ["acl", "list"])
        hosts = cli_runner.invoke(cli, ["acl", "hosts", "10.0.0.0/30"])

        assert "10.0.0.0/30" in listed.output
        assert "10.0.0.1" in hosts.output
        assert "10.0.0.2" in hosts.output

    def test_show_block(self, cli_runner, shared_store):
        cli_runner.invoke(
            cli,
            ["acl", "submit", "10.0.0.0/30", "--netmask", "30", "--master-dns", "1.1.1.1", "--timeout", "3"],
        )

        result = cli_runner.invoke(cli, ["acl", "show", "10.0.0.2/30"])

        assert result.exit_code == 0, result.output
        assert "10.0.0.0/30" in result.output
        assert "1.1.1.1" in result.output
        assert "Resolver timeout: 3s" in result.output

    def test_show_unknown_block_exits_nonzero(self, cli_runner, shared_store):
        result = cli_runner.invoke(cli, ["acl", "show", "10.0.0.0/30"])

        assert result.exit_code == 1
        assert "No ACL block for 10.0.0.0/30" in result.output

    def test_list_empty(self, cli_runner, shared_store):
        result = cli_runner.invoke(cli, ["acl", "list"])

        assert result.exit_code == 0
        assert "No ACL blocks defined" in result.output

    def test_delete_requires_confirmation(self, cli_runner, shared_store):
        cli_runner.invoke(cli, ["acl", "submit", "10.0.0.0/30", "--netmask", "30"])

        aborted = cli_runner.invoke(cli, ["acl", "delete", "10.0.0.0/30"], input="n\n")
        assert aborted.exit_code == 1
        assert host_key("10.0.0.1") in shared_store.data

        result = cli_runner.invoke(cli, ["acl", "delete", "10.0.0.0/30", "--yes"])
        assert result.exit_code == 0, result.output
        assert shared_store.data == {}

    def test_version(self, cli_runner):
        result = cli_runner.invoke(cli, ["--version"])

        assert "1.0.0" in result.output
