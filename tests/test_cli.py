"""
Tests for CLI commands.
"""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from paywallet.cli import app
from paywallet.wallet.bip32 import mnemonic_to_seed
from paywallet.wallet.service import generate_pool

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("PAYWALLET_STATE_FILE", str(tmp_path / "state.json"))
    monkeypatch.setenv("MNEMONIC", "test seed")
    return tmp_path


def test_accounts_lists_pool(cli_env) -> None:
    result = runner.invoke(app, ["accounts"])
    assert result.exit_code == 0
    pool = generate_pool(mnemonic_to_seed("test seed"))
    for account in pool:
        assert account.address in result.output
    assert "* Wallet 0" in result.output


def test_activate_then_list(cli_env) -> None:
    result = runner.invoke(app, ["activate", "3"])
    assert result.exit_code == 0
    assert "Wallet 3 is now active" in result.output

    result = runner.invoke(app, ["accounts"])
    assert "* Wallet 3" in result.output
    assert "* Wallet 0" not in result.output


def test_activate_out_of_range(cli_env) -> None:
    result = runner.invoke(app, ["activate", "10"])
    assert result.exit_code == 1


def test_missing_mnemonic(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("MNEMONIC", raising=False)
    monkeypatch.setenv("PAYWALLET_STATE_FILE", str(tmp_path / "state.json"))
    result = runner.invoke(app, ["accounts"])
    assert result.exit_code == 1
