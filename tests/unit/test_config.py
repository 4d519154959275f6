"""Tests for network configuration."""

import dataclasses

import pytest

from liquidity.config import DEFAULT_NETWORK_CONFIG, NetworkConfig
from liquidity.constants import TESTNET_EXPLORER_URL, TESTNET_PASSPHRASE, TESTNET_RPC_URL


class TestNetworkConfig:
    """Tests for NetworkConfig."""

    def test_defaults_target_testnet(self):
        assert DEFAULT_NETWORK_CONFIG.rpc_url == TESTNET_RPC_URL
        assert DEFAULT_NETWORK_CONFIG.network_passphrase == TESTNET_PASSPHRASE

    def test_confirmation_outlasts_validity_window(self):
        assert DEFAULT_NETWORK_CONFIG.confirmation_timeout > 30

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_NETWORK_CONFIG.rpc_url = "https://elsewhere.test"  # type: ignore[misc]

    def test_transaction_url(self):
        assert DEFAULT_NETWORK_CONFIG.transaction_url("ab12") == f"{TESTNET_EXPLORER_URL}/tx/ab12"

    def test_transaction_url_trailing_slash(self):
        config = NetworkConfig(explorer_base_url="https://explorer.test/")

        assert config.transaction_url("ab12") == "https://explorer.test/tx/ab12"


class TestFromEnv:
    """Tests for NetworkConfig.from_env."""

    def test_defaults_without_env(self, monkeypatch):
        for name in (
            "LIQUIDITY_RPC_URL",
            "LIQUIDITY_FRIENDBOT_URL",
            "LIQUIDITY_EXPLORER_URL",
            "LIQUIDITY_REQUEST_TIMEOUT",
            "LIQUIDITY_POLL_INTERVAL",
        ):
            monkeypatch.delenv(name, raising=False)

        assert NetworkConfig.from_env() == NetworkConfig()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("LIQUIDITY_RPC_URL", "http://localhost:8000/rpc")
        monkeypatch.setenv("LIQUIDITY_POLL_INTERVAL", "0.5")
        monkeypatch.setenv("LIQUIDITY_REQUEST_TIMEOUT", "5")

        config = NetworkConfig.from_env()

        assert config.rpc_url == "http://localhost:8000/rpc"
        assert config.poll_interval == 0.5
        assert config.request_timeout == 5.0
        assert config.network_passphrase == TESTNET_PASSPHRASE

    def test_invalid_number(self, monkeypatch):
        monkeypatch.setenv("LIQUIDITY_POLL_INTERVAL", "soon")

        with pytest.raises(ValueError):
            NetworkConfig.from_env()
