"""Tests for the HTTP endpoints."""

import pytest

from app import create_app
from conftest import FakeClient, FakeWallet
from config import MintConfig
from create_token import TokenCreator


def make_client(creator, config=None):
    app = create_app(creator=creator, config=config or MintConfig())
    app.config["TESTING"] = True
    return app.test_client()


class TestCreateTokenEndpoint:
    def test_success(self, client, wallet, config) -> None:
        http = make_client(TokenCreator(client, wallet, config), config)
        resp = http.post("/create-token", json={"token_name": "My Token", "amount": "1000"})

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is True
        mint, sig = body["mint_address"], body["signature"]
        assert body["explorer_mint_url"] == f"https://explorer.solana.com/address/{mint}?cluster=devnet"
        assert body["explorer_tx_url"] == f"https://explorer.solana.com/tx/{sig}?cluster=devnet"

    @pytest.mark.parametrize(
        "payload, kind",
        [
            ({"token_name": "", "amount": "1"}, "empty_name"),
            ({"token_name": "Token", "amount": "abc"}, "invalid_amount"),
            ({}, "empty_name"),
        ],
    )
    def test_validation_errors(self, client, wallet, config, payload, kind) -> None:
        http = make_client(TokenCreator(client, wallet, config), config)
        resp = http.post("/create-token", json=payload)
        assert resp.status_code == 400
        body = resp.get_json()
        assert body["success"] is False
        assert body["kind"] == kind
        assert body["error"]

    def test_no_wallet(self, client, config) -> None:
        http = make_client(TokenCreator(client, None, config), config)
        resp = http.post("/create-token", json={"token_name": "Token", "amount": "1"})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Connect a wallet"

    def test_submission_failure_is_bad_gateway(self, client, config) -> None:
        wallet = FakeWallet(error=RuntimeError("Blockhash not found"))
        http = make_client(TokenCreator(client, wallet, config), config)
        resp = http.post("/create-token", json={"token_name": "Token", "amount": "1"})
        assert resp.status_code == 502
        assert resp.get_json()["error"] == "Blockhash not found"


class TestWalletStatusEndpoint:
    def test_connected(self, wallet) -> None:
        config = MintConfig(rpc_url="https://api.devnet.solana.com")
        creator = TokenCreator(FakeClient(balance=1_500_000_000), wallet, config)
        body = make_client(creator, config).get("/wallet-status").get_json()
        assert body == {
            "network": "devnet",
            "wallet_address": str(wallet.pubkey),
            "balance_sol": 1.5,
        }

    def test_not_connected(self) -> None:
        config = MintConfig(rpc_url="http://localhost:8899")
        creator = TokenCreator(FakeClient(), None, config)
        body = make_client(creator, config).get("/wallet-status").get_json()
        assert body == {"network": "custom", "wallet_address": None, "balance_sol": None}

    def test_balance_unavailable(self, wallet) -> None:
        config = MintConfig(rpc_url="https://api.mainnet-beta.solana.com")
        creator = TokenCreator(FakeClient(balance=ConnectionError("down")), wallet, config)
        body = make_client(creator, config).get("/wallet-status").get_json()
        assert body["network"] == "mainnet-beta"
        assert body["balance_sol"] is None
