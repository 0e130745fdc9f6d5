# app.py (Token-2022 create & mint service)

import logging
import os

from flask import Flask, jsonify, request
from solana.rpc.api import Client
from werkzeug.middleware.proxy_fix import ProxyFix

from config import get_network_name, load_config, load_keypair
from create_token import TokenCreator
from errors import FailureKind
from submitter import KeypairWallet

LAMPORTS_PER_SOL = 1_000_000_000


def _status_code(failure):
    if failure.kind.is_validation:
        return 400
    if failure.kind is FailureKind.BUSY:
        return 409
    return 502


def create_app(creator=None, config=None):
    config = config or load_config()
    if creator is None:
        client = Client(config.rpc_url)
        # No SECRET_KEY simply means no wallet is connected.
        keypair = load_keypair(os.getenv("SECRET_KEY"))
        wallet = KeypairWallet(keypair, client) if keypair is not None else None
        creator = TokenCreator(client, wallet, config)

    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)
    app.logger.setLevel(config.log_level)

    # --- WALLET STATUS (network + balance) ---
    @app.route("/wallet-status", methods=["GET"])
    def wallet_status():
        wallet = creator.wallet
        pubkey = wallet.pubkey if wallet is not None else None
        balance = None
        if pubkey is not None:
            try:
                balance = creator.client.get_balance(pubkey).value / LAMPORTS_PER_SOL
            except Exception as e:
                # The balance is informational; report it as unavailable.
                app.logger.warning(f"Balance query failed for {pubkey}: {e}")

        return jsonify({
            "network": get_network_name(config.rpc_url),
            "wallet_address": str(pubkey) if pubkey is not None else None,
            "balance_sol": balance,
        })

    # --- CREATE & MINT ENDPOINT ---
    @app.route("/create-token", methods=["POST"])
    def create_token():
        data = request.get_json(silent=True) or {}
        token_name = data.get("token_name", "")
        amount = data.get("amount", "")

        app.logger.info(f"Create request for token {token_name!r}, amount {amount!r}")
        outcome = creator.create_and_mint(token_name, amount)

        if outcome.ok:
            return jsonify(outcome.to_dict(config.explorer_url, config.cluster))
        return jsonify(outcome.to_dict()), _status_code(outcome)

    return app


app = create_app()


# --- Main Server Run ---
if __name__ == "__main__":
    logging.basicConfig(level=app.logger.level)
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
