# create_token.py (Token-2022 create & mint, one transaction)

import argparse
import logging
import os
import sys
import threading

from solana.rpc.api import Client

from config import get_network_name, load_config, load_keypair
from errors import FailureKind, MintError, WorkflowBusy, classify_error
from instructions import build_instruction_set
from models import Failure, Success, WorkflowState, explorer_links
from submitter import KeypairWallet, TransactionSubmitter
from token_metadata import plan_account_size
from validation import validate_request

logger = logging.getLogger(__name__)


class TokenCreator:
    """Creates a Token-2022 mint with inline metadata and mints its first supply.

    One attempt runs at a time. ``create_and_mint`` never raises for user or
    network problems; it returns a Success or a Failure carrying a message
    that can be shown as-is.
    """

    def __init__(self, client, wallet, config):
        self.client = client
        self.wallet = wallet
        self.config = config
        self.submitter = TransactionSubmitter(client, config)
        self._lock = threading.Lock()
        self._state = WorkflowState.IDLE
        self.last_outcome = None

    @property
    def state(self):
        return self._state

    def _set_state(self, state):
        logger.debug("workflow %s -> %s", self._state.value, state.value)
        self._state = state

    def _begin(self):
        with self._lock:
            if not self._state.accepts_new_attempt:
                raise WorkflowBusy()
            self._set_state(WorkflowState.VALIDATING)

    def create_and_mint(self, name, amount):
        try:
            self._begin()
        except WorkflowBusy as exc:
            logger.warning("Rejected attempt while %s", self._state.value)
            return Failure(exc.kind, str(exc))

        outcome = None
        try:
            outcome = self._run(name, amount)
        except MintError as exc:
            outcome = self._fail(exc.kind, exc)
        except Exception as exc:
            logger.exception("Unexpected failure while creating token")
            outcome = self._fail(FailureKind.SUBMISSION, exc)
        finally:
            # Interrupted attempts (outcome None) must not leave the workflow busy.
            with self._lock:
                ok = outcome is not None and outcome.ok
                self._set_state(WorkflowState.DONE if ok else WorkflowState.FAILED)
                self.last_outcome = outcome
        return outcome

    def _run(self, name, amount):
        payer = self.wallet.pubkey if self.wallet is not None else None
        request = validate_request(name, amount, payer, self.config)

        self._set_state(WorkflowState.BUILDING)
        plan = plan_account_size(self.client, request)
        instruction_set = build_instruction_set(request, plan)

        self._set_state(WorkflowState.SUBMITTING)
        signature = self.submitter.submit(
            instruction_set,
            payer=request.payer,
            wallet=self.wallet,
            signers=[request.mint_keypair],
            on_submitted=lambda _sig: self._set_state(WorkflowState.CONFIRMING),
        )

        outcome = Success(mint_address=str(request.mint), signature=str(signature))
        logger.info("Created mint %s (%s %s) in %s", outcome.mint_address, request.amount, request.symbol, outcome.signature)
        return outcome

    def _fail(self, kind, err):
        message = classify_error(err, self.config.faucet_url).message
        logger.warning("Token creation failed (%s): %s", kind.value, message)
        return Failure(kind, message)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create a Token-2022 mint with metadata and mint its supply.")
    parser.add_argument("name", help="token name")
    parser.add_argument("amount", help="initial supply, in whole tokens")
    args = parser.parse_args(argv)

    config = load_config()
    logging.basicConfig(level=config.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    client = Client(config.rpc_url)
    keypair = load_keypair(os.getenv("SECRET_KEY"))
    wallet = KeypairWallet(keypair, client) if keypair is not None else None

    if wallet is not None:
        print(f"👑 Using creator wallet: {wallet.pubkey}")
    print(f"🌐 Network: {get_network_name(config.rpc_url)}")
    print(f"🚀 Creating '{args.name}' and minting {args.amount} tokens...")

    creator = TokenCreator(client, wallet, config)
    outcome = creator.create_and_mint(args.name, args.amount)

    if not outcome.ok:
        print(f"😿 {outcome.message}")
        return 1

    links = explorer_links(outcome.mint_address, outcome.signature, config.explorer_url, config.cluster)
    print(f"✅ Token Mint Created! Address: {outcome.mint_address}")
    print(f"✅ Transaction: {outcome.signature}")
    print(f"🔗 Mint:        {links['explorer_mint_url']}")
    print(f"🔗 Transaction: {links['explorer_tx_url']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
