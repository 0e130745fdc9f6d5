# submitter.py

import logging

from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.message import Message
from solders.transaction import Transaction

from errors import ConfirmationError, SubmissionError

logger = logging.getLogger(__name__)


class WalletSigner:
    """The connected wallet: an identity plus a way to sign and send.

    ``send_transaction`` gets an unsigned transaction whose fee payer and
    blockhash are already set, adds the wallet's own signature and those of
    ``signers``, submits it, and returns the signature.
    """

    pubkey = None

    def send_transaction(self, transaction, signers, skip_preflight):
        raise NotImplementedError


class KeypairWallet(WalletSigner):
    """A wallet backed by a keypair the service holds (e.g. from SECRET_KEY)."""

    def __init__(self, keypair, client):
        self.keypair = keypair
        self.client = client

    @property
    def pubkey(self):
        return self.keypair.pubkey()

    def send_transaction(self, transaction, signers, skip_preflight):
        transaction.sign([self.keypair, *signers], transaction.message.recent_blockhash)
        resp = self.client.send_raw_transaction(
            bytes(transaction),
            opts=TxOpts(skip_preflight=skip_preflight, preflight_commitment=Confirmed),
        )
        return resp.value


class TransactionSubmitter:
    def __init__(self, client, config):
        self.client = client
        self.config = config

    def fetch_anchor(self):
        """Latest blockhash and the last block height it stays valid for."""
        try:
            value = self.client.get_latest_blockhash(commitment=Confirmed).value
        except Exception as exc:
            raise SubmissionError(f"Could not fetch a recent blockhash: {exc}") from exc
        return value.blockhash, value.last_valid_block_height

    def submit(self, instruction_set, payer, wallet, signers, on_submitted=None):
        blockhash, last_valid_block_height = self.fetch_anchor()

        message = Message.new_with_blockhash(list(instruction_set.instructions), payer, blockhash)
        transaction = Transaction.new_unsigned(message)

        try:
            signature = wallet.send_transaction(
                transaction, signers=signers, skip_preflight=self.config.skip_preflight
            )
        except Exception as exc:
            raise SubmissionError(str(exc) or type(exc).__name__) from exc
        if signature is None:
            raise SubmissionError("Wallet did not return a transaction signature")

        logger.info("Submitted %s, confirming (valid until block %d)", signature, last_valid_block_height)
        if on_submitted is not None:
            on_submitted(signature)

        self.confirm(signature, last_valid_block_height)
        return signature

    def confirm(self, signature, last_valid_block_height):
        try:
            resp = self.client.confirm_transaction(
                signature,
                commitment=Confirmed,
                last_valid_block_height=last_valid_block_height,
            )
        except Exception as exc:
            raise ConfirmationError(str(exc) or type(exc).__name__) from exc

        statuses = getattr(resp, "value", None) or []
        status = statuses[0] if statuses else None
        if status is not None and status.err is not None:
            raise ConfirmationError(f"Transaction {signature} failed: {status.err}")
        return resp
