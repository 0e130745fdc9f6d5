"""Shared pytest fixtures and fakes for the create-and-mint tests."""

from types import SimpleNamespace

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature

from config import MintConfig


def rent_for(size):
    # Solana's default rent: (ACCOUNT_STORAGE_OVERHEAD + size) * lamports/byte-year * 2 years
    return (128 + size) * 3480 * 2


class FakeClient:
    """Stands in for solana.rpc.api.Client; records every call it gets."""

    def __init__(self, balance=2_000_000_000, confirm_error=None, tx_err=None):
        self.calls = []
        self.balance = balance
        self.confirm_error = confirm_error
        self.tx_err = tx_err
        self.blockhash = Hash.new_unique()
        self.last_valid_block_height = 1234
        self.raw_transactions = []

    def get_minimum_balance_for_rent_exemption(self, size):
        self.calls.append(("rent", size))
        return SimpleNamespace(value=rent_for(size))

    def get_latest_blockhash(self, commitment=None):
        self.calls.append(("blockhash", commitment))
        return SimpleNamespace(
            value=SimpleNamespace(
                blockhash=self.blockhash,
                last_valid_block_height=self.last_valid_block_height,
            )
        )

    def send_raw_transaction(self, txn, opts=None):
        self.calls.append(("send", opts))
        self.raw_transactions.append(txn)
        return SimpleNamespace(value=Signature.new_unique())

    def confirm_transaction(self, tx_sig, commitment=None, sleep_seconds=0.5, last_valid_block_height=None):
        self.calls.append(("confirm", tx_sig, commitment, last_valid_block_height))
        if self.confirm_error is not None:
            raise self.confirm_error
        return SimpleNamespace(value=[SimpleNamespace(err=self.tx_err)])

    def get_balance(self, pubkey, commitment=None):
        self.calls.append(("balance", pubkey))
        if isinstance(self.balance, Exception):
            raise self.balance
        return SimpleNamespace(value=self.balance)

    def call_names(self):
        return [call[0] for call in self.calls]


class FakeWallet:
    """A connected wallet that records what it was asked to sign."""

    def __init__(self, keypair=None, error=None):
        self.keypair = keypair or Keypair()
        self.error = error
        self.sent = []

    @property
    def pubkey(self):
        return self.keypair.pubkey()

    def send_transaction(self, transaction, signers, skip_preflight):
        self.sent.append((transaction, list(signers), skip_preflight))
        if self.error is not None:
            raise self.error
        transaction.sign([self.keypair, *signers], transaction.message.recent_blockhash)
        return transaction.signatures[0]


@pytest.fixture
def config():
    return MintConfig()


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def wallet():
    return FakeWallet()
