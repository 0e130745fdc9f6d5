# validation.py

from decimal import Decimal, InvalidOperation

from solders.keypair import Keypair

from errors import EmptyName, InvalidAmount, WalletNotConnected
from models import MintRequest, to_raw_amount

U64_MAX = 2**64 - 1


def parse_amount(amount):
    """Parse user input into a finite, positive Decimal or raise InvalidAmount."""
    if amount is None or isinstance(amount, bool):
        raise InvalidAmount()
    try:
        value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmount()
    if not value.is_finite() or value <= 0:
        raise InvalidAmount()
    return value


def validate_request(name, amount, payer, config):
    """Check raw form input and turn it into a MintRequest.

    Nothing here talks to the network. A new mint keypair is generated for
    every request that passes.
    """
    if payer is None:
        raise WalletNotConnected()

    name = (name or "").strip()
    if not name:
        raise EmptyName()

    value = parse_amount(amount)
    if value.adjusted() > 40 or to_raw_amount(value, config.decimals) > U64_MAX:
        raise InvalidAmount("Amount is too large for a token supply")

    return MintRequest(
        name=name,
        symbol=config.symbol,
        uri=config.uri,
        decimals=config.decimals,
        amount=value,
        payer=payer,
        mint_keypair=Keypair(),
    )
