# config.py

import os
from dataclasses import dataclass

import base58
from dotenv import load_dotenv
from solders.keypair import Keypair

DEVNET_RPC_URL = "https://api.devnet.solana.com"
EXPLORER_URL = "https://explorer.solana.com"
FAUCET_URL = "https://faucet.solana.com"


@dataclass(frozen=True)
class MintConfig:
    """Everything the create-and-mint workflow needs that isn't user input."""

    rpc_url: str = DEVNET_RPC_URL
    decimals: int = 9
    symbol: str = "TKN"
    uri: str = ""
    explorer_url: str = EXPLORER_URL
    faucet_url: str = FAUCET_URL
    cluster: str = "devnet"
    skip_preflight: bool = True
    log_level: str = "INFO"


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config():
    """Build a MintConfig from the environment (and .env, if there is one)."""
    load_dotenv()
    return MintConfig(
        rpc_url=os.getenv("RPC_URL", DEVNET_RPC_URL),
        explorer_url=os.getenv("EXPLORER_URL", EXPLORER_URL),
        faucet_url=os.getenv("FAUCET_URL", FAUCET_URL),
        cluster=os.getenv("EXPLORER_CLUSTER", "devnet"),
        skip_preflight=_env_flag("SKIP_PREFLIGHT", True),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def load_keypair(secret_key_string):
    """Decode a base58 secret key. Returns None when no key is configured."""
    if not secret_key_string:
        return None
    return Keypair.from_bytes(base58.b58decode(secret_key_string.strip()))


def get_network_name(endpoint):
    # Display only, never used to pick protocol behaviour.
    if not isinstance(endpoint, str):
        return "custom"
    lower = endpoint.lower()
    if "devnet" in lower:
        return "devnet"
    if "testnet" in lower:
        return "testnet"
    if "mainnet" in lower:
        return "mainnet-beta"
    return "custom"
