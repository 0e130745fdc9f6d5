# models.py

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR, localcontext
from enum import Enum
from typing import Optional, Tuple

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from errors import FailureKind


def to_raw_amount(amount: Decimal, decimals: int) -> int:
    """Scale a UI amount to base units, dropping any fractional remainder."""
    with localcontext() as ctx:
        # Enough digits that scaling is exact before flooring.
        ctx.prec = max(28, len(amount.as_tuple().digits) + decimals + 2)
        scaled = amount.scaleb(decimals)
        return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


@dataclass(frozen=True)
class MintRequest:
    name: str
    symbol: str
    uri: str
    decimals: int
    amount: Decimal
    payer: Pubkey
    mint_keypair: Keypair

    @property
    def mint(self) -> Pubkey:
        return self.mint_keypair.pubkey()

    @property
    def raw_amount(self) -> int:
        return to_raw_amount(self.amount, self.decimals)


@dataclass(frozen=True)
class AccountSizePlan:
    allocated_space: int
    rent_lamports: int
    metadata_length: int = 0
    final_space: int = 0


class InstructionKind(str, Enum):
    CREATE_ACCOUNT = "create_account"
    INITIALIZE_METADATA_POINTER = "initialize_metadata_pointer"
    INITIALIZE_MINT = "initialize_mint"
    INITIALIZE_TOKEN_METADATA = "initialize_token_metadata"
    CREATE_ASSOCIATED_TOKEN_ACCOUNT = "create_associated_token_account"
    MINT_TO = "mint_to"


@dataclass(frozen=True)
class InstructionSet:
    entries: Tuple[Tuple[InstructionKind, Instruction], ...]
    associated_token_address: Pubkey

    @property
    def kinds(self) -> Tuple[InstructionKind, ...]:
        return tuple(kind for kind, _ in self.entries)

    @property
    def instructions(self) -> Tuple[Instruction, ...]:
        return tuple(ix for _, ix in self.entries)

    def __len__(self):
        return len(self.entries)

    def get(self, kind: InstructionKind) -> Optional[Instruction]:
        for entry_kind, ix in self.entries:
            if entry_kind is kind:
                return ix
        return None


def explorer_links(mint_address, signature, explorer_url, cluster="devnet"):
    return {
        "explorer_mint_url": f"{explorer_url}/address/{mint_address}?cluster={cluster}",
        "explorer_tx_url": f"{explorer_url}/tx/{signature}?cluster={cluster}",
    }


@dataclass(frozen=True)
class Success:
    mint_address: str
    signature: str
    ok = True

    def to_dict(self, explorer_url=None, cluster="devnet"):
        data = {
            "success": True,
            "mint_address": self.mint_address,
            "signature": self.signature,
        }
        if explorer_url:
            data.update(explorer_links(self.mint_address, self.signature, explorer_url, cluster))
        return data


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str
    ok = False

    def to_dict(self):
        return {"success": False, "kind": self.kind.value, "error": self.message}


class WorkflowState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    BUILDING = "building"
    SUBMITTING = "submitting"
    CONFIRMING = "confirming"
    DONE = "done"
    FAILED = "failed"

    @property
    def accepts_new_attempt(self):
        return self in (WorkflowState.IDLE, WorkflowState.DONE, WorkflowState.FAILED)
