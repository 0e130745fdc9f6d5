# instructions.py

import hashlib
import struct

from solders.instruction import AccountMeta, Instruction
from solders.system_program import CreateAccountParams, create_account
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID
from spl.token.instructions import (
    InitializeMintParams,
    MintToParams,
    create_associated_token_account,
    get_associated_token_address,
    initialize_mint,
    mint_to,
)

from errors import InstructionAssemblyError
from models import InstructionKind, InstructionSet
from token_metadata import BorshString

# Token-2022 instruction 39 is the metadata-pointer extension; sub-instruction 0 initializes it.
METADATA_POINTER_EXTENSION_IX = 39
METADATA_POINTER_INITIALIZE = 0

INITIALIZE_TOKEN_METADATA_DISCRIMINATOR = hashlib.sha256(
    b"spl_token_metadata_interface:initialize_account"
).digest()[:8]

INSTRUCTION_ORDER = (
    InstructionKind.CREATE_ACCOUNT,
    InstructionKind.INITIALIZE_METADATA_POINTER,
    InstructionKind.INITIALIZE_MINT,
    InstructionKind.INITIALIZE_TOKEN_METADATA,
    InstructionKind.CREATE_ASSOCIATED_TOKEN_ACCOUNT,
    InstructionKind.MINT_TO,
)


def _optional_pubkey(pubkey):
    # OptionalNonZeroPubkey: all zeros means "none".
    return bytes(32) if pubkey is None else bytes(pubkey)


def initialize_metadata_pointer_ix(mint, authority, metadata_address, program_id=TOKEN_2022_PROGRAM_ID):
    data = struct.pack("<BB", METADATA_POINTER_EXTENSION_IX, METADATA_POINTER_INITIALIZE)
    data += _optional_pubkey(authority) + _optional_pubkey(metadata_address)
    return Instruction(
        program_id,
        data,
        [AccountMeta(pubkey=mint, is_signer=False, is_writable=True)],
    )


def initialize_token_metadata_ix(
    metadata, update_authority, mint, mint_authority, name, symbol, uri, program_id=TOKEN_2022_PROGRAM_ID
):
    data = (
        INITIALIZE_TOKEN_METADATA_DISCRIMINATOR
        + BorshString.build(name)
        + BorshString.build(symbol)
        + BorshString.build(uri)
    )
    return Instruction(
        program_id,
        data,
        [
            AccountMeta(pubkey=metadata, is_signer=False, is_writable=True),
            AccountMeta(pubkey=update_authority, is_signer=False, is_writable=False),
            AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
            AccountMeta(pubkey=mint_authority, is_signer=True, is_writable=False),
        ],
    )


def _check_consistency(entries, ata, program_id, associated_program_id):
    if tuple(kind for kind, _ in entries) != INSTRUCTION_ORDER:
        raise InstructionAssemblyError("Instructions are not in the required order")

    for kind, ix in entries:
        if kind is InstructionKind.CREATE_ACCOUNT:
            continue
        expected = associated_program_id if kind is InstructionKind.CREATE_ASSOCIATED_TOKEN_ACCOUNT else program_id
        if ix.program_id != expected:
            raise InstructionAssemblyError(
                f"{kind.value} targets {ix.program_id}, expected {expected}"
            )

    create_ata = entries[4][1]
    referenced = [meta.pubkey for meta in create_ata.accounts]
    if ata not in referenced or program_id not in referenced:
        raise InstructionAssemblyError(
            "Associated token account was derived for a different token program"
        )


def build_instruction_set(
    request,
    plan,
    program_id=TOKEN_2022_PROGRAM_ID,
    associated_program_id=ASSOCIATED_TOKEN_PROGRAM_ID,
):
    """Build the six instructions that create, describe and fund a new mint.

    Each one relies on state left by the previous one, so the order is fixed:
    create the account, point metadata at the mint itself, initialize the
    mint, write the metadata (which grows the account), create the payer's
    associated token account, and mint the initial supply into it.
    """
    payer = request.payer
    mint = request.mint

    if associated_program_id != ASSOCIATED_TOKEN_PROGRAM_ID:
        raise InstructionAssemblyError(
            f"Unsupported associated token program {associated_program_id}"
        )

    ata = get_associated_token_address(payer, mint, program_id)

    entries = (
        (
            InstructionKind.CREATE_ACCOUNT,
            create_account(
                CreateAccountParams(
                    from_pubkey=payer,
                    to_pubkey=mint,
                    lamports=plan.rent_lamports,
                    space=plan.allocated_space,
                    owner=program_id,
                )
            ),
        ),
        (
            InstructionKind.INITIALIZE_METADATA_POINTER,
            initialize_metadata_pointer_ix(mint, payer, mint, program_id),
        ),
        (
            InstructionKind.INITIALIZE_MINT,
            initialize_mint(
                InitializeMintParams(
                    decimals=request.decimals,
                    program_id=program_id,
                    mint=mint,
                    mint_authority=payer,
                    freeze_authority=None,
                )
            ),
        ),
        (
            InstructionKind.INITIALIZE_TOKEN_METADATA,
            initialize_token_metadata_ix(
                metadata=mint,
                update_authority=payer,
                mint=mint,
                mint_authority=payer,
                name=request.name,
                symbol=request.symbol,
                uri=request.uri,
                program_id=program_id,
            ),
        ),
        (
            InstructionKind.CREATE_ASSOCIATED_TOKEN_ACCOUNT,
            create_associated_token_account(payer, payer, mint, program_id),
        ),
        (
            InstructionKind.MINT_TO,
            mint_to(
                MintToParams(
                    program_id=program_id,
                    mint=mint,
                    dest=ata,
                    mint_authority=payer,
                    amount=request.raw_amount,
                    signers=[],
                )
            ),
        ),
    )

    _check_consistency(entries, ata, program_id, associated_program_id)
    return InstructionSet(entries=entries, associated_token_address=ata)
