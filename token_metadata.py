# token_metadata.py
#
# Token-2022 mint sizing and the inline token-metadata record.

import logging

from construct import Bytes, Int32ul, PascalString, PrefixedArray, Struct

from errors import SizingError, SubmissionError
from models import AccountSizePlan

logger = logging.getLogger(__name__)

# Mint / account layout constants of the token program.
MINT_SIZE = 82
ACCOUNT_SIZE = 165
MULTISIG_SIZE = 355
ACCOUNT_TYPE_SIZE = 1
TYPE_SIZE = 2
LENGTH_SIZE = 2
TLV_HEADER_SIZE = TYPE_SIZE + LENGTH_SIZE

# Extension type ids, as numbered by Token-2022.
METADATA_POINTER = 18
TOKEN_METADATA = 19

# Fixed extension payloads: OptionalNonZeroPubkey authority + metadata address.
_FIXED_EXTENSION_LENGTHS = {
    METADATA_POINTER: 64,
}
_VARIABLE_LENGTH_EXTENSIONS = {TOKEN_METADATA}

_NO_PUBKEY = bytes(32)

BorshString = PascalString(Int32ul, "utf8")

TokenMetadataLayout = Struct(
    "update_authority" / Bytes(32),
    "mint" / Bytes(32),
    "name" / BorshString,
    "symbol" / BorshString,
    "uri" / BorshString,
    "additional_metadata" / PrefixedArray(
        Int32ul,
        Struct("key" / BorshString, "value" / BorshString),
    ),
)


def pack_token_metadata(update_authority, mint, name, symbol, uri, additional_metadata=()):
    """Serialize a token-metadata record the way the program stores it on the mint."""
    try:
        return TokenMetadataLayout.build(
            dict(
                update_authority=bytes(update_authority) if update_authority is not None else _NO_PUBKEY,
                mint=bytes(mint),
                name=name,
                symbol=symbol,
                uri=uri,
                additional_metadata=[dict(key=k, value=v) for k, v in additional_metadata],
            )
        )
    except Exception as exc:
        raise SizingError(f"Could not serialize token metadata: {exc}") from exc


def get_mint_len(extensions, variable_lengths=None):
    """Account size of a Token-2022 mint carrying the given extensions.

    Fixed-size extensions are listed in ``extensions``. Variable-length ones
    (token metadata) are sized through ``variable_lengths`` only, keyed by
    extension type.
    """
    variable_lengths = variable_lengths or {}
    fixed = list(dict.fromkeys(extensions))
    for extension in fixed:
        if extension in _VARIABLE_LENGTH_EXTENSIONS:
            raise SizingError(f"Extension {extension} needs an explicit length")
        if extension not in _FIXED_EXTENSION_LENGTHS:
            raise SizingError(f"Unsupported mint extension: {extension}")
    for extension in variable_lengths:
        if extension not in _VARIABLE_LENGTH_EXTENSIONS:
            raise SizingError(f"Extension {extension} has a fixed length")

    if not fixed and not variable_lengths:
        return MINT_SIZE

    length = ACCOUNT_SIZE + ACCOUNT_TYPE_SIZE
    for extension in fixed:
        length += TLV_HEADER_SIZE + _FIXED_EXTENSION_LENGTHS[extension]
    for size in variable_lengths.values():
        length += TLV_HEADER_SIZE + size

    # A mint must never be mistaken for a multisig account.
    if length == MULTISIG_SIZE:
        return length + TYPE_SIZE
    return length


def plan_account_size(client, request):
    """Work out what to allocate for the mint and how much rent to pre-fund.

    The account is created with room for the metadata pointer only. The
    metadata-initialize instruction grows it later, so rent is paid up front
    for the final size.
    """
    metadata = pack_token_metadata(
        update_authority=request.payer,
        mint=request.mint,
        name=request.name,
        symbol=request.symbol,
        uri=request.uri,
    )
    allocated_space = get_mint_len([METADATA_POINTER])
    final_space = get_mint_len([METADATA_POINTER], {TOKEN_METADATA: len(metadata)})

    try:
        rent_lamports = client.get_minimum_balance_for_rent_exemption(final_space).value
    except Exception as exc:
        raise SubmissionError(f"Could not fetch rent exemption: {exc}") from exc

    logger.debug(
        "mint %s: allocate %d bytes, fund %d lamports for %d bytes (metadata %d)",
        request.mint, allocated_space, rent_lamports, final_space, len(metadata),
    )
    return AccountSizePlan(
        allocated_space=allocated_space,
        rent_lamports=rent_lamports,
        metadata_length=len(metadata),
        final_space=final_space,
    )
