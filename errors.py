# errors.py

import re
from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    EMPTY_NAME = "empty_name"
    INVALID_AMOUNT = "invalid_amount"
    WALLET_NOT_CONNECTED = "wallet_not_connected"
    SIZING = "sizing"
    ASSEMBLY = "assembly"
    SUBMISSION = "submission"
    CONFIRMATION = "confirmation"
    BUSY = "busy"

    @property
    def is_validation(self):
        return self in (
            FailureKind.EMPTY_NAME,
            FailureKind.INVALID_AMOUNT,
            FailureKind.WALLET_NOT_CONNECTED,
        )


class MintError(Exception):
    """Base for every failure the create-and-mint workflow can report."""

    kind = FailureKind.SUBMISSION


class ValidationError(MintError):
    pass


class EmptyName(ValidationError):
    kind = FailureKind.EMPTY_NAME

    def __init__(self, message="Enter a token name"):
        super().__init__(message)


class InvalidAmount(ValidationError):
    kind = FailureKind.INVALID_AMOUNT

    def __init__(self, message="Enter a valid amount (a positive number)"):
        super().__init__(message)


class WalletNotConnected(ValidationError):
    kind = FailureKind.WALLET_NOT_CONNECTED

    def __init__(self, message="Connect a wallet"):
        super().__init__(message)


class SizingError(MintError):
    kind = FailureKind.SIZING


class InstructionAssemblyError(MintError):
    kind = FailureKind.ASSEMBLY


class SubmissionError(MintError):
    kind = FailureKind.SUBMISSION


class ConfirmationError(MintError):
    kind = FailureKind.CONFIRMATION


class WorkflowBusy(MintError):
    kind = FailureKind.BUSY

    def __init__(self, message="A token is already being created, wait for it to finish"):
        super().__init__(message)


# --- Turning arbitrary failures into something a person can read ---

UNKNOWN_ERROR_MESSAGE = "Unknown error"
WALLET_ENVIRONMENT_MESSAGE = (
    "Wallet or browser environment error. Refresh the page, try another "
    "browser, or reconnect your wallet."
)

_WALLET_ENVIRONMENT_RE = re.compile(
    r"Cannot read properties of undefined \(reading 'includes'\)", re.IGNORECASE
)
# "custom program error: 0x1" is the token program's InsufficientFunds.
_INSUFFICIENT_FUNDS_RE = re.compile(r"insufficient|\b0x1\b", re.IGNORECASE)


class ErrorCategory(str, Enum):
    INSUFFICIENT_FUNDS = "insufficient_funds"
    WALLET_ENVIRONMENT = "wallet_environment"
    OTHER = "other"


@dataclass(frozen=True)
class ClassifiedError:
    category: ErrorCategory
    message: str


def error_message(err):
    """Extract a readable message from any failure value, never an empty one."""
    if err is None:
        return UNKNOWN_ERROR_MESSAGE
    if isinstance(err, str):
        return err or UNKNOWN_ERROR_MESSAGE
    if isinstance(err, BaseException):
        return str(err) or type(err).__name__

    if isinstance(err, dict):
        msg = err.get("message")
    else:
        try:
            msg = getattr(err, "message", None)
        except Exception:
            msg = None
    if isinstance(msg, str) and msg:
        return msg

    return str(err) or UNKNOWN_ERROR_MESSAGE


def classify_error(err, faucet_url):
    msg = error_message(err)
    if _WALLET_ENVIRONMENT_RE.search(msg):
        return ClassifiedError(ErrorCategory.WALLET_ENVIRONMENT, WALLET_ENVIRONMENT_MESSAGE)
    if _INSUFFICIENT_FUNDS_RE.search(msg):
        return ClassifiedError(
            ErrorCategory.INSUFFICIENT_FUNDS,
            f"{msg} The app runs on Devnet: get SOL at {faucet_url}",
        )
    return ClassifiedError(ErrorCategory.OTHER, msg)


def describe_error(err, faucet_url):
    return classify_error(err, faucet_url).message
