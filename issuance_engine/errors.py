"""Engine exceptions.

Hierarchy:
- EngineError: recoverable, surfaced to the caller with full rollback
  - ValidationError: bad input, rejected before any mutation
  - TransferError: a token transfer or mint did not succeed
  - SolvencyError: health factor at or below the minimum
  - LiquidationError: liquidation pre/post-condition failed
  - OracleError: stale, non-positive or unreachable price
  - AccessError: unauthorized or reentrant caller
- LedgerInvariantError / ArithmeticOverflow: programming errors
"""
from __future__ import annotations

from typing import Any


class EngineError(Exception):
    """Base class for every recoverable engine failure."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class ValidationError(EngineError):
    pass


class AmountMustBePositive(ValidationError):
    pass


class UnsupportedAsset(ValidationError):
    pass


class LengthMismatch(ValidationError):
    pass


class InsufficientCollateral(ValidationError):
    pass


class BurnExceedsDebt(ValidationError):
    pass


class NotZeroAddress(ValidationError):
    pass


class BurnAmountExceedsBalance(ValidationError):
    pass


# ---------------------------------------------------------------------------
# Transfers
# ---------------------------------------------------------------------------


class TransferError(EngineError):
    pass


class TransferFailed(TransferError):
    pass


class MintFailed(TransferError):
    pass


# ---------------------------------------------------------------------------
# Solvency / liquidation
# ---------------------------------------------------------------------------


class SolvencyError(EngineError):
    pass


class HealthFactorBelowMinimum(SolvencyError):
    pass


class LiquidationError(EngineError):
    pass


class HealthFactorOK(LiquidationError):
    pass


class HealthFactorNotImproved(LiquidationError):
    pass


# ---------------------------------------------------------------------------
# Oracle
# ---------------------------------------------------------------------------


class OracleError(EngineError):
    pass


class StalePrice(OracleError):
    pass


class InvalidPrice(OracleError):
    pass


class OracleUnavailable(OracleError):
    pass


# ---------------------------------------------------------------------------
# Access
# ---------------------------------------------------------------------------


class AccessError(EngineError):
    pass


class Unauthorized(AccessError):
    pass


class ReentrantCall(AccessError):
    pass


# ---------------------------------------------------------------------------
# Programming errors (not part of the recoverable taxonomy)
# ---------------------------------------------------------------------------


class LedgerInvariantError(RuntimeError):
    """The ledger was asked to do something callers must never request."""


class ArithmeticOverflow(ArithmeticError):
    """A fixed-point result does not fit in 256 bits."""
