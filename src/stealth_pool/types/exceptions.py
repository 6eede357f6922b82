"""
Exception hierarchy for stealth payments and the commitment pool.

Errors fall into three families:

- Pool errors abort an on-chain style transition. The pool never leaves a
  partial update behind when one of these is raised.
- Key and note errors are raised by the off-chain engines. Their messages
  carry a short reason and never any key material.
- Network errors wrap transient I/O failures after retries are exhausted.
"""

from __future__ import annotations


class StealthPoolError(Exception):
    """
    Base exception for every error raised by this package.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


# =================================================================
# Pool errors
# =================================================================


class PoolError(StealthPoolError):
    """Base class for errors that revert a deposit or withdrawal."""


class InvalidFieldElement(PoolError):
    """
    Raised when a value is not a canonical BN254 scalar field element.

    Attributes:
        name: Which input was rejected (e.g. "commitment", "root").
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} is not a valid field element")


class TreeFull(PoolError):
    """
    Raised when the commitment tree has no free leaves left.

    Attributes:
        capacity: Total number of leaves the tree supports.
    """

    def __init__(self, capacity: int) -> None:
        self.capacity = capacity
        super().__init__(f"Merkle tree is full ({capacity} leaves)")


class UnknownRoot(PoolError):
    """Raised when a withdrawal references a root outside the root history."""

    def __init__(self) -> None:
        super().__init__("Cannot find the Merkle root in the root history")


class NullifierAlreadyUsed(PoolError):
    """Raised when a nullifier hash has already been spent."""

    def __init__(self) -> None:
        super().__init__("The note has already been spent")


class InvalidProof(PoolError):
    """Raised when the zero-knowledge proof does not verify."""

    def __init__(self, detail: str = "proof verification failed") -> None:
        self.detail = detail
        super().__init__(f"Invalid withdraw proof: {detail}")


class InvalidRelayerFee(PoolError):
    """
    Raised when the relayer fee exceeds the pool denomination.

    Attributes:
        fee: The requested relayer fee.
        denomination: The pool's fixed deposit amount.
    """

    def __init__(self, fee: int, denomination: int) -> None:
        self.fee = fee
        self.denomination = denomination
        super().__init__(f"Relayer fee {fee} exceeds denomination {denomination}")


class PoolNotConfiguredForMode(PoolError):
    """
    Raised when a withdrawal path is requested that the pool does not serve.

    Attributes:
        requested: The dispatch mode the caller asked for.
        configured: The dispatch mode the pool was deployed with.
    """

    def __init__(self, requested: str, configured: str) -> None:
        self.requested = requested
        self.configured = configured
        super().__init__(f"Pool is configured for {configured}, not {requested}")


class DispatchFailed(PoolError):
    """Raised when the bridge dispatcher rejects or fails the payout call."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Bridge dispatch failed: {reason}")


class ReentrantCall(PoolError):
    """
    Raised when a pool entry point is entered while another is still running.

    Attributes:
        entry_point: Name of the entry point that was re-entered.
    """

    def __init__(self, entry_point: str) -> None:
        self.entry_point = entry_point
        super().__init__(f"Reentrant call into {entry_point}")


class InsufficientBalance(PoolError):
    """Raised when a token transfer exceeds the sender's balance."""

    def __init__(self, account: str, needed: int, available: int) -> None:
        self.account = account
        self.needed = needed
        self.available = available
        super().__init__(f"Insufficient balance for {account}: need {needed}, have {available}")


class InsufficientAllowance(PoolError):
    """Raised when a `transfer_from` exceeds the approved allowance."""

    def __init__(self, owner: str, spender: str, needed: int, available: int) -> None:
        self.owner = owner
        self.spender = spender
        self.needed = needed
        self.available = available
        super().__init__(
            f"Insufficient allowance from {owner} to {spender}: need {needed}, have {available}"
        )


# =================================================================
# Off-chain key and note errors
# =================================================================


class InvalidKey(StealthPoolError):
    """
    Raised when a public or private key is malformed.

    Attributes:
        reason: Why the key was rejected. Never contains the key itself.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid key: {reason}")


class CommitmentNotFound(StealthPoolError):
    """Raised when a note's commitment is not among the pool's deposit leaves."""

    def __init__(self) -> None:
        super().__init__("Commitment not found in pool deposits")


class RootMismatch(StealthPoolError):
    """Raised when the locally rebuilt tree root disagrees with the pool."""

    def __init__(self, local_root: int, pool_root: int) -> None:
        self.local_root = local_root
        self.pool_root = pool_root
        super().__init__(f"Merkle root mismatch: local={local_root} pool={pool_root}")


class NoteNotFound(StealthPoolError):
    """Raised when a note is requested from a store that does not hold it."""

    def __init__(self, commitment: int) -> None:
        self.commitment = commitment
        super().__init__(f"No note stored for commitment {commitment}")


# =================================================================
# Network errors
# =================================================================


class RpcError(StealthPoolError):
    """
    Raised when a node answers a JSON-RPC request with an error object.

    Attributes:
        code: JSON-RPC error code, when the node supplied one.
    """

    def __init__(self, message: str, code: int | None = None) -> None:
        self.code = code
        super().__init__(message if code is None else f"{message} (code {code})")


class RetryExhausted(StealthPoolError):
    """
    Raised when a transient operation keeps failing past its retry budget.

    Attributes:
        attempts: Number of attempts that were made.
        last_error: The exception raised by the final attempt.
    """

    def __init__(self, operation: str, attempts: int, last_error: BaseException) -> None:
        self.operation = operation
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"{operation} failed after {attempts} attempts: {last_error}")
