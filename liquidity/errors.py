"""Error classes for the pool lifecycle.

Every component raises one of these to its caller. Only the orchestrator
converts them into an operator-facing outcome.
"""


class LiquidityError(Exception):
    """Base error for liquidity pool operations."""

    pass


# =============================================================================
# Provisioning
# =============================================================================


class ProvisioningError(LiquidityError):
    """Account setup failed; the whole setup action must be retried."""

    pass


class FundingError(ProvisioningError):
    """The faucet refused or failed to fund an account."""

    def __init__(self, address: str, reason: str) -> None:
        self.address = address
        self.reason = reason
        super().__init__(f"Failed to fund account {address}: {reason}")


class KeypairGenerationError(ProvisioningError):
    """Keypair generation failed (entropy source unavailable)."""

    pass


# =============================================================================
# Preconditions
# =============================================================================


class PreconditionError(LiquidityError):
    """An action was triggered before its prerequisites hold."""

    pass


class ActionUnavailable(PreconditionError):
    """The lifecycle stage does not allow this action yet (or any more)."""

    def __init__(self, action: str, reason: str) -> None:
        self.action = action
        self.reason = reason
        super().__init__(f"{action} is not available: {reason}")


class ActionInProgress(PreconditionError):
    """Another action is in flight; only one may run at a time."""

    def __init__(self, action: str, running: str | None) -> None:
        self.action = action
        self.running = running
        super().__init__(f"Cannot start {action} while {running or 'another action'} is in flight")


# =============================================================================
# Validation
# =============================================================================


class ValidationError(LiquidityError, ValueError):
    """Operator input failed validation; no network call was made.

    Subclasses ValueError so pydantic validators report it as a field error.
    """

    pass


class InvalidAssetCode(ValidationError):
    """Asset code does not fit the 1-12 alphanumeric credit asset format."""

    pass


class InvalidAmount(ValidationError):
    """Amount is not a positive decimal with at most 7 fractional digits."""

    pass


# =============================================================================
# Signing
# =============================================================================


class SignerMismatch(LiquidityError):
    """Envelope signer does not own the envelope's source account."""

    def __init__(self, source: str, signer: str) -> None:
        self.source = source
        self.signer = signer
        super().__init__(f"Signer {signer} does not match source account {source}")


# =============================================================================
# Network
# =============================================================================


class NetworkError(LiquidityError):
    """The RPC endpoint could not be reached or returned an error."""

    pass


class AccountNotFound(NetworkError):
    """The account does not exist on-ledger (not funded yet)."""

    def __init__(self, public_key: str) -> None:
        self.public_key = public_key
        super().__init__(f"Account not found: {public_key}")


class SubmissionRejected(NetworkError):
    """The ledger rejected the transaction.

    Common causes: missing trustline, insufficient balance, or a stale
    sequence number (txBAD_SEQ) after another submission consumed it.
    """

    def __init__(self, reason: str, tx_hash: str | None = None) -> None:
        self.reason = reason
        self.tx_hash = tx_hash
        super().__init__(f"Transaction rejected: {reason}")


class SubmissionTimeout(NetworkError):
    """No final status arrived before the envelope's validity window closed."""

    def __init__(self, tx_hash: str, waited: float) -> None:
        self.tx_hash = tx_hash
        self.waited = waited
        super().__init__(f"Transaction {tx_hash} not confirmed after {waited:.1f}s")
