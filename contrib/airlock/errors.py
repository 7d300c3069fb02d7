"""
Airlock SDK - Errors

Every failure is a synchronous rejection carrying a distinguishing reason.
The enclosing `Chain.atomic()` block restores state before the exception
reaches the caller.
"""


class AirlockError(Exception):
    """Operation rejected."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class AuthorizationError(AirlockError):
    """Caller lacks owner privilege."""


class RegistrationError(AirlockError):
    """Asset/pair not whitelisted, or reward pool invalid."""


class ValidationError(AirlockError):
    """Bad input: zero amount, zero address, mismatched value."""


class InsufficientFundsError(AirlockError):
    """Treasury or allocation below the required counterpart."""


class TemporalError(AirlockError):
    """Claim attempted before maturity."""


class NothingToClaimError(AirlockError, LookupError):
    """Batch index out of range."""


class TokenError(AirlockError):
    """Token transfer failed inside a collaborator contract."""


class OnchainError(Exception):
    """Reading a live contract through web3 failed."""
    def __init__(self, address: str, message: str):
        self.address = address
        self.message = message
        super().__init__(f"{address}: {message}")
