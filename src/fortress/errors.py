"""Exceptions raised by the Fortress SDK.

Validation errors are raised before anything is sent to the chain. Once a
transaction has been submitted nothing is rolled back: an approval that was
confirmed before a failing mint or repay stays on-chain.
"""

from typing import Optional


class FortressError(Exception):
    """Base exception for all SDK errors.

    When ``operation`` is given the message is prefixed the same way for every
    entry point, e.g. ``Fortress [supply] | Argument `asset` cannot be supplied.``
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        self.reason = message
        super().__init__(format_message(message, operation))

    def with_operation(self, operation: str) -> "FortressError":
        """Return a copy of this error annotated with an operation prefix."""
        if self.operation:
            return self
        err = type(self)(self.reason, operation)
        err.__cause__ = self.__cause__
        return err


class InvalidArgument(FortressError):
    """Wrong type or shape for an amount, asset symbol or address."""
    pass


class InvalidAmount(InvalidArgument):
    """Amount is not a finite, non-negative number."""
    pass


class InvalidAddress(InvalidArgument):
    """Value is not a 20-byte hex address."""
    pass


class UnsupportedAsset(InvalidArgument):
    """Symbol is not in the registry for the active network."""
    pass


class SigningUnavailable(FortressError):
    """The active account cannot produce signatures."""
    pass


class ChainCallFailure(FortressError):
    """The chain backend reported a revert, timeout or network error."""
    pass


def format_message(message: str, operation: Optional[str] = None) -> str:
    """Prefix a message with the SDK operation name."""
    if not operation:
        return message
    return f"Fortress [{operation}] | {message}"
