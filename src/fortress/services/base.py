"""Shared plumbing for protocol services."""

import logging
from functools import wraps
from typing import Callable, Optional

from fortress.chain.base import ChainBackend, TransactionHandle
from fortress.config import Settings
from fortress.errors import ChainCallFailure, FortressError
from fortress.options import CallOptions
from fortress.registry import AssetRegistry

logger = logging.getLogger(__name__)

# Bugs, not chain failures
_INTERNAL_ERRORS = (AssertionError, AttributeError, IndexError, KeyError, NameError, TypeError)


def sdk_operation(name: str) -> Callable:
    """Decorator prefixing every error raised by an SDK entry point.

    SDK errors keep their type and gain the ``Fortress [name] | `` prefix.
    Programming errors inside the SDK propagate unchanged. Anything else comes
    from the chain backend and is wrapped in ``ChainCallFailure`` with the
    original exception as its cause.

    Usage:
        @sdk_operation("supply")
        async def supply(self, ...): ...
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except FortressError as e:
                raise e.with_operation(name) from e.__cause__
            except _INTERNAL_ERRORS:
                raise
            except Exception as e:
                logger.warning(f"{name} failed: {e}")
                raise ChainCallFailure(str(e), name) from e
        return wrapper
    return decorator


class ProtocolService:
    """Base for services that talk to protocol contracts."""

    def __init__(self, chain: ChainBackend, registry: AssetRegistry, settings: Settings):
        self.chain = chain
        self.registry = registry
        self.settings = settings

    async def _send(
        self,
        address: str,
        method: str,
        args: list,
        abi: list[dict],
        options: Optional[CallOptions] = None,
    ) -> TransactionHandle:
        """Send a transaction, waiting for its receipt if the caller asked to."""
        options = options or CallOptions()
        handle = await self.chain.send(address, method, args, abi, options.to_tx_params())
        if options.wait_for_confirmation:
            handle = await self.chain.wait_for_receipt(
                handle,
                timeout=self.settings.confirmation_timeout,
                confirmations=self.settings.confirmations,
            )
        return handle
