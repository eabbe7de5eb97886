"""Signer factory.

Creates the signing backend from configuration. Without a configured private
key there is no signer: reads still work, sends and signatures raise
``SigningUnavailable``.
"""

import logging
from typing import Optional

from fortress.config import Settings, get_settings
from fortress.signing.base import SignerBackend

logger = logging.getLogger(__name__)

_signer_instance: Optional[SignerBackend] = None


def get_signer(settings: Optional[Settings] = None) -> Optional[SignerBackend]:
    """Get the configured signer instance.

    Returns a singleton for the default settings. Passing explicit settings
    always builds a fresh backend.
    """
    global _signer_instance

    if settings is None:
        if _signer_instance is not None:
            return _signer_instance
        _signer_instance = _create_signer(get_settings())
        return _signer_instance

    return _create_signer(settings)


def _create_signer(settings: Settings) -> Optional[SignerBackend]:
    if not settings.has_signer:
        logger.info("No private key configured, running read-only")
        return None

    from fortress.signing.local import LocalSigner

    logger.info("Initializing local signer")
    return LocalSigner(settings.private_key)


def reset_signer():
    """Reset the signer instance (for testing)."""
    global _signer_instance
    _signer_instance = None
