"""Chain backend factory."""

import logging
from typing import Optional

from fortress.chain.base import ChainBackend
from fortress.config import Settings, get_settings
from fortress.signing.base import SignerBackend
from fortress.signing.factory import get_signer

logger = logging.getLogger(__name__)


def create_chain(
    settings: Optional[Settings] = None,
    signer: Optional[SignerBackend] = None,
) -> ChainBackend:
    """Create the web3 backend for the configured RPC endpoint.

    Args:
        settings: SDK settings (defaults to environment)
        signer: Signer for sends; the configured one when omitted
    """
    from fortress.chain.evm import EVMChain

    settings = settings or get_settings()
    if signer is None:
        signer = get_signer(settings)

    logger.info(f"Connecting to {settings.rpc_url} (chain {settings.chain_id})")
    return EVMChain(settings.rpc_url, signer=signer, poll_interval=settings.poll_interval)
