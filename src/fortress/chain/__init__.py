"""Chain RPC capability.

- ChainBackend: interface the SDK services call
- EVMChain: web3.py implementation
"""

from fortress.chain.base import ChainBackend, TransactionHandle
from fortress.chain.factory import create_chain

__all__ = [
    "ChainBackend",
    "TransactionHandle",
    "create_chain",
]
