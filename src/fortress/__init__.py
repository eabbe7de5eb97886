"""Fortress protocol SDK.

Supply, redeem, borrow and repay on Fortress lending markets, delegate
governance votes and read oracle prices without hand-building calldata.
"""

from fortress.amounts import normalize, to_human
from fortress.address import checksum, is_address
from fortress.client import Fortress, create_fortress
from fortress.errors import (
    ChainCallFailure,
    FortressError,
    InvalidAddress,
    InvalidAmount,
    InvalidArgument,
    SigningUnavailable,
    UnsupportedAsset,
)
from fortress.options import CallOptions
from fortress.registry import Asset, AssetRegistry

__version__ = "0.1.0"

__all__ = [
    "Asset",
    "AssetRegistry",
    "CallOptions",
    "ChainCallFailure",
    "Fortress",
    "FortressError",
    "InvalidAddress",
    "InvalidAmount",
    "InvalidArgument",
    "SigningUnavailable",
    "UnsupportedAsset",
    "checksum",
    "create_fortress",
    "is_address",
    "normalize",
    "to_human",
]
