"""Protocol services composed by the ``Fortress`` facade."""

from fortress.services.allowance import AllowanceGate
from fortress.services.delegation import DelegationSigner
from fortress.services.fai import FaiService
from fortress.services.governance import GovernanceService
from fortress.services.markets import MarketService
from fortress.services.prices import PriceResolver

__all__ = [
    "AllowanceGate",
    "DelegationSigner",
    "FaiService",
    "GovernanceService",
    "MarketService",
    "PriceResolver",
]
