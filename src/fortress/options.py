"""Per-call options shared by every SDK operation."""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from fortress.errors import InvalidArgument


class CallOptions(BaseModel):
    """Options for one SDK call.

    ``mantissa`` tells the SDK how to read amounts. The gas fields are passed
    to every transaction the call sends, including an approval issued before
    the main transaction.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    mantissa: bool = Field(
        default=False, description="Amounts are already scaled up by the asset decimals"
    )
    value: Optional[int] = Field(
        default=None, ge=0, description="Native asset amount in wei (set by the SDK)"
    )
    gas_limit: Optional[int] = Field(default=None, gt=0, description="Gas limit override")
    gas_price: Optional[int] = Field(default=None, ge=0, description="Legacy gas price in wei")
    max_fee_per_gas: Optional[int] = Field(default=None, ge=0, description="EIP-1559 max fee")
    max_priority_fee_per_gas: Optional[int] = Field(
        default=None, ge=0, description="EIP-1559 priority fee"
    )
    nonce: Optional[int] = Field(default=None, ge=0, description="Explicit account nonce")
    wait_for_confirmation: bool = Field(
        default=False, description="Wait for the main transaction receipt before returning"
    )

    @classmethod
    def coerce(cls, options: Union["CallOptions", dict, None]) -> "CallOptions":
        """Validate caller supplied options at the SDK boundary."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, dict):
            try:
                return cls(**options)
            except ValidationError as e:
                raise InvalidArgument(f"Invalid call options: {e}") from None
        raise InvalidArgument(
            f"Options must be a CallOptions or dict, got {type(options).__name__}."
        )

    def with_value(self, value: int) -> "CallOptions":
        return self.model_copy(update={"value": value})

    def to_tx_params(self) -> dict[str, Any]:
        """Transaction overrides in web3 field names."""
        params: dict[str, Any] = {}
        if self.value is not None:
            params["value"] = self.value
        if self.gas_limit is not None:
            params["gas"] = self.gas_limit
        if self.gas_price is not None:
            params["gasPrice"] = self.gas_price
        if self.max_fee_per_gas is not None:
            params["maxFeePerGas"] = self.max_fee_per_gas
        if self.max_priority_fee_per_gas is not None:
            params["maxPriorityFeePerGas"] = self.max_priority_fee_per_gas
        if self.nonce is not None:
            params["nonce"] = self.nonce
        return params
