"""Fee rate estimation."""

from decimal import Decimal, InvalidOperation
import structlog

from btc_node_adapter.core.exceptions import ValidationError
from btc_node_adapter.core.rpc_client import BitcoinRPCClient
from btc_node_adapter.utils.bitcoin import round_btc

logger = structlog.get_logger(__name__)

FEE_CONFIRMATION_TARGET = 2
FEE_SAFETY_MULTIPLIER = Decimal("2")
# BTC per kvB
MINIMUM_FEE_RATE = Decimal("0.0001")


class FeeEstimator:
    """Quote a fee rate with a safety margin over the node's estimate."""

    def __init__(self, rpc_client: BitcoinRPCClient):
        self.rpc_client = rpc_client
        self.logger = logger.bind(component="fee_estimator")

    def estimate_fee(self) -> Decimal:
        """
        Doubled `estimatesmartfee` rate for a 2 block target.

        The result is never below MINIMUM_FEE_RATE and is rounded to
        8 decimal places.
        """
        result = self.rpc_client.estimate_smart_fee(FEE_CONFIRMATION_TARGET) or {}
        raw_rate = result.get('feerate')

        try:
            rate = Decimal(str(raw_rate)) if raw_rate is not None else None
        except InvalidOperation:
            rate = None

        if rate is None or not rate.is_finite() or rate <= 0:
            self.logger.warning("Invalid fee estimate",
                                feerate=str(raw_rate),
                                errors=result.get('errors'))
            raise ValidationError(f"Bitcoin EstimateSmartFee invalid {raw_rate} {result.get('errors', [])}",
                                  method="estimatesmartfee")

        fee = rate * FEE_SAFETY_MULTIPLIER
        if fee < MINIMUM_FEE_RATE:
            fee = MINIMUM_FEE_RATE

        fee = round_btc(fee)
        self.logger.debug("Estimated fee", feerate=str(rate), fee=str(fee))
        return fee
