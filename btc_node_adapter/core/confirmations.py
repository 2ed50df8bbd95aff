"""Transaction confirmation lookup."""

import structlog

from btc_node_adapter.core.exceptions import RPCError, RPC_INVALID_ADDRESS_OR_KEY
from btc_node_adapter.core.rpc_client import BitcoinRPCClient

logger = structlog.get_logger(__name__)


class ConfirmationTracker:
    """Confirmation counts, treating unknown transactions as unconfirmed."""

    def __init__(self, rpc_client: BitcoinRPCClient):
        self.rpc_client = rpc_client
        self.logger = logger.bind(component="confirmation_tracker")

    def get_confirmations(self, tx_hash: str) -> int:
        try:
            tx = self.rpc_client.get_raw_transaction(tx_hash)
        except RPCError as e:
            if e.code == RPC_INVALID_ADDRESS_OR_KEY:
                self.logger.debug("Transaction not found", tx_hash=tx_hash)
                return 0
            raise
        return int(tx.get('confirmations', 0))
