"""Core node adapter components."""

from btc_node_adapter.core.adapter import BitcoinAdapter
from btc_node_adapter.core.rpc_client import BitcoinRPCClient
from btc_node_adapter.core.block_fetcher import BlockFetcher
from btc_node_adapter.core.transaction_parser import TransactionParser
from btc_node_adapter.core.fee_estimator import FeeEstimator
from btc_node_adapter.core.confirmations import ConfirmationTracker
from btc_node_adapter.core.exceptions import (
    NodeAdapterError,
    TransportError,
    DecodeError,
    RPCError,
    ValidationError,
)

__all__ = [
    "BitcoinAdapter",
    "BitcoinRPCClient",
    "BlockFetcher",
    "TransactionParser",
    "FeeEstimator",
    "ConfirmationTracker",
    "NodeAdapterError",
    "TransportError",
    "DecodeError",
    "RPCError",
    "ValidationError",
]
