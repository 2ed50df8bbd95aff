"""
Bitcoin Node Adapter

Normalizes a Bitcoin Core full node into the canonical block and transaction
model used by the multi-asset indexing pipeline.
"""

__version__ = "1.0.0"
__author__ = "Bitcoin Data Engineering Team"
__description__ = "Canonical block/transaction adapter for Bitcoin Core RPC"

from btc_node_adapter.core.adapter import BitcoinAdapter
from btc_node_adapter.core.rpc_client import BitcoinRPCClient
from btc_node_adapter.models.config import AdapterConfig

__all__ = [
    "BitcoinAdapter",
    "BitcoinRPCClient",
    "AdapterConfig",
]
