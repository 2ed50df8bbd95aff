"""Data models and configuration."""

from btc_node_adapter.models.config import AdapterConfig
from btc_node_adapter.models.blockchain import (
    BlockHash,
    BlockHeight,
    CanonicalAsset,
    CanonicalBlock,
    CanonicalTransaction,
    RawBlock,
    RawTransaction,
)

__all__ = [
    "AdapterConfig",
    "BlockHash",
    "BlockHeight",
    "CanonicalAsset",
    "CanonicalBlock",
    "CanonicalTransaction",
    "RawBlock",
    "RawTransaction",
]
