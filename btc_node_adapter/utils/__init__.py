"""Utility functions and helpers."""

from btc_node_adapter.utils.logging import setup_logging
from btc_node_adapter.utils.bitcoin import (
    output_hash,
    is_omni_output,
    is_payable_amount,
    round_btc,
)

__all__ = [
    "setup_logging",
    "output_hash",
    "is_omni_output",
    "is_payable_amount",
    "round_btc",
]
