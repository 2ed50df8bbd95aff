"""Bitcoin-specific utility functions."""

import hashlib
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

# scriptPubKey.type tags reported by Bitcoin Core
SCRIPT_TYPE_PUBKEYHASH = "pubkeyhash"
SCRIPT_TYPE_NULLDATA = "nulldata"

# Omni Layer payload: OP_RETURN, push 20 bytes, "omni" (6 bytes total)
OMNI_MARKER_PREFIX = "6a146f6d6e69"
# 22 bytes: the 2 opcode bytes plus the 20 byte payload
OMNI_PAYLOAD_HEX_LENGTH = 44

BTC_PRECISION = 8
BTC_QUANTUM = Decimal(1).scaleb(-BTC_PRECISION)


def output_hash(tx_id: str, output_index: int) -> str:
    """Idempotency key of an output: hex sha256 of "<txid>:<n>"."""
    return hashlib.sha256(f"{tx_id}:{output_index}".encode()).hexdigest()


def is_omni_output(script_type: str, script_hex: str) -> bool:
    """True for null-data outputs carrying an Omni Layer payload."""
    return (script_type == SCRIPT_TYPE_NULLDATA and
            script_hex.startswith(OMNI_MARKER_PREFIX) and
            len(script_hex) == OMNI_PAYLOAD_HEX_LENGTH)


def is_payable_amount(amount: Optional[Decimal]) -> bool:
    """Finite, strictly positive and expressible in satoshis."""
    if amount is None or not amount.is_finite() or amount <= 0:
        return False
    try:
        return amount == amount.quantize(BTC_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return False


def round_btc(amount: Decimal) -> Decimal:
    """Round to native precision (8 places, half away from zero)."""
    return amount.quantize(BTC_QUANTUM, rounding=ROUND_HALF_UP)
