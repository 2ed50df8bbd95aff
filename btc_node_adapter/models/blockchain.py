"""Blockchain data models for the Bitcoin node adapter.

Raw* classes mirror the verbose JSON returned by Bitcoin Core RPC.
Canonical* classes are the cross-chain shape handed to the indexing pipeline.
"""

from decimal import Decimal, InvalidOperation
from typing import List, Optional, Dict, Any, Union
from dataclasses import dataclass, field, asdict


@dataclass(frozen=True)
class ScriptPubKey:
    """Locking script of an output."""
    type: str
    hex: str
    addresses: List[str] = field(default_factory=list)

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "ScriptPubKey":
        addresses = data.get('addresses')
        if addresses is None:
            # Bitcoin Core >= 22 reports a single `address` instead
            address = data.get('address')
            addresses = [address] if address else []
        return cls(
            type=data.get('type', ''),
            hex=data.get('hex', ''),
            addresses=list(addresses),
        )


@dataclass(frozen=True)
class RawInput:
    """Transaction input reference."""
    txid: Optional[str]
    vout: Optional[int]
    coinbase: Optional[str] = None

    @property
    def is_coinbase(self) -> bool:
        return self.coinbase is not None

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "RawInput":
        return cls(
            txid=data.get('txid'),
            vout=data.get('vout'),
            coinbase=data.get('coinbase'),
        )


@dataclass(frozen=True)
class RawOutput:
    """Transaction output. `value` is None when the wire value is not a number."""
    value: Optional[Decimal]
    n: int
    script_pub_key: ScriptPubKey

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "RawOutput":
        return cls(
            value=_to_decimal(data.get('value')),
            n=int(data['n']),
            script_pub_key=ScriptPubKey.from_rpc(data.get('scriptPubKey') or {}),
        )


@dataclass(frozen=True)
class RawTransaction:
    """Raw transaction data from Bitcoin Core RPC."""
    txid: str
    vin: List[RawInput]
    vout: List[RawOutput]
    confirmations: int = 0
    blockhash: Optional[str] = None
    locktime: int = 0

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "RawTransaction":
        return cls(
            txid=data['txid'],
            vin=[RawInput.from_rpc(vin) for vin in data.get('vin', [])],
            vout=[RawOutput.from_rpc(vout) for vout in data.get('vout', [])],
            confirmations=int(data.get('confirmations', 0)),
            blockhash=data.get('blockhash'),
            locktime=int(data.get('locktime', 0)),
        )


@dataclass(frozen=True)
class RawBlock:
    """Raw block header data from Bitcoin Core RPC (verbosity 1)."""
    hash: str
    height: int
    tx: List[str]

    @classmethod
    def from_rpc(cls, data: Dict[str, Any]) -> "RawBlock":
        return cls(
            hash=data['hash'],
            height=int(data['height']),
            tx=list(data.get('tx', [])),
        )


@dataclass(frozen=True)
class CanonicalAsset:
    """Native currency descriptor."""
    chain_id: str
    asset_id: str
    chain_asset_key: str
    symbol: str
    name: str
    precision: int


@dataclass
class CanonicalTransaction:
    """A single payment event extracted from a block."""
    asset: CanonicalAsset
    transaction_hash: str
    sender: str
    receiver: str
    memo: str
    block_hash: str
    block_number: int
    output_index: int
    output_hash: str
    confirmations: int
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['amount'] = str(self.amount)
        return data


@dataclass
class CanonicalBlock:
    """Block with its extracted payment events, in node order."""
    block_hash: str
    block_number: int
    transactions: List[CanonicalTransaction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'block_hash': self.block_hash,
            'block_number': self.block_number,
            'transactions': [tx.to_dict() for tx in self.transactions],
        }


@dataclass(frozen=True)
class BlockHeight:
    """Block identifier by height."""
    height: int


@dataclass(frozen=True)
class BlockHash:
    """Block identifier by hash."""
    hash: str


BlockIdentifier = Union[BlockHeight, BlockHash]


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
