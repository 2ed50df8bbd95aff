"""Pytest configuration and fixtures for node adapter tests."""

import json
import threading
import pytest
from typing import Any, Callable, Dict, List
from unittest.mock import MagicMock, patch

from btc_node_adapter.models.config import AdapterConfig


MINIMUM_HEIGHT = 100000
TIP_HEIGHT = 800000

OMNI_SCRIPT_HEX = "6a146f6d6e69" + "00000000000000010000000005f5e100"


# ============================================================================
# FAKE NODE
# ============================================================================

class NodeError:
    """Handler result that the fake node reports as an RPC error."""

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message


def make_response(status_code: int, body: Any) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = body if isinstance(body, bytes) else json.dumps(body).encode()
    return response


class FakeNode:
    """Stands in for `requests.post` and answers like Bitcoin Core."""

    def __init__(self, height: int = TIP_HEIGHT):
        self.handlers: Dict[str, Any] = {
            "getblockchaininfo": lambda params: {"chain": "main", "blocks": self.height},
        }
        self.height = height
        self.calls: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def on(self, method: str, handler: Any) -> None:
        """Register a result, or a callable taking params, for `method`."""
        self.handlers[method] = handler

    def add_block(self, height: int, block_hash: str, txs: List[Dict[str, Any]]) -> None:
        """Register a block and its verbose transactions."""
        hashes = self.handlers.setdefault("_hashes", {})
        blocks = self.handlers.setdefault("_blocks", {})
        transactions = self.handlers.setdefault("_txs", {})
        hashes[height] = block_hash
        blocks[block_hash] = {"hash": block_hash, "height": height, "tx": [tx["txid"] for tx in txs]}
        for tx in txs:
            transactions[tx["txid"]] = tx

        self.on("getblockhash", lambda params: hashes.get(params[0]) or NodeError(-8, "Block height out of range"))
        self.on("getblock", lambda params: blocks.get(params[0]) or NodeError(-5, "Block not found"))
        self.on("getrawtransaction", lambda params: transactions.get(params[0]) or NodeError(
            -5, "No such mempool or blockchain transaction. Use gettransaction for wallet transactions."))

    def methods(self) -> List[str]:
        return [call["method"] for call in self.calls]

    def __call__(self, url, data=None, headers=None, auth=None, timeout=None):
        payload = json.loads(data)
        with self._lock:
            self.calls.append({
                "url": url,
                "payload": payload,
                "method": payload["method"],
                "params": payload["params"],
                "headers": headers,
                "auth": auth,
                "timeout": timeout,
            })

        handler = self.handlers.get(payload["method"])
        if handler is None:
            return make_response(404, {"result": None, "id": payload["id"],
                                       "error": {"code": -32601, "message": "Method not found"}})

        result = handler(payload["params"]) if callable(handler) else handler
        if isinstance(result, NodeError):
            return make_response(500, {"result": None, "id": payload["id"],
                                       "error": {"code": result.code, "message": result.message}})
        return make_response(200, {"result": result, "error": None, "id": payload["id"]})


# ============================================================================
# SAMPLE DATA HELPERS
# ============================================================================

def p2pkh_output(n: int, value: Any, addresses: List[str]) -> Dict[str, Any]:
    return {
        "value": value,
        "n": n,
        "scriptPubKey": {
            "hex": "76a914" + "ab" * 20 + "88ac",
            "type": "pubkeyhash",
            "addresses": addresses,
        },
    }


def nulldata_output(n: int, script_hex: str) -> Dict[str, Any]:
    return {
        "value": 0.0,
        "n": n,
        "scriptPubKey": {"hex": script_hex, "type": "nulldata"},
    }


def make_tx(txid: str, vout: List[Dict[str, Any]], confirmations: int = 6) -> Dict[str, Any]:
    return {
        "txid": txid,
        "vin": [{"txid": "ff" * 32, "vout": 0}],
        "vout": vout,
        "confirmations": confirmations,
        "locktime": 0,
    }


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def config():
    """Adapter configuration pointing at a fake node."""
    return AdapterConfig(
        bitcoin_rpc_host="bitcoin-full-node",
        bitcoin_rpc_port=8332,
        bitcoin_rpc_user="rpcuser",
        bitcoin_rpc_password="rpcpassword",
        bitcoin_rpc_timeout=15,
        minimum_height=MINIMUM_HEIGHT,
    )


@pytest.fixture
def fake_node():
    """Patch the HTTP layer with a scriptable fake node."""
    node = FakeNode()
    with patch("btc_node_adapter.core.rpc_client.requests.post", side_effect=node):
        yield node


@pytest.fixture
def adapter(config, fake_node):
    """Bootstrapped adapter; bootstrap calls are cleared."""
    from btc_node_adapter.core.adapter import BitcoinAdapter

    instance = BitcoinAdapter(config)
    fake_node.calls.clear()
    return instance
