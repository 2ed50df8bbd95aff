"""Bitcoin Core RPC client for blockchain data access."""

import json
import time
from typing import Dict, Any, Optional, List
from decimal import Decimal
import requests
import structlog

from btc_node_adapter.models.config import AdapterConfig
from btc_node_adapter.core.exceptions import DecodeError, RPCError, TransportError

logger = structlog.get_logger(__name__)


class BitcoinRPCClient:
    """Bitcoin Core JSON-RPC client.

    Every call opens its own connection and carries a timeout. Nothing is
    retried here; retry policy belongs to the caller.
    """

    def __init__(self, config: AdapterConfig):
        self.config = config
        self.rpc_url = config.bitcoin_rpc_url
        self.auth = (config.bitcoin_rpc_user, config.bitcoin_rpc_password)
        self.headers = {
            'Content-Type': 'application/json',
            'Connection': 'close',
            'User-Agent': 'btc-node-adapter/1.0.0'
        }
        self.logger = logger.bind(component="rpc_client")

        self.logger.info("Bitcoin RPC client initialized",
                         host=config.bitcoin_rpc_host,
                         port=config.bitcoin_rpc_port)

    def call(self, method: str, params: List[Any] = None,
             timeout: Optional[float] = None) -> bytes:
        """Send one JSON-RPC request and return the raw response body."""
        if params is None:
            params = []

        payload = {
            "method": method,
            "params": params,
            "id": time.time_ns(),
            "jsonrpc": "2.0"
        }

        try:
            response = requests.post(
                self.rpc_url,
                data=json.dumps(payload),
                headers=self.headers,
                auth=self.auth,
                timeout=timeout if timeout is not None else self.config.bitcoin_rpc_timeout
            )
        except requests.RequestException as e:
            self.logger.warning("RPC transport failed", method=method, error=str(e))
            raise TransportError("RPC request failed", method=method, original_error=e) from e

        body = response.content
        if not 200 <= response.status_code < 300:
            # Bitcoin Core answers RPC errors with HTTP 500/404 and a JSON body
            self._raise_for_status(method, response.status_code, body)
        return body

    def request(self, method: str, params: List[Any] = None,
                timeout: Optional[float] = None) -> Any:
        """Call `method` and return the decoded `result` member."""
        body = self.call(method, params, timeout=timeout)
        envelope = self._decode(method, body)
        self._raise_for_error(method, envelope)
        return envelope.get('result')

    def _decode(self, method: str, body: bytes,
                status_code: Optional[int] = None) -> Dict[str, Any]:
        try:
            envelope = json.loads(body, parse_float=Decimal)
        except (ValueError, UnicodeDecodeError) as e:
            raise DecodeError("Malformed RPC response body", method=method,
                              status_code=status_code, original_error=e) from e
        if not isinstance(envelope, dict):
            raise DecodeError("RPC response is not an object", method=method,
                              status_code=status_code)
        return envelope

    def _raise_for_error(self, method: str, envelope: Dict[str, Any]) -> None:
        error = envelope.get('error')
        if error is None:
            return
        if not isinstance(error, dict):
            raise DecodeError("RPC error member is not an object", method=method)
        try:
            code = int(error.get('code', -1))
        except (TypeError, ValueError) as e:
            raise DecodeError("RPC error code is not an integer", method=method,
                              original_error=e) from e
        message = str(error.get('message', 'Unknown RPC error'))
        self.logger.debug("RPC error", method=method, code=code, message=message)
        raise RPCError(code, message, method=method)

    def _raise_for_status(self, method: str, status_code: int, body: bytes) -> None:
        try:
            envelope = self._decode(method, body, status_code=status_code)
        except DecodeError:
            self.logger.warning("RPC bad status", method=method, status_code=status_code)
            raise DecodeError(f"Unexpected HTTP status {status_code}", method=method,
                              status_code=status_code)
        self._raise_for_error(method, envelope)
        raise DecodeError(f"Unexpected HTTP status {status_code}", method=method,
                          status_code=status_code)

    def get_blockchain_info(self) -> Dict[str, Any]:
        """Get blockchain information."""
        return self.request("getblockchaininfo")

    def get_block_hash(self, height: int) -> str:
        """Get block hash by height."""
        return self.request("getblockhash", [height])

    def get_block(self, block_hash: str, verbosity: int = 1) -> Dict[str, Any]:
        """
        Get block data by hash.

        Args:
            block_hash: Block hash
            verbosity: 0=hex, 1=json with txids, 2=json with tx details
        """
        return self.request("getblock", [block_hash, verbosity])

    def get_raw_transaction(self, tx_hash: str) -> Dict[str, Any]:
        """Get decoded (verbose) transaction data."""
        return self.request("getrawtransaction", [tx_hash, 1])

    def estimate_smart_fee(self, conf_target: int) -> Dict[str, Any]:
        """Estimate fee rate (BTC/kvB) for confirmation within `conf_target` blocks."""
        return self.request("estimatesmartfee", [conf_target])

    def send_raw_transaction(self, raw_hex: str) -> str:
        """Submit a signed transaction, returning its txid."""
        return self.request("sendrawtransaction", [raw_hex])
