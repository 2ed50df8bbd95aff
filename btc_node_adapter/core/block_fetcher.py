"""Block lookup and canonical block assembly."""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Union
import structlog

from btc_node_adapter.core.exceptions import DecodeError, ValidationError
from btc_node_adapter.core.rpc_client import BitcoinRPCClient
from btc_node_adapter.core.transaction_parser import TransactionParser
from btc_node_adapter.models.blockchain import (
    BlockHash, BlockHeight, BlockIdentifier, CanonicalBlock, RawBlock, RawTransaction
)

logger = structlog.get_logger(__name__)


class BlockFetcher:
    """Resolve blocks on the node and assemble canonical blocks."""

    def __init__(self, rpc_client: BitcoinRPCClient, tx_parser: TransactionParser,
                 minimum_height: int, fetch_workers: int = 1):
        self.rpc_client = rpc_client
        self.tx_parser = tx_parser
        self.minimum_height = minimum_height
        self.fetch_workers = fetch_workers
        self.logger = logger.bind(component="block_fetcher")

    def get_height(self) -> int:
        """Current tip height; rejects a node below the minimum height."""
        info = self.rpc_client.get_blockchain_info()
        try:
            height = int(info['blocks'])
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError("Unexpected getblockchaininfo result",
                              method="getblockchaininfo", original_error=e) from e
        if height < self.minimum_height:
            self.logger.warning("Node height below minimum",
                                height=height,
                                minimum_height=self.minimum_height)
            raise ValidationError(f"Bitcoin block height too small {height}",
                                  method="getblockchaininfo")
        return height

    def get_block(self, identifier: Union[BlockIdentifier, int, str]) -> CanonicalBlock:
        """
        Fetch a block by tagged identifier, height, or string.

        A string that parses as an integer strictly above the minimum height
        is treated as a height, anything else as a hash. A hash made only of
        digits that happens to exceed the threshold is therefore misrouted;
        pass BlockHash explicitly to avoid that.
        """
        if isinstance(identifier, BlockHeight):
            return self.get_block_by_height(identifier.height)
        if isinstance(identifier, BlockHash):
            return self.get_block_by_hash(identifier.hash)
        if isinstance(identifier, int) and not isinstance(identifier, bool):
            return self.get_block_by_height(identifier)
        if isinstance(identifier, str):
            try:
                height = int(identifier)
            except ValueError:
                height = 0
            if height > self.minimum_height:
                return self.get_block_by_height(height)
            return self.get_block_by_hash(identifier)
        raise TypeError(f"Unsupported block identifier {identifier!r}")

    def get_block_by_height(self, height: int) -> CanonicalBlock:
        """Resolve height to hash, then fetch by hash."""
        block_hash = self.rpc_client.get_block_hash(height)
        return self.get_block_by_hash(block_hash)

    def get_block_by_hash(self, block_hash: str) -> CanonicalBlock:
        """Fetch header and every transaction; any failure aborts the whole block."""
        raw_block = _parse(RawBlock, "getblock", self.rpc_client.get_block(block_hash, verbosity=1))

        block = CanonicalBlock(
            block_hash=raw_block.hash,
            block_number=raw_block.height,
        )

        for tx in self._fetch_transactions(raw_block.tx):
            block.transactions.extend(self.tx_parser.parse_transaction(tx, block))

        self.logger.info("Fetched block",
                         height=block.block_number,
                         hash=block.block_hash,
                         tx_count=len(raw_block.tx),
                         records=len(block.transactions))
        return block

    def _fetch_transaction(self, tx_id: str) -> RawTransaction:
        return _parse(RawTransaction, "getrawtransaction", self.rpc_client.get_raw_transaction(tx_id))

    def _fetch_transactions(self, tx_ids: List[str]) -> List[RawTransaction]:
        if self.fetch_workers <= 1 or len(tx_ids) <= 1:
            return [self._fetch_transaction(tx_id) for tx_id in tx_ids]

        # map() yields in submission order, so block order is kept
        with ThreadPoolExecutor(max_workers=self.fetch_workers) as executor:
            return list(executor.map(self._fetch_transaction, tx_ids))


def _parse(model, method: str, data):
    try:
        return model.from_rpc(data)
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Unexpected {method} result", method=method, original_error=e) from e
