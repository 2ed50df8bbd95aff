"""Bitcoin node adapter: the operations the indexing pipeline depends on."""

from decimal import Decimal
from typing import Optional, Union
import structlog

from btc_node_adapter.models.config import AdapterConfig
from btc_node_adapter.models.blockchain import BlockIdentifier, CanonicalAsset, CanonicalBlock
from btc_node_adapter.core.rpc_client import BitcoinRPCClient
from btc_node_adapter.core.block_fetcher import BlockFetcher
from btc_node_adapter.core.confirmations import ConfirmationTracker
from btc_node_adapter.core.exceptions import NodeAdapterError
from btc_node_adapter.core.fee_estimator import FeeEstimator
from btc_node_adapter.core.transaction_parser import EmbeddedAssetDecoder, TransactionParser, no_embedded_assets
from btc_node_adapter.utils.bitcoin import BTC_PRECISION

logger = structlog.get_logger(__name__)


class BitcoinAdapter:
    """
    Normalizes a Bitcoin Core node into canonical blocks and transactions.

    Construction checks that the node is reachable and past
    `config.minimum_height`; any failure is raised to the caller. The
    adapter keeps no mutable state, so one instance may serve many threads.
    """

    def __init__(self, config: AdapterConfig,
                 embedded_asset_decoder: EmbeddedAssetDecoder = no_embedded_assets,
                 rpc_client: Optional[BitcoinRPCClient] = None):
        self.config = config
        self.logger = logger.bind(component="bitcoin_adapter")

        self.asset = CanonicalAsset(
            chain_id=config.chain_id,
            asset_id=config.chain_id,
            chain_asset_key=config.chain_id,
            symbol="BTC",
            name="Bitcoin",
            precision=BTC_PRECISION,
        )

        # Initialize components
        self.rpc_client = rpc_client or BitcoinRPCClient(config)
        self.tx_parser = TransactionParser(self.asset, embedded_asset_decoder)
        self.block_fetcher = BlockFetcher(
            self.rpc_client,
            self.tx_parser,
            minimum_height=config.minimum_height,
            fetch_workers=config.fetch_workers,
        )
        self.fee_estimator = FeeEstimator(self.rpc_client)
        self.confirmation_tracker = ConfirmationTracker(self.rpc_client)

        self._bootstrap()

    def _bootstrap(self) -> None:
        try:
            height = self.block_fetcher.get_height()
        except NodeAdapterError as e:
            self.logger.error("Bitcoin adapter bootstrap failed", **e.to_dict())
            raise
        self.logger.info("Bitcoin adapter initialized",
                         chain_id=self.config.chain_id,
                         height=height)

    def get_height(self) -> int:
        """Get the current chain height."""
        return self.block_fetcher.get_height()

    def get_block(self, identifier: Union[BlockIdentifier, int, str]) -> CanonicalBlock:
        """Get a block by BlockHeight, BlockHash, height or string id."""
        return self.block_fetcher.get_block(identifier)

    def get_block_by_height(self, height: int) -> CanonicalBlock:
        return self.block_fetcher.get_block_by_height(height)

    def get_block_by_hash(self, block_hash: str) -> CanonicalBlock:
        return self.block_fetcher.get_block_by_hash(block_hash)

    def estimate_fee(self) -> Decimal:
        """Get a safe fee rate in BTC/kvB."""
        return self.fee_estimator.estimate_fee()

    def get_confirmations(self, tx_hash: str) -> int:
        """Get confirmations of a transaction; unknown transactions have 0."""
        return self.confirmation_tracker.get_confirmations(tx_hash)

    def send_raw_transaction(self, raw_hex: str) -> str:
        """Broadcast a signed transaction and return its txid."""
        tx_id = self.rpc_client.send_raw_transaction(raw_hex)
        self.logger.info("Broadcast transaction", tx_hash=tx_id)
        return tx_id
