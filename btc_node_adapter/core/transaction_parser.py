"""Transaction parsing and payment extraction."""

from typing import Callable, List, Optional
import structlog

from btc_node_adapter.models.blockchain import (
    CanonicalAsset, CanonicalBlock, CanonicalTransaction, RawOutput, RawTransaction
)
from btc_node_adapter.utils.bitcoin import (
    SCRIPT_TYPE_PUBKEYHASH, is_omni_output, is_payable_amount, output_hash
)

logger = structlog.get_logger(__name__)

# (block, transaction id, output index) -> payment record or None
EmbeddedAssetDecoder = Callable[[CanonicalBlock, str, int], Optional[CanonicalTransaction]]


def no_embedded_assets(block: CanonicalBlock, tx_id: str,
                       output_index: int) -> Optional[CanonicalTransaction]:
    """Decoder used when no Omni decoder is configured: yields nothing."""
    return None


class TransactionParser:
    """Turn raw transaction outputs into canonical payment records."""

    def __init__(self, asset: CanonicalAsset,
                 embedded_asset_decoder: EmbeddedAssetDecoder = no_embedded_assets):
        self.asset = asset
        self.embedded_asset_decoder = embedded_asset_decoder
        self.logger = logger.bind(component="transaction_parser")

    def parse_transaction(self, tx: RawTransaction,
                          block: CanonicalBlock) -> List[CanonicalTransaction]:
        """
        Extract payment records from every qualifying output of `tx`.

        Outputs are visited in node order. Omni outputs go to the embedded
        asset decoder; single-address pay-to-pubkey-hash outputs with a
        positive amount become records; everything else is skipped.
        """
        records = []

        for out in tx.vout:
            script = out.script_pub_key

            if is_omni_output(script.type, script.hex):
                embedded = self.embedded_asset_decoder(block, tx.txid, out.n)
                if embedded is not None:
                    records.append(embedded)
                continue

            record = self._parse_payment(tx, out, block)
            if record is not None:
                records.append(record)

        self.logger.debug("Parsed transaction",
                          tx_hash=tx.txid,
                          outputs=len(tx.vout),
                          records=len(records))
        return records

    def _parse_payment(self, tx: RawTransaction, out: RawOutput,
                       block: CanonicalBlock) -> Optional[CanonicalTransaction]:
        script = out.script_pub_key
        if script.type != SCRIPT_TYPE_PUBKEYHASH or len(script.addresses) != 1:
            return None
        if not is_payable_amount(out.value):
            return None

        return CanonicalTransaction(
            asset=self.asset,
            transaction_hash=tx.txid,
            sender="",
            receiver=script.addresses[0],
            memo="",
            block_hash=block.block_hash,
            block_number=block.block_number,
            output_index=out.n,
            output_hash=output_hash(tx.txid, out.n),
            confirmations=tx.confirmations,
            amount=out.value,
        )
