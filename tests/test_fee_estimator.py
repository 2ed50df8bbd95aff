"""Unit tests for fee estimation."""

import pytest
from decimal import Decimal

from btc_node_adapter.core.exceptions import RPCError, ValidationError
from btc_node_adapter.core.fee_estimator import MINIMUM_FEE_RATE

from conftest import NodeError


class TestFeeEstimator:
    """Tests for doubling, floor and rounding of the node's estimate."""

    def quote(self, fake_node, feerate):
        fake_node.on("estimatesmartfee", {"feerate": feerate, "blocks": 2})

    def test_requests_two_block_target(self, adapter, fake_node):
        self.quote(fake_node, 0.0002)

        adapter.estimate_fee()

        assert fake_node.calls[0]["method"] == "estimatesmartfee"
        assert fake_node.calls[0]["params"] == [2]

    def test_low_quote_clamped_to_floor(self, adapter, fake_node):
        """Test 0.00002 doubles to 0.00004, below the 0.0001 floor."""
        self.quote(fake_node, 0.00002)

        assert adapter.estimate_fee() == Decimal("0.0001")

    def test_quote_doubled_above_floor(self, adapter, fake_node):
        """Test 0.00009 doubles to 0.00018."""
        self.quote(fake_node, 0.00009)

        fee = adapter.estimate_fee()

        assert fee == Decimal("0.00018")
        assert str(fee) == "0.00018000"

    def test_exact_floor(self, adapter, fake_node):
        self.quote(fake_node, 0.00005)

        assert adapter.estimate_fee() == MINIMUM_FEE_RATE

    def test_rounded_to_eight_places(self, adapter, fake_node):
        """Test sub-satoshi precision is rounded half up."""
        self.quote(fake_node, 0.000123456789)

        fee = adapter.estimate_fee()

        assert fee == Decimal("0.00024691")
        assert fee.as_tuple().exponent == -8

    @pytest.mark.parametrize("feerate", [0.001, 0.00051, 0.01234567])
    def test_never_below_floor_and_exactly_double(self, adapter, fake_node, feerate):
        self.quote(fake_node, feerate)

        fee = adapter.estimate_fee()

        assert fee >= MINIMUM_FEE_RATE
        assert fee == (Decimal(str(feerate)) * 2).quantize(Decimal("0.00000001"))

    @pytest.mark.parametrize("feerate", [0, -1, "garbage"])
    def test_invalid_quote_rejected(self, adapter, fake_node, feerate):
        self.quote(fake_node, feerate)

        with pytest.raises(ValidationError):
            adapter.estimate_fee()

    def test_missing_feerate_rejected(self, adapter, fake_node):
        """Test a node without enough data returns errors and no feerate."""
        fake_node.on("estimatesmartfee", {"errors": ["Insufficient data or no feerate found"], "blocks": 0})

        with pytest.raises(ValidationError) as exc_info:
            adapter.estimate_fee()

        assert "Insufficient data" in str(exc_info.value)

    def test_rpc_error_propagates(self, adapter, fake_node):
        fake_node.on("estimatesmartfee", NodeError(-32603, "internal error"))

        with pytest.raises(RPCError) as exc_info:
            adapter.estimate_fee()

        assert exc_info.value.code == -32603
