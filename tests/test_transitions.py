"""
Тесты графов статусов.
"""

import pytest

from validators import transitions as t

ALL_GRAPHS = [
    t.FARM_TASK_TRANSITIONS,
    t.LISTING_TRANSITIONS,
    t.ORDER_TRANSITIONS,
    t.PAYMENT_TRANSITIONS,
    t.REVIEW_TRANSITIONS,
    t.CERTIFICATION_TRANSITIONS,
    t.QUALITY_REPORT_TRANSITIONS,
    t.NEGOTIATION_TRANSITIONS,
    t.SHIPMENT_TRANSITIONS,
    t.MESSAGE_TRANSITIONS,
    t.DISPUTE_TRANSITIONS,
    t.INVENTORY_TRANSITIONS,
    t.BLOCKCHAIN_TX_TRANSITIONS,
]


class TestSameStatus:
    """Переход в тот же статус"""

    @pytest.mark.parametrize("graph", ALL_GRAPHS, ids=lambda graph: graph.entity)
    def test_same_status_fails_without_self_loop(self, graph):
        for status in graph.statuses:
            result = graph.validate(status, status)
            if status in graph.next_statuses(status):
                assert result.is_valid
            else:
                assert result.codes() == ["INVALID_TRANSITION"]

    def test_only_counter_offer_has_a_self_loop(self):
        loops = {
            (graph.entity, status)
            for graph in ALL_GRAPHS
            for status in graph.statuses
            if graph.can_transition(status, status)
        }
        assert loops == {("negotiation", "counter_offered")}


class TestTransitions:
    """Допустимые и недопустимые переходы"""

    def test_one_hop_transition_is_allowed(self):
        assert t.ORDER_TRANSITIONS.validate("pending", "confirmed").is_valid

    def test_skipping_a_step_is_rejected(self):
        result = t.ORDER_TRANSITIONS.validate("pending", "delivered")
        assert result.codes() == ["INVALID_TRANSITION"]

    def test_terminal_status_has_no_exits(self):
        assert t.ORDER_TRANSITIONS.is_terminal("delivered")
        assert not t.ORDER_TRANSITIONS.validate("delivered", "cancelled").is_valid

    def test_unknown_statuses_are_reported_separately(self):
        result = t.SHIPMENT_TRANSITIONS.validate("lost", "teleported")
        assert result.codes() == ["INVALID_STATUS", "INVALID_STATUS"]

    def test_unknown_target(self):
        result = t.PAYMENT_TRANSITIONS.validate("pending", "refunded")
        assert result.codes() == ["INVALID_STATUS"]

    def test_error_is_reported_on_status_field(self):
        result = t.DISPUTE_TRANSITIONS.validate("closed", "open")
        assert result.errors[0].field == "status"

    def test_describe_marks_terminal_statuses(self):
        lines = t.PAYMENT_TRANSITIONS.describe()
        assert "pending -> failed, succeeded" in lines
        assert "succeeded -> (конечный)" in lines

    def test_undeclared_target_is_rejected_at_construction(self):
        with pytest.raises(ValueError):
            t.StatusTransitionGraph("broken", {"a": {"b"}})
