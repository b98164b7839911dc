"""
MODULE: validators.supply_chain_validators
RESPONSIBILITY: Validate retailer inventory, cold chain logs and blockchain transaction references.
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидаторы цепочки поставок:
- остатки розничного продавца;
- журнал температуры холодовой цепи (статуса нет);
- ссылки на транзакции в блокчейне (хэш 0x + 64 hex-символа).
"""

from typing import Any, Iterable, List, Mapping

from config.settings import ColdChainRules, InventoryRules
from validators import primitives as p
from validators.base import EntityValidator
from validators.rules import (
    Rule, date_field, error, field_check, max_value_field, non_negative_field,
    not_future_field, range_field, status_field, string_field, uuid_field, uuid_fields,
)
from validators.transitions import BLOCKCHAIN_TX_TRANSITIONS, INVENTORY_TRANSITIONS

BLOCKCHAIN_ENTITY_TYPES = ("orders", "payments", "shipments", "certifications", "quality_reports")


class RetailerInventoryValidator(EntityValidator):
    entity_type = "retailer_inventory"
    required_fields = ("retailer_id", "product_id", "quantity")
    transitions = INVENTORY_TRANSITIONS

    def __init__(self, rules: InventoryRules = None, **kwargs):
        super().__init__(rules or InventoryRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            *uuid_fields("retailer_id", "product_id", "listing_id"),
            non_negative_field("quantity", code="INVALID_QUANTITY"),
            max_value_field("quantity", self.rules.max_quantity),
            non_negative_field("reorder_level", code="INVALID_QUANTITY"),
            non_negative_field("unit_price", code="INVALID_PRICE"),
            max_value_field("unit_price", self.rules.max_price),
            date_field("last_restocked_at"),
            not_future_field("last_restocked_at", self.clock),
            status_field(INVENTORY_TRANSITIONS.statuses),
        ]

    def cross_rules(self) -> List[Rule]:
        return [self._stock_matches_status]

    @staticmethod
    def _stock_matches_status(data: Mapping[str, Any]):
        # Нулевой остаток не может числиться как active
        if data.get("status") == "active" and data.get("quantity") == 0:
            return [error("status", "Товар без остатка не может быть в статусе active",
                          "INCONSISTENT_STATUS")]
        return []


class ColdChainLogValidator(EntityValidator):
    """Показания датчика: температура, влажность, время замера"""

    entity_type = "cold_chain_logs"
    required_fields = ("shipment_id", "recorded_at", "temperature_c")

    def __init__(self, rules: ColdChainRules = None, **kwargs):
        super().__init__(rules or ColdChainRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            uuid_field("shipment_id"),
            date_field("recorded_at"),
            not_future_field("recorded_at", self.clock),
            range_field("temperature_c", self.rules.min_temperature_c, self.rules.max_temperature_c,
                        code="INVALID_TEMPERATURE"),
            range_field("humidity_percent", 0, 100, code="INVALID_PERCENTAGE"),
            string_field("location", 1, 200),
            string_field("sensor_id", 1, 100),
        ]

    def is_breach(self, log: Mapping[str, Any]) -> bool:
        temperature = log.get("temperature_c")
        if not p.is_number(temperature):
            return False
        return not (self.rules.safe_min_temperature_c <= temperature <= self.rules.safe_max_temperature_c)

    def detect_breach(self, logs: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
        """Показания вне безопасного диапазона"""
        return [log for log in logs if self.is_breach(log)]


class BlockchainTxValidator(EntityValidator):
    entity_type = "blockchain_tx_references"
    required_fields = ("entity_type", "entity_id", "tx_hash", "network")
    transitions = BLOCKCHAIN_TX_TRANSITIONS

    def field_rules(self) -> List[Rule]:
        return [
            field_check("entity_type", lambda value: value in BLOCKCHAIN_ENTITY_TYPES,
                        f"Тип сущности: {', '.join(BLOCKCHAIN_ENTITY_TYPES)}", "INVALID_VALUE"),
            uuid_field("entity_id"),
            field_check("tx_hash", p.is_valid_tx_hash, "Хэш транзакции: 0x и 64 hex-символа",
                        "INVALID_TX_HASH"),
            string_field("network", 2, 50),
            non_negative_field("block_number"),
            field_check("block_number", p.is_integer, "Номер блока должен быть целым", "INVALID_TYPE"),
            status_field(BLOCKCHAIN_TX_TRANSITIONS.statuses),
        ]
