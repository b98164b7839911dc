"""
MODULE: validators.registry
RESPONSIBILITY: Lazy, cached construction of one validator per entity key.
ALLOWED: threading, validators.*, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Реестр валидаторов.

Создается один раз при старте (см. core.dependency_injection) и передается
по ссылке. Первое создание валидатора для ключа защищено блокировкой,
повторные запросы возвращают тот же экземпляр.
"""

import threading
from datetime import datetime
from typing import Callable, Dict, List, Optional

from loguru import logger

from config.settings import BusinessRules
from validators.base import EntityValidator
from validators.catalog_validators import ProductListingValidator, ProductValidator, ProfileValidator
from validators.certification_validator import CertificationValidator
from validators.dispute_validator import DisputeValidator
from validators.farm_task_validator import FarmTaskValidator
from validators.message_validator import MessageValidator
from validators.negotiation_validator import NegotiationValidator
from validators.order_validators import OrderItemValidator, OrderValidator, PaymentValidator
from validators.primitives import utc_now
from validators.quality_report_validator import QualityReportValidator
from validators.review_validator import ReviewValidator
from validators.shipment_validator import ShipmentValidator
from validators.supply_chain_validators import (
    BlockchainTxValidator, ColdChainLogValidator, RetailerInventoryValidator,
)

ValidatorBuilder = Callable[[BusinessRules, Callable[[], datetime]], EntityValidator]

VALIDATOR_BUILDERS: Dict[str, ValidatorBuilder] = {
    "profiles": lambda rules, clock: ProfileValidator(rules.catalog, clock=clock),
    "products": lambda rules, clock: ProductValidator(rules.catalog, clock=clock),
    "product_listings": lambda rules, clock: ProductListingValidator(rules.catalog, clock=clock),
    "orders": lambda rules, clock: OrderValidator(rules.order, clock=clock),
    "order_items": lambda rules, clock: OrderItemValidator(rules.order, clock=clock),
    "payments": lambda rules, clock: PaymentValidator(rules.payment, clock=clock),
    "reviews": lambda rules, clock: ReviewValidator(rules.review, clock=clock),
    "certifications": lambda rules, clock: CertificationValidator(rules.certification, clock=clock),
    "quality_reports": lambda rules, clock: QualityReportValidator(rules.quality_report, clock=clock),
    "messages": lambda rules, clock: MessageValidator(rules.message, clock=clock),
    "shipments": lambda rules, clock: ShipmentValidator(rules.shipment, clock=clock),
    "retailer_inventory": lambda rules, clock: RetailerInventoryValidator(rules.inventory, clock=clock),
    "cold_chain_logs": lambda rules, clock: ColdChainLogValidator(rules.cold_chain, clock=clock),
    "blockchain_tx_references": lambda rules, clock: BlockchainTxValidator(clock=clock),
    "negotiations": lambda rules, clock: NegotiationValidator(rules.negotiation, clock=clock),
    "disputes": lambda rules, clock: DisputeValidator(rules.dispute, clock=clock),
    "farm_tasks": lambda rules, clock: FarmTaskValidator(rules.catalog, clock=clock),
}


class ValidatorRegistry:
    """
    Реестр валидаторов сущностей

    Attributes:
        business_rules: Лимиты, передаваемые валидаторам
        clock: Источник текущего времени для всех валидаторов
    """

    def __init__(self, business_rules: Optional[BusinessRules] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.business_rules = business_rules or BusinessRules()
        self.clock = clock
        self._cache: Dict[str, EntityValidator] = {}
        self._lock = threading.Lock()

    def get_validator(self, entity_type: str) -> Optional[EntityValidator]:
        """
        Валидатор сущности по ключу

        Returns:
            Закэшированный экземпляр или None для неизвестного ключа
        """
        validator = self._cache.get(entity_type)
        if validator is not None:
            return validator

        builder = VALIDATOR_BUILDERS.get(entity_type)
        if builder is None:
            logger.warning(f"Неизвестный тип сущности для валидации: {entity_type}")
            return None

        with self._lock:
            validator = self._cache.get(entity_type)
            if validator is None:
                logger.debug(f"Создание валидатора {entity_type}")
                validator = builder(self.business_rules, self.clock)
                self._cache[entity_type] = validator
        return validator

    def get_any_validator(self, entity_type: str) -> EntityValidator:
        """Валидатор сущности или общий валидатор без правил для неизвестного ключа"""
        validator = self.get_validator(entity_type)
        if validator is not None:
            return validator

        key = f"generic:{entity_type}"
        with self._lock:
            validator = self._cache.get(key)
            if validator is None:
                validator = EntityValidator(clock=self.clock)
                self._cache[key] = validator
        return validator

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
        logger.debug("Кэш валидаторов очищен")

    @staticmethod
    def supported_entity_types() -> List[str]:
        return list(VALIDATOR_BUILDERS)

    def is_supported(self, entity_type: str) -> bool:
        return entity_type in VALIDATOR_BUILDERS
