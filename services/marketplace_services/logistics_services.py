"""
MODULE: services.marketplace_services.logistics_services
RESPONSIBILITY: Shipment tracking, cold chain monitoring and retailer stock.
ALLOWED: base_service, logistics_repositories, validators.
FORBIDDEN: SQL.
ERRORS: None escape (ServiceResponse.error).

Сервисы логистики.
"""

from typing import Any, Dict, Mapping, Optional

from loguru import logger

from core.contracts import ServiceErrorCode, ServiceResponse
from core.models import InventoryStatus
from services.marketplace_repositories.logistics_repositories import (
    ColdChainLogRepository, RetailerInventoryRepository, ShipmentRepository,
)
from services.marketplace_services.base_service import BaseService
from validators.shipment_validator import ShipmentValidator
from validators.supply_chain_validators import ColdChainLogValidator, RetailerInventoryValidator


class ShipmentService(BaseService):
    """Сервис отправок"""

    repository: ShipmentRepository
    validator: ShipmentValidator

    def get_by_order(self, order_id: str) -> ServiceResponse:
        self.log_business_event("get_by_order", order_id=order_id)
        missing = self.require(order_id=order_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_order(order_id), "get_by_order")

    def track(self, tracking_number: str) -> ServiceResponse:
        """Отправка по номеру отслеживания (None, если не найдена)"""
        self.log_business_event("track", tracking_number=tracking_number)
        validation = self.validator.validate_tracking(tracking_number)
        if not validation.is_valid:
            return self.validation_error(validation, "Некорректный номер отслеживания")
        result = self.repository.find_by_tracking_number(tracking_number)
        return self.first_or_none(self.from_result(result, "track"))

    def update_shipment_status(self, shipment_id: str, status: str,
                               actual_delivery_date: Optional[str] = None) -> ServiceResponse:
        """Смена статуса; для delivered нужна фактическая дата доставки"""
        self.log_business_event("update_shipment_status", id=shipment_id, status=status)
        data: Dict[str, Any] = {"status": status}
        if actual_delivery_date is not None:
            data["actual_delivery_date"] = actual_delivery_date
        validation = self.validator.validate_status_update(data)
        if not validation.is_valid:
            return self.validation_error(validation, "Некорректная смена статуса отправки")
        extra = {"actual_delivery_date": actual_delivery_date} if actual_delivery_date is not None else None
        return self.update_status(shipment_id, status, extra)


class ColdChainService(BaseService):
    """Сервис журнала температуры"""

    repository: ColdChainLogRepository
    validator: ColdChainLogValidator

    def record(self, data: Mapping[str, Any]) -> ServiceResponse:
        """Запись показания датчика; выход за безопасный диапазон логируется"""
        response = self.create(data)
        if response.success and self.validator.is_breach(data):
            logger.warning(
                f"Нарушение температурного режима: отправка {data.get('shipment_id')}, "
                f"{data.get('temperature_c')}°C"
            )
        return response

    def get_by_shipment(self, shipment_id: str) -> ServiceResponse:
        self.log_business_event("get_by_shipment", shipment_id=shipment_id)
        missing = self.require(shipment_id=shipment_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_shipment(shipment_id), "get_by_shipment")

    def get_breaches(self, shipment_id: str) -> ServiceResponse:
        """Показания отправки вне безопасного диапазона температур"""
        response = self.get_by_shipment(shipment_id)
        if not response.success:
            return response
        return self.create_response(self.validator.detect_breach(response.data or []))


class InventoryService(BaseService):
    """Сервис остатков розничного продавца"""

    repository: RetailerInventoryRepository
    validator: RetailerInventoryValidator

    def get_by_retailer(self, retailer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_retailer", retailer_id=retailer_id)
        missing = self.require(retailer_id=retailer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_retailer(retailer_id), "get_by_retailer")

    def get_low_stock(self, retailer_id: str) -> ServiceResponse:
        self.log_business_event("get_low_stock", retailer_id=retailer_id)
        missing = self.require(retailer_id=retailer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_low_stock(retailer_id), "get_low_stock")

    def restock(self, item_id: str, quantity: float) -> ServiceResponse:
        """
        Пополнение остатка

        Количество прибавляется к текущему, статус пересчитывается по уровню
        дозаказа (снятые с продажи позиции статус не меняют).
        """
        self.log_business_event("restock", id=item_id, quantity=quantity)
        missing = self.require(id=item_id, quantity=quantity)
        if missing:
            return missing
        if not isinstance(quantity, (int, float)) or isinstance(quantity, bool) or quantity <= 0:
            return self.create_error(ServiceErrorCode.VALIDATION_ERROR,
                                     "Количество пополнения должно быть положительным",
                                     {"field": "quantity"})

        current = self.repository.find_by_id(item_id)
        if current.error is not None:
            return self.handle_repository_error(current.error, "restock")

        new_quantity = (current.data.get("quantity") or 0) + quantity
        changes: Dict[str, Any] = {
            "quantity": new_quantity,
            "last_restocked_at": self.clock().isoformat(),
        }
        status = current.data.get("status")
        if status != InventoryStatus.DISCONTINUED.value:
            reorder_level = current.data.get("reorder_level") or 0
            changes["status"] = (InventoryStatus.ACTIVE.value if new_quantity > reorder_level
                                 else InventoryStatus.LOW_STOCK.value)
        return self.update(item_id, changes)
