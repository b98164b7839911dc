"""
MODULE: services.marketplace_services.commerce_services
RESPONSIBILITY: Order lifecycle, order lines and payments.
ALLOWED: base_service, order_repositories, validators.
FORBIDDEN: SQL, calls to payment providers.
ERRORS: None escape (ServiceResponse.error).

Сервисы заказов и оплат.
"""

from typing import Optional

from core.contracts import ServiceResponse
from core.models import OrderStatus, PaymentStatus
from services.marketplace_repositories.order_repositories import (
    OrderItemRepository, OrderRepository, PaymentRepository,
)
from services.marketplace_services.base_service import BaseService


class OrderService(BaseService):
    """Сервис заказов"""

    repository: OrderRepository

    def get_by_buyer(self, buyer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_buyer", buyer_id=buyer_id)
        missing = self.require(buyer_id=buyer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_buyer(buyer_id), "get_by_buyer")

    def get_by_seller(self, seller_id: str) -> ServiceResponse:
        self.log_business_event("get_by_seller", seller_id=seller_id)
        missing = self.require(seller_id=seller_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_seller(seller_id), "get_by_seller")

    def get_by_status(self, status: str) -> ServiceResponse:
        self.log_business_event("get_by_status", status=status)
        missing = self.require(status=status)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_status(status), "get_by_status")

    def confirm(self, order_id: str) -> ServiceResponse:
        return self.update_status(order_id, OrderStatus.CONFIRMED.value)

    def ship(self, order_id: str) -> ServiceResponse:
        return self.update_status(order_id, OrderStatus.SHIPPED.value)

    def deliver(self, order_id: str) -> ServiceResponse:
        return self.update_status(order_id, OrderStatus.DELIVERED.value)

    def cancel(self, order_id: str) -> ServiceResponse:
        return self.update_status(order_id, OrderStatus.CANCELLED.value)


class OrderItemService(BaseService):
    repository: OrderItemRepository

    def get_by_order(self, order_id: str) -> ServiceResponse:
        self.log_business_event("get_by_order", order_id=order_id)
        missing = self.require(order_id=order_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_order(order_id), "get_by_order")


class PaymentService(BaseService):
    """Сервис оплат (только учет статусов, без обращения к платежному провайдеру)"""

    repository: PaymentRepository

    def get_by_order(self, order_id: str) -> ServiceResponse:
        self.log_business_event("get_by_order", order_id=order_id)
        missing = self.require(order_id=order_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_order(order_id), "get_by_order")

    def get_by_stripe_charge_id(self, stripe_charge_id: str) -> ServiceResponse:
        self.log_business_event("get_by_stripe_charge_id", stripe_charge_id=stripe_charge_id)
        missing = self.require(stripe_charge_id=stripe_charge_id)
        if missing:
            return missing
        result = self.repository.find_by_stripe_charge_id(stripe_charge_id)
        return self.first_or_none(self.from_result(result, "get_by_stripe_charge_id"))

    def get_pending(self) -> ServiceResponse:
        self.log_business_event("get_pending")
        return self.from_result(self.repository.find_pending(), "get_pending")

    def mark_succeeded(self, payment_id: str, stripe_charge_id: Optional[str] = None) -> ServiceResponse:
        extra = {"stripe_charge_id": stripe_charge_id} if stripe_charge_id else None
        return self.update_status(payment_id, PaymentStatus.SUCCEEDED.value, extra)

    def mark_failed(self, payment_id: str) -> ServiceResponse:
        return self.update_status(payment_id, PaymentStatus.FAILED.value)

    def retry(self, payment_id: str) -> ServiceResponse:
        return self.update_status(payment_id, PaymentStatus.PENDING.value)
