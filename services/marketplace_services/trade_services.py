"""
MODULE: services.marketplace_services.trade_services
RESPONSIBILITY: Price negotiation, buyer/farmer messaging and order disputes.
ALLOWED: base_service, trade_repositories, validators.
FORBIDDEN: SQL.
ERRORS: None escape (ServiceResponse.error).

Сервисы торгового взаимодействия.
"""

from typing import Any, Dict, List, Mapping, Optional

from core.contracts import ServiceErrorCode, ServiceResponse
from core.models import DisputeStatus, MessageStatus, NegotiationStatus
from services.marketplace_repositories.trade_repositories import (
    DisputeRepository, MessageRepository, NegotiationRepository,
)
from services.marketplace_services.base_service import BaseService
from validators.dispute_validator import DisputeValidator
from validators.message_validator import MessageValidator
from validators.negotiation_validator import NegotiationValidator


class NegotiationService(BaseService):
    """Сервис переговоров о цене"""

    repository: NegotiationRepository
    validator: NegotiationValidator

    def get_by_farmer(self, farmer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_farmer", farmer_id=farmer_id)
        missing = self.require(farmer_id=farmer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_farmer(farmer_id), "get_by_farmer")

    def get_by_buyer(self, buyer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_buyer", buyer_id=buyer_id)
        missing = self.require(buyer_id=buyer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_buyer(buyer_id), "get_by_buyer")

    def get_active(self, order_id: Optional[str] = None) -> ServiceResponse:
        self.log_business_event("get_active", order_id=order_id)
        return self.from_result(self.repository.find_active(order_id), "get_active")

    def search(self, params: Mapping[str, Any]) -> ServiceResponse:
        """Поиск по заметкам переговоров с необязательным фильтром статуса"""
        self.log_business_event("search", params=dict(params))
        validation = self.validator.validate_search(params)
        if not validation.is_valid:
            return self.validation_error(validation, "Некорректные параметры поиска")
        result = self.repository.search(params["query"], params.get("status"), params.get("limit"))
        return self.from_result(result, "search")

    def counter_offer(self, negotiation_id: str, data: Mapping[str, Any]) -> ServiceResponse:
        """
        Встречное предложение

        Проверяет лимит встречных предложений и отклонение от исходной цены,
        увеличивает counter_offer_count и переводит переговоры в counter_offered.
        """
        self.log_business_event("counter_offer", id=negotiation_id)
        missing = self.require(id=negotiation_id)
        if missing:
            return missing

        current = self.repository.find_by_id(negotiation_id)
        if current.error is not None:
            return self.handle_repository_error(current.error, "counter_offer")

        count = current.data.get("counter_offer_count") or 0
        validation = self.validator.validate_counter_offer(data, count, current.data.get("original_price"))
        if not validation.is_valid:
            return self.validation_error(validation, "Некорректное встречное предложение")

        extra: Dict[str, Any] = {
            key: data[key] for key in ("proposed_price", "notes", "expires_at") if key in data
        }
        extra["counter_offer_count"] = count + 1
        return self.update_status(negotiation_id, NegotiationStatus.COUNTER_OFFERED.value, extra)

    def accept(self, negotiation_id: str, final_price: Optional[float] = None) -> ServiceResponse:
        """Принятие: итоговая цена по умолчанию равна последней предложенной"""
        self.log_business_event("accept", id=negotiation_id, final_price=final_price)
        missing = self.require(id=negotiation_id)
        if missing:
            return missing

        if final_price is None:
            current = self.repository.find_by_id(negotiation_id)
            if current.error is not None:
                return self.handle_repository_error(current.error, "accept")
            final_price = current.data.get("proposed_price")

        validation = self.validator.validate_acceptance({"final_price": final_price})
        if not validation.is_valid:
            return self.validation_error(validation)
        return self.update_status(negotiation_id, NegotiationStatus.ACCEPTED.value, {"final_price": final_price})

    def reject(self, negotiation_id: str, notes: Optional[str] = None) -> ServiceResponse:
        extra = {"notes": notes} if notes is not None else None
        return self.update_status(negotiation_id, NegotiationStatus.REJECTED.value, extra)


class MessageService(BaseService):
    """Сервис сообщений"""

    repository: MessageRepository
    validator: MessageValidator

    def send(self, data: Mapping[str, Any]) -> ServiceResponse:
        """Отправка: новое сообщение создается в статусе sent"""
        return self.create(dict(data, status=data.get("status") or MessageStatus.SENT.value))

    def mark_read(self, message_id: str) -> ServiceResponse:
        return self.update_status(message_id, MessageStatus.READ.value)

    def get_conversation(self, user_id_1: str, user_id_2: str,
                         limit: int = 50, offset: int = 0) -> ServiceResponse:
        self.log_business_event("get_conversation", user_id_1=user_id_1, user_id_2=user_id_2)
        params = {"user_id_1": user_id_1, "user_id_2": user_id_2, "limit": limit, "offset": offset}
        validation = self.validator.validate_conversation(params)
        if not validation.is_valid:
            return self.validation_error(validation, "Некорректные параметры переписки")
        return self.from_result(
            self.repository.find_conversation(user_id_1, user_id_2, limit, offset), "get_conversation"
        )

    def get_unread(self, receiver_id: str) -> ServiceResponse:
        self.log_business_event("get_unread", receiver_id=receiver_id)
        missing = self.require(receiver_id=receiver_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_unread(receiver_id), "get_unread")

    def bulk_operation(self, message_ids: List[str], operation: str) -> ServiceResponse:
        """
        Массовая отметка прочитанными или удаление

        Удаление мягкое (статус deleted). Каждое сообщение проходит граф
        переходов отдельно, в ответе - списки успешных и неуспешных id.
        """
        self.log_business_event("bulk_operation", operation=operation, total=len(message_ids or []))
        validation = self.validator.validate_bulk_operation(
            {"message_ids": message_ids, "operation": operation}
        )
        if not validation.is_valid:
            return self.validation_error(validation, "Некорректная массовая операция")

        target = {"read": MessageStatus.READ.value, "delete": MessageStatus.DELETED.value}.get(operation)
        if target is None:
            return self.create_error(ServiceErrorCode.VALIDATION_ERROR,
                                     f"Операция {operation} не поддерживается")

        succeeded: List[str] = []
        failed: Dict[str, str] = {}
        for message_id in message_ids:
            response = self.update_status(message_id, target)
            if response.success:
                succeeded.append(message_id)
            else:
                failed[message_id] = response.error.code.value
        return self.create_response({"succeeded": succeeded, "failed": failed})


class DisputeService(BaseService):
    """Сервис споров по заказам"""

    repository: DisputeRepository
    validator: DisputeValidator

    def get_by_order(self, order_id: str) -> ServiceResponse:
        self.log_business_event("get_by_order", order_id=order_id)
        missing = self.require(order_id=order_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_order(order_id), "get_by_order")

    def get_open(self) -> ServiceResponse:
        self.log_business_event("get_open")
        return self.from_result(self.repository.find_open(), "get_open")

    def start_review(self, dispute_id: str) -> ServiceResponse:
        return self.update_status(dispute_id, DisputeStatus.UNDER_REVIEW.value)

    def escalate(self, dispute_id: str) -> ServiceResponse:
        return self.update_status(dispute_id, DisputeStatus.ESCALATED.value)

    def resolve(self, dispute_id: str, resolution: str,
                amount_claimed: Optional[float] = None) -> ServiceResponse:
        """Закрытие решением; resolved_at ставится по часам сервиса"""
        self.log_business_event("resolve", id=dispute_id)
        data: Dict[str, Any] = {"resolution": resolution}
        if amount_claimed is not None:
            data["amount_claimed"] = amount_claimed
        validation = self.validator.validate_resolution(data)
        if not validation.is_valid:
            return self.validation_error(validation, "Некорректное решение по спору")
        data["resolved_at"] = self.clock().isoformat()
        return self.update_status(dispute_id, DisputeStatus.RESOLVED.value, data)

    def close(self, dispute_id: str) -> ServiceResponse:
        return self.update_status(dispute_id, DisputeStatus.CLOSED.value)
