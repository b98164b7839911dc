"""
Тесты сервисного слоя: конверт ответа, проверки до обращения к БД,
рабочие процессы сущностей.
"""

from unittest.mock import MagicMock

import pytest

from core.contracts import RepositoryResult, ServiceError, ServiceErrorCode
from services.marketplace_repositories import (
    CertificationRepository, FarmTaskRepository, MessageRepository, NegotiationRepository,
    OrderRepository, RetailerInventoryRepository, ReviewRepository, ShipmentRepository,
)
from services.marketplace_repositories.logistics_repositories import ColdChainLogRepository
from services.marketplace_services import (
    CertificationService, ColdChainService, FarmTaskService, InventoryService, MessageService,
    NegotiationService, OrderService, ReviewService, ShipmentService,
)
from tests.conftest import fixed_clock

FARMER_ID = "3f2b8c1e-4d5a-4b6c-8d7e-9f0a1b2c3d4e"
BUYER_ID = "7a1c2d3e-5f6a-4b7c-9d8e-0f1a2b3c4d5e"
ORDER_ID = "b1c2d3e4-f5a6-4b7c-a8d9-e0f1a2b3c4d5"


def make_service(service_cls, repository_cls, entity_type, registry):
    """Сервис с MagicMock-репозиторием, повторяющим интерфейс настоящего"""
    repository = MagicMock(spec=repository_cls)
    return service_cls(repository, registry.get_validator(entity_type), clock=fixed_clock), repository


class TestServiceEnvelope:
    """Общие операции BaseService"""

    @pytest.fixture
    def order_service(self, registry):
        return make_service(OrderService, OrderRepository, "orders", registry)

    def test_create_invalid_payload_skips_repository(self, order_service):
        service, repository = order_service
        response = service.create({"buyer_id": "not-a-uuid"})

        assert not response.success
        assert response.error.code is ServiceErrorCode.VALIDATION_ERROR
        codes = {item["code"] for item in response.error.details["errors"]}
        assert codes == {"INVALID_UUID", "REQUIRED"}
        repository.create.assert_not_called()

    def test_create_valid_payload(self, order_service):
        service, repository = order_service
        repository.create.return_value = RepositoryResult(data={"id": ORDER_ID}, count=1)
        response = service.create({"buyer_id": BUYER_ID, "total_amount": 100})
        assert response.success
        assert response.data == {"id": ORDER_ID}

    def test_repository_error_is_passed_through(self, order_service):
        service, repository = order_service
        repository.find_by_id.return_value = RepositoryResult(
            error=ServiceError(ServiceErrorCode.NOT_FOUND, "нет")
        )
        response = service.get_by_id(ORDER_ID)
        assert response.error.code is ServiceErrorCode.NOT_FOUND
        assert response.data is None

    def test_missing_id(self, order_service):
        service, repository = order_service
        assert service.get_by_id("").error.code is ServiceErrorCode.VALIDATION_ERROR
        assert service.get_by_buyer(None).error.code is ServiceErrorCode.VALIDATION_ERROR
        repository.find_by_id.assert_not_called()

    def test_empty_update(self, order_service):
        service, _ = order_service
        assert service.update(ORDER_ID, {}).error.code is ServiceErrorCode.VALIDATION_ERROR

    def test_update_with_invalid_transition(self, order_service):
        service, repository = order_service
        repository.find_by_id.return_value = RepositoryResult(data={"id": ORDER_ID, "status": "pending"})
        response = service.update(ORDER_ID, {"status": "delivered"})
        assert response.error.code is ServiceErrorCode.VALIDATION_ERROR
        assert response.error.details["errors"][0]["code"] == "INVALID_TRANSITION"
        repository.update.assert_not_called()

    def test_update_with_same_status_skips_graph(self, order_service):
        service, repository = order_service
        repository.find_by_id.return_value = RepositoryResult(data={"id": ORDER_ID, "status": "pending"})
        repository.update.return_value = RepositoryResult(data={"id": ORDER_ID, "status": "pending"})
        assert service.update(ORDER_ID, {"status": "pending", "total_amount": 50}).success

    def test_update_status_validates_even_same_status(self, order_service):
        service, repository = order_service
        repository.find_by_id.return_value = RepositoryResult(data={"id": ORDER_ID, "status": "pending"})
        response = service.update_status(ORDER_ID, "pending")
        assert response.error.code is ServiceErrorCode.VALIDATION_ERROR
        repository.update.assert_not_called()

    def test_confirm(self, order_service):
        service, repository = order_service
        repository.find_by_id.return_value = RepositoryResult(data={"id": ORDER_ID, "status": "pending"})
        repository.update.return_value = RepositoryResult(data={"id": ORDER_ID, "status": "confirmed"})
        assert service.confirm(ORDER_ID).data["status"] == "confirmed"
        repository.update.assert_called_once_with(ORDER_ID, {"status": "confirmed"})

    def test_business_event_is_logged(self, order_service, log_messages):
        service, repository = order_service
        repository.find_by_buyer.return_value = RepositoryResult(data=[], count=0)
        service.get_by_buyer(BUYER_ID)
        events = [record["extra"] for record in log_messages if record["extra"].get("event")]
        assert events[0]["event"] == "get_by_buyer"
        assert events[0]["entity"] == "orders"
        assert events[0]["buyer_id"] == BUYER_ID


class TestFarmTaskService:
    def test_priority_is_added_to_tasks(self, registry):
        service, _ = make_service(FarmTaskService, FarmTaskRepository, "farm_tasks", registry)
        tasks = service.with_priority([{"id": "t-1", "due_date": "2025-06-16"}, {"id": "t-2", "due_date": None}])
        assert [task["priority"] for task in tasks] == ["high", None]

    def test_priority_bucket_uses_service_clock(self, registry):
        service, repository = make_service(FarmTaskService, FarmTaskRepository, "farm_tasks", registry)
        repository.find_by_priority.return_value = RepositoryResult(data=[], count=0)
        service.get_by_priority("medium", FARMER_ID)
        args = repository.find_by_priority.call_args.args
        assert args[0] == "medium"
        assert args[1].isoformat() == "2025-06-15"

    def test_farmer_tasks_carry_priority(self, registry):
        service, repository = make_service(FarmTaskService, FarmTaskRepository, "farm_tasks", registry)
        repository.find_by_farmer.return_value = RepositoryResult(data=[
            {"id": "t-1", "due_date": "2025-06-16"},
            {"id": "t-2", "due_date": "2025-06-20"},
            {"id": "t-3", "due_date": "2025-07-01"},
        ], count=3)
        response = service.get_by_farmer(FARMER_ID)
        assert [task["priority"] for task in response.data] == ["high", "medium", "low"]

    def test_overdue_tasks_carry_priority(self, registry):
        service, repository = make_service(FarmTaskService, FarmTaskRepository, "farm_tasks", registry)
        repository.find_overdue.return_value = RepositoryResult(data=[{"id": "t-1", "due_date": "2025-06-10"}])
        assert service.get_overdue(FARMER_ID).data == [
            {"id": "t-1", "due_date": "2025-06-10", "priority": "high"}
        ]


class TestCertificationService:
    def test_edit_of_verified_certificate_is_rejected(self, registry):
        service, repository = make_service(CertificationService, CertificationRepository,
                                           "certifications", registry)
        repository.find_by_id.return_value = RepositoryResult(data={"id": "c-1", "status": "verified"})
        response = service.update("c-1", {"issuing_body": "EU Organic"})
        assert response.error.details["errors"][0]["code"] == "UPDATE_NOT_ALLOWED"
        repository.update.assert_not_called()

    def test_verify(self, registry):
        service, repository = make_service(CertificationService, CertificationRepository,
                                           "certifications", registry)
        repository.find_by_id.return_value = RepositoryResult(data={"id": "c-1", "status": "pending"})
        repository.update.return_value = RepositoryResult(data={"id": "c-1", "status": "verified"})
        assert service.verify("c-1", "Inspector Bob").success
        repository.update.assert_called_once_with("c-1", {"verified_by": "Inspector Bob", "status": "verified"})


class TestNegotiationService:
    @pytest.fixture
    def negotiation_service(self, registry):
        return make_service(NegotiationService, NegotiationRepository, "negotiations", registry)

    def test_counter_offer_increments_count(self, negotiation_service):
        service, repository = negotiation_service
        repository.find_by_id.return_value = RepositoryResult(data={
            "id": "n-1", "status": "pending", "original_price": 1000, "counter_offer_count": 1,
        })
        repository.update.return_value = RepositoryResult(data={"id": "n-1"})
        assert service.counter_offer("n-1", {"proposed_price": 850}).success
        repository.update.assert_called_once_with(
            "n-1", {"proposed_price": 850, "counter_offer_count": 2, "status": "counter_offered"}
        )

    def test_counter_offer_limit(self, negotiation_service):
        service, repository = negotiation_service
        repository.find_by_id.return_value = RepositoryResult(data={
            "id": "n-1", "status": "counter_offered", "original_price": 1000, "counter_offer_count": 5,
        })
        response = service.counter_offer("n-1", {"proposed_price": 850})
        assert response.error.details["errors"][0]["code"] == "MAX_COUNTER_OFFERS_EXCEEDED"
        repository.update.assert_not_called()

    def test_accept_defaults_to_last_proposed_price(self, negotiation_service):
        service, repository = negotiation_service
        repository.find_by_id.return_value = RepositoryResult(data={
            "id": "n-1", "status": "counter_offered", "proposed_price": 850,
        })
        repository.update.return_value = RepositoryResult(data={"id": "n-1", "status": "accepted"})
        assert service.accept("n-1").success
        repository.update.assert_called_once_with("n-1", {"final_price": 850, "status": "accepted"})

    def test_accepted_negotiation_cannot_be_rejected(self, negotiation_service):
        service, repository = negotiation_service
        repository.find_by_id.return_value = RepositoryResult(data={"id": "n-1", "status": "accepted"})
        assert service.reject("n-1").error.code is ServiceErrorCode.VALIDATION_ERROR

    def test_search_passes_query_and_status(self, negotiation_service):
        service, repository = negotiation_service
        repository.search.return_value = RepositoryResult(data=[{"id": "n-1"}])
        response = service.search({"query": "tomatoes", "status": "pending"})
        assert response.data == [{"id": "n-1"}]
        repository.search.assert_called_once_with("tomatoes", "pending", None)

    def test_search_rejects_short_query(self, negotiation_service):
        service, repository = negotiation_service
        response = service.search({"query": "t"})
        assert response.error.code is ServiceErrorCode.VALIDATION_ERROR
        repository.search.assert_not_called()


class TestReviewService:
    @pytest.fixture
    def review_service(self, registry):
        return make_service(ReviewService, ReviewRepository, "reviews", registry)

    def test_average_rating(self, review_service):
        service, repository = review_service
        repository.average_rating.return_value = RepositoryResult(data={"average": 4.2, "total": 5}, count=5)
        assert service.get_average_rating("l-1").data == 4.2

    def test_average_rating_requires_listing(self, review_service):
        service, repository = review_service
        assert service.get_average_rating("").error.code is ServiceErrorCode.VALIDATION_ERROR
        repository.average_rating.assert_not_called()

    def test_has_user_reviewed(self, review_service):
        service, repository = review_service
        repository.count_by_reviewer_and_listing.return_value = RepositoryResult(data=1, count=1)
        assert service.has_user_reviewed(BUYER_ID, "l-1").data is True

    def test_moderation_with_unknown_status(self, review_service):
        service, repository = review_service
        assert service.moderate("r-1", "hidden").error.code is ServiceErrorCode.VALIDATION_ERROR
        repository.find_by_id.assert_not_called()


class TestMessageService:
    @pytest.fixture
    def message_service(self, registry):
        return make_service(MessageService, MessageRepository, "messages", registry)

    def test_send_sets_status(self, message_service):
        service, repository = message_service
        repository.create.return_value = RepositoryResult(data={"id": "m-1"})
        service.send({"sender_id": FARMER_ID, "receiver_id": BUYER_ID, "content": "Tomatoes ready"})
        assert repository.create.call_args.args[0]["status"] == "sent"

    def test_archive_is_not_supported(self, message_service):
        service, repository = message_service
        response = service.bulk_operation(["m-1"], "archive")
        assert response.error.code is ServiceErrorCode.VALIDATION_ERROR
        assert "не поддерживается" in response.error.message
        repository.find_by_id.assert_not_called()

    def test_bulk_read_reports_each_message(self, message_service):
        service, repository = message_service
        repository.find_by_id.side_effect = [
            RepositoryResult(data={"id": "m-1", "status": "sent"}),
            RepositoryResult(data={"id": "m-2", "status": "deleted"}),
        ]
        repository.update.return_value = RepositoryResult(data={"status": "read"})
        response = service.bulk_operation(["m-1", "m-2"], "read")
        assert response.data == {"succeeded": ["m-1"], "failed": {"m-2": "VALIDATION_ERROR"}}

    def test_conversation_with_self(self, message_service):
        service, repository = message_service
        assert service.get_conversation(BUYER_ID, BUYER_ID).error.code is ServiceErrorCode.VALIDATION_ERROR
        repository.find_conversation.assert_not_called()


class TestLogisticsServices:
    def test_delivered_without_date(self, registry):
        service, repository = make_service(ShipmentService, ShipmentRepository, "shipments", registry)
        response = service.update_shipment_status("s-1", "delivered")
        assert response.error.details["errors"][0]["field"] == "actual_delivery_date"
        repository.find_by_id.assert_not_called()

    def test_generic_status_change_to_delivered_needs_date(self, registry):
        service, repository = make_service(ShipmentService, ShipmentRepository, "shipments", registry)
        repository.find_by_id.return_value = RepositoryResult(data={"id": "s-1", "status": "in_transit"})
        response = service.update_status("s-1", "delivered")
        assert response.error.details["errors"][0]["field"] == "actual_delivery_date"
        assert service.update("s-1", {"status": "delivered"}).error.code is ServiceErrorCode.VALIDATION_ERROR
        repository.update.assert_not_called()

    def test_delivered_with_date(self, registry):
        service, repository = make_service(ShipmentService, ShipmentRepository, "shipments", registry)
        repository.find_by_id.return_value = RepositoryResult(data={"id": "s-1", "status": "in_transit"})
        repository.update.return_value = RepositoryResult(data={"id": "s-1", "status": "delivered"})
        assert service.update_shipment_status("s-1", "delivered", "2025-06-14").success
        repository.update.assert_called_once_with(
            "s-1", {"actual_delivery_date": "2025-06-14", "status": "delivered"}
        )

    def test_track_returns_first_match(self, registry):
        service, repository = make_service(ShipmentService, ShipmentRepository, "shipments", registry)
        repository.find_by_tracking_number.return_value = RepositoryResult(data=[{"id": "s-1"}], count=1)
        assert service.track("1Z999AA10123456784").data == {"id": "s-1"}

    def test_breaches(self, registry):
        service, repository = make_service(ColdChainService, ColdChainLogRepository, "cold_chain_logs", registry)
        repository.find_by_shipment.return_value = RepositoryResult(
            data=[{"temperature_c": 5}, {"temperature_c": 11}], count=2
        )
        assert service.get_breaches("s-1").data == [{"temperature_c": 11}]

    def test_restock_recomputes_status(self, registry):
        service, repository = make_service(InventoryService, RetailerInventoryRepository,
                                           "retailer_inventory", registry)
        repository.find_by_id.return_value = RepositoryResult(data={
            "id": "i-1", "status": "out_of_stock", "quantity": 0, "reorder_level": 5,
        })
        repository.update.return_value = RepositoryResult(data={"id": "i-1"})
        assert service.restock("i-1", 20).success
        changes = repository.update.call_args.args[1]
        assert changes["quantity"] == 20
        assert changes["status"] == "active"
        assert changes["last_restocked_at"] == "2025-06-15T12:00:00"

    def test_restock_rejects_non_positive_quantity(self, registry):
        service, repository = make_service(InventoryService, RetailerInventoryRepository,
                                           "retailer_inventory", registry)
        assert service.restock("i-1", -3).error.code is ServiceErrorCode.VALIDATION_ERROR
        repository.find_by_id.assert_not_called()
