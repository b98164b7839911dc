"""
MODULE: core.dependency_injection
RESPONSIBILITY: Central Dependency Injection Container (Singleton).
ALLOWED: Importing all services, repositories and the validator registry.
FORBIDDEN: Business logic.
ERRORS: DatabaseConnectionError (from get_database_manager).

Контейнер зависимостей для внедрения зависимостей (Dependency Injection)

Лениво создает менеджер БД, реестр валидаторов и по одному сервису
на сущность. Сервис получает репозиторий своей таблицы и валидатор
из общего реестра.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Optional, Type

from loguru import logger

from config.settings import config
from core.database import DatabaseManager
from core.interfaces import IDatabaseManager
from services.marketplace_repositories import (
    BlockchainTxRepository, CertificationRepository, ColdChainLogRepository, DisputeRepository,
    FarmTaskRepository, MessageRepository, NegotiationRepository, OrderItemRepository,
    OrderRepository, PaymentRepository, ProductListingRepository, ProductRepository,
    ProfileRepository, QualityReportRepository, RetailerInventoryRepository, ReviewRepository,
    ShipmentRepository,
)
from services.marketplace_repositories.base_repository import BaseRepository
from services.marketplace_services import (
    BaseService, BlockchainTxService, CertificationService, ColdChainService, DisputeService,
    FarmTaskService, InventoryService, ListingService, MessageService, NegotiationService,
    OrderItemService, OrderService, PaymentService, ProductService, ProfileService,
    QualityReportService, ReviewService, ShipmentService,
)
from validators.primitives import utc_now
from validators.registry import ValidatorRegistry


class DependencyContainer:
    """
    Контейнер зависимостей для управления жизненным циклом сервисов

    Реализует паттерн Singleton для обеспечения единой точки доступа
    к зависимостям во всем приложении.
    """

    _instance: Optional['DependencyContainer'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self._db_manager: Optional[IDatabaseManager] = None
        self._validator_registry: Optional[ValidatorRegistry] = None
        self._services: Dict[str, BaseService] = {}
        self.clock: Callable[[], datetime] = utc_now

    def set_database_manager(self, db_manager: IDatabaseManager) -> None:
        """Подмена менеджера БД (тесты, внешнее подключение)"""
        self._db_manager = db_manager
        self._services.clear()

    def get_database_manager(self) -> IDatabaseManager:
        """Получение менеджера базы данных маркетплейса"""
        if self._db_manager is None:
            logger.info("Создание DatabaseManager")
            db_manager = DatabaseManager(config.database)
            db_manager.connect()
            self._db_manager = db_manager
        return self._db_manager

    def get_validator_registry(self) -> ValidatorRegistry:
        """Получение реестра валидаторов"""
        if self._validator_registry is None:
            logger.info("Создание ValidatorRegistry")
            self._validator_registry = ValidatorRegistry(config.business_rules, clock=self.clock)
        return self._validator_registry

    def _service(self, entity_type: str, service_cls: Type[BaseService],
                 repository_cls: Type[BaseRepository]) -> Any:
        if entity_type not in self._services:
            logger.info(f"Создание {service_cls.__name__}")
            repository = repository_cls(self.get_database_manager())
            validator = self.get_validator_registry().get_validator(entity_type)
            self._services[entity_type] = service_cls(repository, validator, clock=self.clock)
        return self._services[entity_type]

    def get_farm_task_service(self) -> FarmTaskService:
        return self._service("farm_tasks", FarmTaskService, FarmTaskRepository)

    def get_product_service(self) -> ProductService:
        return self._service("products", ProductService, ProductRepository)

    def get_listing_service(self) -> ListingService:
        return self._service("product_listings", ListingService, ProductListingRepository)

    def get_profile_service(self) -> ProfileService:
        return self._service("profiles", ProfileService, ProfileRepository)

    def get_order_service(self) -> OrderService:
        return self._service("orders", OrderService, OrderRepository)

    def get_order_item_service(self) -> OrderItemService:
        return self._service("order_items", OrderItemService, OrderItemRepository)

    def get_payment_service(self) -> PaymentService:
        return self._service("payments", PaymentService, PaymentRepository)

    def get_review_service(self) -> ReviewService:
        return self._service("reviews", ReviewService, ReviewRepository)

    def get_certification_service(self) -> CertificationService:
        return self._service("certifications", CertificationService, CertificationRepository)

    def get_quality_report_service(self) -> QualityReportService:
        return self._service("quality_reports", QualityReportService, QualityReportRepository)

    def get_negotiation_service(self) -> NegotiationService:
        return self._service("negotiations", NegotiationService, NegotiationRepository)

    def get_shipment_service(self) -> ShipmentService:
        return self._service("shipments", ShipmentService, ShipmentRepository)

    def get_message_service(self) -> MessageService:
        return self._service("messages", MessageService, MessageRepository)

    def get_dispute_service(self) -> DisputeService:
        return self._service("disputes", DisputeService, DisputeRepository)

    def get_inventory_service(self) -> InventoryService:
        return self._service("retailer_inventory", InventoryService, RetailerInventoryRepository)

    def get_cold_chain_service(self) -> ColdChainService:
        return self._service("cold_chain_logs", ColdChainService, ColdChainLogRepository)

    def get_blockchain_tx_service(self) -> BlockchainTxService:
        return self._service("blockchain_tx_references", BlockchainTxService, BlockchainTxRepository)

    def cleanup(self):
        """Очистка ресурсов при завершении работы приложения"""
        logger.info("Очистка зависимостей")

        self._services.clear()
        if self._validator_registry:
            self._validator_registry.clear_cache()
            self._validator_registry = None
        if isinstance(self._db_manager, DatabaseManager):
            self._db_manager.close()
        self._db_manager = None
