"""
Тесты контейнера зависимостей.
"""

import pytest

from core.dependency_injection import DependencyContainer
from services.marketplace_services import CertificationService, OrderService
from tests.conftest import fixed_clock


@pytest.fixture
def container(db_manager):
    DependencyContainer._instance = None
    container = DependencyContainer()
    container.clock = fixed_clock
    container.set_database_manager(db_manager)
    yield container
    container.cleanup()
    DependencyContainer._instance = None


class TestDependencyContainer:
    def test_singleton(self, container):
        assert DependencyContainer() is container

    def test_service_is_built_once(self, container):
        service = container.get_order_service()
        assert isinstance(service, OrderService)
        assert container.get_order_service() is service

    def test_service_gets_shared_validator_and_clock(self, container):
        service = container.get_certification_service()
        assert isinstance(service, CertificationService)
        assert service.validator is container.get_validator_registry().get_validator("certifications")
        assert service.clock is fixed_clock
        assert service.validator.clock is fixed_clock

    def test_services_use_injected_database(self, container, db_manager):
        db_manager.execute_query.return_value = [{"count": 4}]
        assert container.get_order_service().count().data == 4

    def test_new_database_manager_resets_services(self, container, db_manager):
        service = container.get_order_service()
        container.set_database_manager(db_manager)
        assert container.get_order_service() is not service
