"""
MODULE: services.marketplace_services.catalog_services
RESPONSIBILITY: Products, listings and marketplace profiles.
ALLOWED: base_service, catalog_repositories.
FORBIDDEN: SQL.
ERRORS: None escape (ServiceResponse.error).

Сервисы каталога.
"""

from typing import Any, Mapping

from core.contracts import ServiceErrorCode, ServiceResponse
from core.models import ListingStatus, ProductCategory, ProfileRole, enum_values
from services.marketplace_repositories.catalog_repositories import (
    ProductListingRepository, ProductRepository, ProfileRepository,
)
from services.marketplace_services.base_service import BaseService


class ProductService(BaseService):
    """Сервис товаров"""

    repository: ProductRepository

    def get_by_category(self, category: str) -> ServiceResponse:
        self.log_business_event("get_by_category", category=category)
        if category not in enum_values(ProductCategory):
            return self.create_error(ServiceErrorCode.VALIDATION_ERROR,
                                     f"Неизвестная категория: {category}", {"field": "category"})
        return self.from_result(self.repository.find_by_category(category), "get_by_category")

    def search_by_name(self, text: str) -> ServiceResponse:
        self.log_business_event("search_by_name", text=text)
        if not isinstance(text, str) or len(text.strip()) < 2:
            return self.create_error(ServiceErrorCode.VALIDATION_ERROR,
                                     "Строка поиска короче 2 символов", {"field": "query"})
        return self.from_result(self.repository.search_by_name(text.strip()), "search_by_name")

    def get_by_farmer(self, farmer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_farmer", farmer_id=farmer_id)
        missing = self.require(farmer_id=farmer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_farmer(farmer_id), "get_by_farmer")


class ListingService(BaseService):
    """Сервис объявлений"""

    repository: ProductListingRepository

    def get_by_farmer(self, farmer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_farmer", farmer_id=farmer_id)
        missing = self.require(farmer_id=farmer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_farmer(farmer_id), "get_by_farmer")

    def get_available(self) -> ServiceResponse:
        self.log_business_event("get_available")
        return self.from_result(self.repository.find_available(), "get_available")

    def publish(self, data: Mapping[str, Any]) -> ServiceResponse:
        """Новое объявление в статусе available"""
        return self.create(dict(data, status=data.get("status") or ListingStatus.AVAILABLE.value))

    def mark_sold_out(self, listing_id: str) -> ServiceResponse:
        return self.update_status(listing_id, ListingStatus.SOLD_OUT.value, {"quantity_available": 0})

    def delist(self, listing_id: str) -> ServiceResponse:
        return self.update_status(listing_id, ListingStatus.DELISTED.value)


class ProfileService(BaseService):
    """Сервис профилей участников"""

    repository: ProfileRepository

    def get_by_role(self, role: str) -> ServiceResponse:
        self.log_business_event("get_by_role", role=role)
        if role not in enum_values(ProfileRole):
            return self.create_error(ServiceErrorCode.VALIDATION_ERROR,
                                     f"Неизвестная роль: {role}", {"field": "role"})
        return self.from_result(self.repository.find_by_role(role), "get_by_role")

    def get_verified_farmers(self) -> ServiceResponse:
        self.log_business_event("get_verified_farmers")
        return self.from_result(self.repository.find_verified_farmers(), "get_verified_farmers")
