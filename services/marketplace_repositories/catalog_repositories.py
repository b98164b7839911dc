"""
MODULE: services.marketplace_repositories.catalog_repositories
RESPONSIBILITY: Access products, product listings and profiles.
ALLOWED: typing, base_repository.
FORBIDDEN: Business logic outside DB operations.
ERRORS: None escape (RepositoryResult.error).

Репозитории каталога.
"""

from typing import Optional

from core.contracts import FilterOptions, QueryOptions, RepositoryResult
from core.models import Product, ProductListing, Profile
from services.marketplace_repositories.base_repository import BaseRepository, like_pattern


class ProductRepository(BaseRepository[Product]):
    table_name = "products"
    record_type = Product

    def find_by_category(self, category: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("category", "eq", category)], options)

    def search_by_name(self, text: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("name", "ilike", like_pattern(text))], options)

    def find_by_farmer(self, farmer_id: str) -> RepositoryResult:
        """Товары, которые фермер выставил хотя бы в одном объявлении"""
        query = f"""
            SELECT DISTINCT p.*
            FROM {self.table_name} p
            JOIN product_listings pl ON pl.product_id = p.id
            WHERE pl.farmer_id = %s
            ORDER BY p.name
        """
        return self._fetch("поиска товаров фермера", query, (farmer_id,))


class ProductListingRepository(BaseRepository[ProductListing]):
    table_name = "product_listings"
    record_type = ProductListing

    def find_by_farmer(self, farmer_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("farmer_id", "eq", farmer_id)], options)

    def find_available(self, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([
            FilterOptions("status", "eq", "available"),
            FilterOptions("quantity_available", "gt", 0),
        ], options)


class ProfileRepository(BaseRepository[Profile]):
    table_name = "profiles"
    record_type = Profile

    def find_by_role(self, role: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("role", "eq", role)], options)

    def find_verified_farmers(self, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([
            FilterOptions("role", "eq", "farmer"),
            FilterOptions("is_verified", "is", True),
        ], options)
