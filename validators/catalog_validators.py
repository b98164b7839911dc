"""
MODULE: validators.catalog_validators
RESPONSIBILITY: Validate products, product listings and user profiles.
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидаторы каталога: товар, объявление о продаже, профиль участника.
"""

from typing import List

from config.settings import CatalogRules
from core.models import ProductCategory, ProfileRole, enum_values
from validators.base import EntityValidator
from validators.rules import (
    Rule, date_field, email_field, enum_field, max_length_field, non_negative_field,
    phone_field, positive_field, status_field, string_field, url_field, uuid_field,
    uuid_fields,
)
from validators.transitions import LISTING_TRANSITIONS


class ProductValidator(EntityValidator):
    entity_type = "products"
    required_fields = ("name",)

    def __init__(self, rules: CatalogRules = None, **kwargs):
        super().__init__(rules or CatalogRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            string_field("name", 2, self.rules.name_max_length),
            max_length_field("description", self.rules.description_max_length),
            url_field("image_url"),
            enum_field("category", enum_values(ProductCategory), code="INVALID_CATEGORY"),
        ]


class ProductListingValidator(EntityValidator):
    """Объявление фермера: цена за единицу, остаток, дата сбора"""

    entity_type = "product_listings"
    required_fields = ("farmer_id", "product_id", "price_per_unit", "quantity_available")
    transitions = LISTING_TRANSITIONS

    def __init__(self, rules: CatalogRules = None, **kwargs):
        super().__init__(rules or CatalogRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            *uuid_fields("farmer_id", "product_id", "quality_report_id"),
            positive_field("price_per_unit", code="INVALID_PRICE"),
            non_negative_field("quantity_available", code="INVALID_QUANTITY"),
            string_field("unit_of_measure", 1, self.rules.unit_max_length),
            date_field("harvest_date"),
            status_field(LISTING_TRANSITIONS.statuses),
        ]


class ProfileValidator(EntityValidator):
    entity_type = "profiles"
    required_fields = ("role", "full_name", "contact_email")

    def __init__(self, rules: CatalogRules = None, **kwargs):
        super().__init__(rules or CatalogRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            uuid_field("id"),
            enum_field("role", enum_values(ProfileRole), code="INVALID_ROLE"),
            string_field("full_name", 2, self.rules.full_name_max_length),
            email_field("contact_email"),
            phone_field("phone_number"),
        ]
