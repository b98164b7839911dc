"""
MODULE: services.marketplace_services.trust_services
RESPONSIBILITY: Review moderation, certification verification, quality report approval, blockchain references.
ALLOWED: base_service, trust_repositories, validators.
FORBIDDEN: SQL.
ERRORS: None escape (ServiceResponse.error).

Сервисы доверия.
"""

from typing import Optional

from core.contracts import ServiceResponse
from services.marketplace_repositories.trust_repositories import (
    BlockchainTxRepository, CertificationRepository, QualityReportRepository, ReviewRepository,
)
from services.marketplace_services.base_service import BaseService
from validators.certification_validator import CertificationValidator
from validators.quality_report_validator import QualityReportValidator
from validators.review_validator import ReviewValidator


class ReviewService(BaseService):
    """Сервис отзывов"""

    repository: ReviewRepository
    validator: ReviewValidator

    def get_by_listing(self, listing_id: str) -> ServiceResponse:
        self.log_business_event("get_by_listing", listing_id=listing_id)
        missing = self.require(listing_id=listing_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_listing(listing_id), "get_by_listing")

    def get_by_reviewer(self, reviewer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_reviewer", reviewer_id=reviewer_id)
        missing = self.require(reviewer_id=reviewer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_reviewer(reviewer_id), "get_by_reviewer")

    def get_by_farmer(self, farmer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_farmer", farmer_id=farmer_id)
        missing = self.require(farmer_id=farmer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_farmer(farmer_id), "get_by_farmer")

    def get_pending_reviews(self) -> ServiceResponse:
        self.log_business_event("get_pending_reviews")
        return self.from_result(self.repository.find_pending(), "get_pending_reviews")

    def get_average_rating(self, listing_id: str) -> ServiceResponse:
        """Средняя оценка одобренных отзывов (None, если отзывов нет)"""
        self.log_business_event("get_average_rating", listing_id=listing_id)
        missing = self.require(listing_id=listing_id)
        if missing:
            return missing
        result = self.repository.average_rating(listing_id)
        if result.error is not None:
            return self.handle_repository_error(result.error, "get_average_rating")
        return self.create_response(result.data["average"])

    def has_user_reviewed(self, reviewer_id: str, listing_id: str) -> ServiceResponse:
        self.log_business_event("has_user_reviewed", reviewer_id=reviewer_id, listing_id=listing_id)
        missing = self.require(reviewer_id=reviewer_id, listing_id=listing_id)
        if missing:
            return missing
        result = self.repository.count_by_reviewer_and_listing(reviewer_id, listing_id)
        if result.error is not None:
            return self.handle_repository_error(result.error, "has_user_reviewed")
        return self.create_response(result.data > 0)

    def moderate(self, review_id: str, status: str, admin_notes: Optional[str] = None) -> ServiceResponse:
        """Решение модератора: статус и заметки"""
        self.log_business_event("moderate", id=review_id, status=status)
        changes = {"status": status}
        if admin_notes is not None:
            changes["admin_notes"] = admin_notes
        validation = self.validator.validate_moderation_update(changes)
        if not validation.is_valid:
            return self.validation_error(validation)
        extra = {"admin_notes": admin_notes} if admin_notes is not None else None
        return self.update_status(review_id, status, extra)

    def check_rating_pattern(self, listing_id: str) -> ServiceResponse:
        """Проверка распределения оценок объявления на накрутку"""
        self.log_business_event("check_rating_pattern", listing_id=listing_id)
        result = self.repository.find_by_listing(listing_id)
        if result.error is not None:
            return self.handle_repository_error(result.error, "check_rating_pattern")
        ratings = [row["rating"] for row in result.data or [] if row.get("rating") is not None]
        return self.create_response(self.validator.validate_rating_pattern(ratings).to_dict())


class CertificationService(BaseService):
    """Сервис сертификатов"""

    repository: CertificationRepository
    validator: CertificationValidator

    def get_by_farmer(self, farmer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_farmer", farmer_id=farmer_id)
        missing = self.require(farmer_id=farmer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_farmer(farmer_id), "get_by_farmer")

    def get_expiring(self, within_days: int = 30) -> ServiceResponse:
        self.log_business_event("get_expiring", within_days=within_days)
        return self.from_result(
            self.repository.find_expiring(self.clock().date(), within_days), "get_expiring"
        )

    def verify(self, certification_id: str, verified_by: str,
               verification_notes: Optional[str] = None) -> ServiceResponse:
        self.log_business_event("verify", id=certification_id, verified_by=verified_by)
        data = {"verified_by": verified_by}
        if verification_notes is not None:
            data["verification_notes"] = verification_notes
        validation = self.validator.validate_verification(data)
        if not validation.is_valid:
            return self.validation_error(validation)
        return self.update_status(certification_id, "verified", data)

    def reject(self, certification_id: str, verification_notes: Optional[str] = None) -> ServiceResponse:
        extra = {"verification_notes": verification_notes} if verification_notes is not None else None
        return self.update_status(certification_id, "rejected", extra)


class QualityReportService(BaseService):
    """Сервис отчетов о качестве"""

    repository: QualityReportRepository
    validator: QualityReportValidator

    def get_by_product(self, product_id: str) -> ServiceResponse:
        self.log_business_event("get_by_product", product_id=product_id)
        missing = self.require(product_id=product_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_product(product_id), "get_by_product")

    def get_by_farmer(self, farmer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_farmer", farmer_id=farmer_id)
        missing = self.require(farmer_id=farmer_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_farmer(farmer_id), "get_by_farmer")

    def submit_for_review(self, report_id: str) -> ServiceResponse:
        return self.update_status(report_id, "under_review")

    def approve(self, report_id: str, approved_by: str) -> ServiceResponse:
        self.log_business_event("approve", id=report_id, approved_by=approved_by)
        validation = self.validator.validate_approval({"approved_by": approved_by})
        if not validation.is_valid:
            return self.validation_error(validation)
        return self.update_status(report_id, "approved", {"approved_by": approved_by})

    def reject(self, report_id: str) -> ServiceResponse:
        return self.update_status(report_id, "rejected")


class BlockchainTxService(BaseService):
    """Сервис ссылок на транзакции в блокчейне"""

    repository: BlockchainTxRepository

    def get_by_entity(self, entity_type: str, entity_id: str) -> ServiceResponse:
        self.log_business_event("get_by_entity", entity_type=entity_type, entity_id=entity_id)
        missing = self.require(entity_type=entity_type, entity_id=entity_id)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_entity(entity_type, entity_id), "get_by_entity")

    def get_by_hash(self, tx_hash: str) -> ServiceResponse:
        self.log_business_event("get_by_hash", tx_hash=tx_hash)
        missing = self.require(tx_hash=tx_hash)
        if missing:
            return missing
        return self.first_or_none(self.from_result(self.repository.find_by_hash(tx_hash), "get_by_hash"))

    def confirm(self, reference_id: str, block_number: int) -> ServiceResponse:
        return self.update_status(reference_id, "confirmed", {"block_number": block_number})
