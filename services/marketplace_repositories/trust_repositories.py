"""
MODULE: services.marketplace_repositories.trust_repositories
RESPONSIBILITY: Access reviews, certifications, quality reports and blockchain references.
ALLOWED: typing, datetime, base_repository.
FORBIDDEN: Business logic outside DB operations.
ERRORS: None escape (RepositoryResult.error).

Репозитории доверия: отзывы, сертификаты, отчеты о качестве,
ссылки на транзакции в блокчейне.
"""

from datetime import date
from typing import Optional

from core.contracts import FilterOptions, QueryOptions, RepositoryResult, SortOptions
from core.models import BlockchainTxReference, Certification, QualityReport, Review
from services.marketplace_repositories.base_repository import BaseRepository
from validators.primitives import days_from

NEWEST_FIRST = [SortOptions("created_at", ascending=False)]


class ReviewRepository(BaseRepository[Review]):
    table_name = "reviews"
    record_type = Review

    def find_by_listing(self, listing_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("listing_id", "eq", listing_id)],
                               options or QueryOptions(sorts=NEWEST_FIRST))

    def find_by_reviewer(self, reviewer_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("reviewer_id", "eq", reviewer_id)],
                               options or QueryOptions(sorts=NEWEST_FIRST))

    def find_by_farmer(self, farmer_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("farmer_id", "eq", farmer_id)],
                               options or QueryOptions(sorts=NEWEST_FIRST))

    def find_pending(self, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("status", "eq", "pending")],
                               options or QueryOptions(sorts=[SortOptions("created_at")]))

    def count_by_reviewer_and_listing(self, reviewer_id: str, listing_id: str) -> RepositoryResult:
        return self.count([
            FilterOptions("reviewer_id", "eq", reviewer_id),
            FilterOptions("listing_id", "eq", listing_id),
        ])

    def average_rating(self, listing_id: str) -> RepositoryResult:
        """Средняя оценка одобренных отзывов объявления: {average, total}"""
        query = f"""
            SELECT AVG(rating)::float AS average, COUNT(*) AS total
            FROM {self.table_name}
            WHERE listing_id = %s AND status = 'approved'
        """
        result = self._fetch("расчета средней оценки", query, (listing_id,))
        if not result.ok:
            return result
        row = result.data[0] if result.data else {}
        total = int(row.get("total") or 0)
        return RepositoryResult(data={"average": row.get("average"), "total": total}, count=total)


class CertificationRepository(BaseRepository[Certification]):
    table_name = "certifications"
    record_type = Certification

    def find_by_farmer(self, farmer_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("farmer_id", "eq", farmer_id)], options)

    def find_by_status(self, status: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("status", "eq", status)], options)

    def find_expiring(self, today: date, within_days: int = 30) -> RepositoryResult:
        """Подтвержденные сертификаты, истекающие в ближайшие within_days дней"""
        return self.find_where([
            FilterOptions("status", "eq", "verified"),
            FilterOptions("expiry_date", "gte", today.isoformat()),
            FilterOptions("expiry_date", "lte", days_from(today, within_days).isoformat()),
        ], QueryOptions(sorts=[SortOptions("expiry_date")]))


class QualityReportRepository(BaseRepository[QualityReport]):
    table_name = "quality_reports"
    record_type = QualityReport

    def find_by_product(self, product_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("product_id", "eq", product_id)],
                               options or QueryOptions(sorts=[SortOptions("report_date", ascending=False)]))

    def find_by_farmer(self, farmer_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("farmer_id", "eq", farmer_id)],
                               options or QueryOptions(sorts=[SortOptions("report_date", ascending=False)]))


class BlockchainTxRepository(BaseRepository[BlockchainTxReference]):
    table_name = "blockchain_tx_references"
    record_type = BlockchainTxReference

    def find_by_entity(self, entity_type: str, entity_id: str) -> RepositoryResult:
        return self.find_where([
            FilterOptions("entity_type", "eq", entity_type),
            FilterOptions("entity_id", "eq", entity_id),
        ], QueryOptions(sorts=NEWEST_FIRST))

    def find_by_hash(self, tx_hash: str) -> RepositoryResult:
        return self.find_where([FilterOptions("tx_hash", "eq", tx_hash)])
