"""
MODULE: services.marketplace_repositories.farm_task_repository
RESPONSIBILITY: Access farm tasks, overdue and priority-bucket queries.
ALLOWED: typing, datetime, loguru, base_repository.
FORBIDDEN: Business logic outside DB operations.
ERRORS: None escape (RepositoryResult.error).

Репозиторий полевых задач.
"""

from datetime import date
from typing import List, Optional

from loguru import logger

from core.contracts import FilterOptions, QueryOptions, RepositoryResult, SortOptions
from core.models import FarmTask, TaskPriority
from services.marketplace_repositories.base_repository import BaseRepository
from validators.primitives import days_from

BY_DUE_DATE = [SortOptions("due_date", ascending=True)]


def priority_filters(priority: str, today: date) -> Optional[List[FilterOptions]]:
    """
    Фильтры по сроку для корзины приоритета

    high: срок не позже завтра; medium: после завтра и не позже today+7;
    low: позже today+7. Регистр имени не важен, неизвестный приоритет дает None.
    """
    tomorrow = days_from(today, 1).isoformat()
    week = days_from(today, 7).isoformat()
    bucket = priority.lower() if isinstance(priority, str) else priority
    if bucket == TaskPriority.HIGH.value:
        return [FilterOptions("due_date", "lte", tomorrow)]
    if bucket == TaskPriority.MEDIUM.value:
        return [FilterOptions("due_date", "gt", tomorrow), FilterOptions("due_date", "lte", week)]
    if bucket == TaskPriority.LOW.value:
        return [FilterOptions("due_date", "gt", week)]
    return None


class FarmTaskRepository(BaseRepository[FarmTask]):
    """Репозиторий задач фермера"""

    table_name = "farm_tasks"
    record_type = FarmTask

    def find_by_farmer(self, farmer_id: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("farmer_id", "eq", farmer_id)], options)

    def find_by_status(self, status: str, options: Optional[QueryOptions] = None) -> RepositoryResult:
        return self.find_where([FilterOptions("status", "eq", status)], options)

    def find_overdue(self, today: date, farmer_id: Optional[str] = None) -> RepositoryResult:
        """Незавершенные задачи со сроком раньше сегодняшнего дня"""
        filters = [
            FilterOptions("due_date", "lt", today.isoformat()),
            FilterOptions("status", "neq", "completed"),
        ]
        if farmer_id:
            filters.append(FilterOptions("farmer_id", "eq", farmer_id))
        return self.find_where(filters, QueryOptions(sorts=BY_DUE_DATE))

    def find_by_priority(self, priority: str, today: date,
                         farmer_id: Optional[str] = None) -> RepositoryResult:
        """Незавершенные задачи корзины приоритета, по возрастанию срока"""
        filters = priority_filters(priority, today)
        if filters is None:
            logger.warning(f"Неизвестный приоритет задачи: {priority}")
            return RepositoryResult(data=[], count=0)
        filters.append(FilterOptions("status", "neq", "completed"))
        if farmer_id:
            filters.append(FilterOptions("farmer_id", "eq", farmer_id))
        return self.find_where(filters, QueryOptions(sorts=BY_DUE_DATE))
