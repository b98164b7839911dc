"""
MODULE: services.marketplace_services.farm_task_service
RESPONSIBILITY: Farm task use cases (by farmer, status, priority bucket, overdue).
ALLOWED: base_service, farm_task_repository, farm_task_validator.
FORBIDDEN: SQL.
ERRORS: None escape (ServiceResponse.error).

Сервис полевых задач фермера.
Приоритет вычисляется из срока и добавляется в ответ, в БД не хранится.
"""

from typing import Any, Dict, List, Mapping, Optional

from core.contracts import RepositoryResult, ServiceResponse
from core.models import TaskStatus
from services.marketplace_repositories.farm_task_repository import FarmTaskRepository
from services.marketplace_services.base_service import BaseService
from validators.farm_task_validator import FarmTaskValidator, task_priority


class FarmTaskService(BaseService):
    """Сервис задач"""

    repository: FarmTaskRepository
    validator: FarmTaskValidator

    def priority_of(self, task: Mapping[str, Any]) -> Optional[str]:
        priority = task_priority(task.get("due_date"), self.clock().date())
        return priority.value if priority else None

    def with_priority(self, tasks: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """Копии задач с вычисленным полем priority"""
        return [dict(task, priority=self.priority_of(task)) for task in tasks]

    def tasks_response(self, result: RepositoryResult, operation: str) -> ServiceResponse:
        response = self.from_result(result, operation)
        if response.success and response.data:
            return self.create_response(self.with_priority(response.data))
        return response

    def get_by_farmer(self, farmer_id: str) -> ServiceResponse:
        self.log_business_event("get_by_farmer", farmer_id=farmer_id)
        missing = self.require(farmer_id=farmer_id)
        if missing:
            return missing
        return self.tasks_response(self.repository.find_by_farmer(farmer_id), "get_by_farmer")

    def get_by_status(self, status: str) -> ServiceResponse:
        self.log_business_event("get_by_status", status=status)
        missing = self.require(status=status)
        if missing:
            return missing
        return self.from_result(self.repository.find_by_status(status), "get_by_status")

    def get_by_priority(self, priority: str, farmer_id: Optional[str] = None) -> ServiceResponse:
        """Незавершенные задачи корзины high / medium / low"""
        self.log_business_event("get_by_priority", priority=priority, farmer_id=farmer_id)
        result = self.repository.find_by_priority(priority, self.clock().date(), farmer_id)
        return self.tasks_response(result, "get_by_priority")

    def get_overdue(self, farmer_id: Optional[str] = None) -> ServiceResponse:
        self.log_business_event("get_overdue", farmer_id=farmer_id)
        result = self.repository.find_overdue(self.clock().date(), farmer_id)
        return self.tasks_response(result, "get_overdue")

    def start(self, task_id: str) -> ServiceResponse:
        return self.update_status(task_id, TaskStatus.IN_PROGRESS.value)

    def complete(self, task_id: str) -> ServiceResponse:
        return self.update_status(task_id, TaskStatus.COMPLETED.value)
