"""
MODULE: validators.certification_validator
RESPONSIBILITY: Validate farm certifications (organic, HACCP, ...).
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидатор сертификатов фермера.

Проверяет номер и орган выдачи, срок действия (не короче и не длиннее
лимитов), список документов и заметки верификации. Изменять сертификат
можно только в статусах pending / rejected.
"""

import re
from typing import Any, List, Mapping

from config.settings import CertificationRules
from core.contracts import ValidationResult
from core.models import CertificationType, enum_values
from validators import primitives as p
from validators.base import EntityValidator
from validators.rules import (
    Rule, date_field, enum_field, error, max_length_field, pattern_field, present,
    status_field, string_field, url_list_field, uuid_field,
)
from validators.transitions import CERTIFICATION_TRANSITIONS

CERTIFICATE_NUMBER_PATTERN = re.compile(r"^[A-Za-z0-9\-_]{5,50}$")


class CertificationValidator(EntityValidator):
    """Валидатор сертификатов"""

    entity_type = "certifications"
    required_fields = ("farmer_id", "certification_type", "certificate_number",
                       "issuing_body", "issue_date", "expiry_date")
    transitions = CERTIFICATION_TRANSITIONS
    editable_statuses = frozenset({"pending", "rejected"})

    def __init__(self, rules: CertificationRules = None, **kwargs):
        super().__init__(rules or CertificationRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        return [
            uuid_field("farmer_id"),
            enum_field("certification_type", enum_values(CertificationType), code="INVALID_TYPE"),
            pattern_field(
                "certificate_number",
                CERTIFICATE_NUMBER_PATTERN,
                "Номер сертификата: 5-50 символов (буквы, цифры, - и _)",
            ),
            string_field("issuing_body", 2, 100),
            date_field("issue_date"),
            date_field("expiry_date"),
            url_list_field("document_urls", self.rules.max_documents, count_code="TOO_MANY_DOCUMENTS"),
            max_length_field("verification_notes", self.rules.max_notes_length, code="NOTES_TOO_LONG"),
            string_field("verified_by", 2, 100),
            status_field(CERTIFICATION_TRANSITIONS.statuses),
        ]

    def cross_rules(self) -> List[Rule]:
        return [self._validity_period]

    def create_rules(self) -> List[Rule]:
        return [self._documents_present]

    def _validity_period(self, data: Mapping[str, Any]):
        """Срок действия: expiry позже issue и укладывается в лимиты в месяцах"""
        issue = p.parse_date(data.get("issue_date"))
        expiry = p.parse_date(data.get("expiry_date"))
        if issue is None or expiry is None:
            return []
        if expiry <= issue:
            return [error("expiry_date", "Дата окончания должна быть позже даты выдачи",
                          "INVALID_DATE_RANGE")]
        months = p.months_between(issue, expiry)
        if months > self.rules.max_validity_years * 12:
            return [error("expiry_date",
                          f"Срок действия не может превышать {self.rules.max_validity_years} лет",
                          "VALIDITY_TOO_LONG")]
        if months < self.rules.min_validity_months:
            return [error("expiry_date",
                          f"Срок действия должен быть не менее {self.rules.min_validity_months} месяцев",
                          "VALIDITY_TOO_SHORT")]
        return []

    @staticmethod
    def _documents_present(data: Mapping[str, Any]):
        # Любой известный тип сертификата требует подтверждающих документов
        if data.get("certification_type") not in enum_values(CertificationType):
            return []
        if present(data, "document_urls") and data["document_urls"]:
            return []
        return [error("document_urls", "Для этого типа сертификата нужны документы",
                      "DOCUMENTS_REQUIRED")]

    def validate_verification(self, data: Mapping[str, Any]) -> ValidationResult:
        """Проверка данных верификации (кто проверил, заметки)"""
        errors = []
        if not p.is_valid_string(data.get("verified_by"), 2):
            errors.append(error("verified_by", "Укажите проверяющего (не менее 2 символов)", "REQUIRED"))
        notes = data.get("verification_notes")
        if notes is not None and (not isinstance(notes, str) or len(notes) > self.rules.max_notes_length):
            errors.append(error("verification_notes",
                                f"Заметки не должны превышать {self.rules.max_notes_length} символов",
                                "NOTES_TOO_LONG"))
        return ValidationResult(errors)
