"""
MODULE: validators.quality_report_validator
RESPONSIBILITY: Validate product quality inspection reports.
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидатор отчетов о качестве.

Оценка (grade) должна соответствовать баллу (score) по полосам:
A+ 95-100, A 85-94, B+ 75-84, B 65-74, C 50-64, D 0-49.
Дробный балл относится к полосе по нижней границе (94.5 -> A).
"""

from typing import Any, List, Mapping, Optional

from config.settings import QualityReportRules
from core.contracts import ValidationResult
from core.models import QualityGrade, enum_values
from validators import primitives as p
from validators.base import EntityValidator
from validators.rules import (
    Rule, date_field, enum_field, error, max_length_field, not_future_field,
    present, range_field, status_field, string_field, uuid_fields,
)
from validators.transitions import QUALITY_REPORT_TRANSITIONS

GRADE_BANDS = (
    ("A+", 95.0),
    ("A", 85.0),
    ("B+", 75.0),
    ("B", 65.0),
    ("C", 50.0),
    ("D", 0.0),
)

REQUIRED_PARAMETERS = ("appearance", "freshness", "size_uniformity", "color")


def grade_for_score(score: float) -> Optional[str]:
    """Оценка, соответствующая баллу 0..100 (None вне диапазона)"""
    if not p.is_within_range(score, 0, 100):
        return None
    for grade, lower in GRADE_BANDS:
        if score >= lower:
            return grade
    return None


class QualityReportValidator(EntityValidator):
    """Валидатор отчетов о качестве"""

    entity_type = "quality_reports"
    required_fields = ("product_id", "inspector_id", "farmer_id", "report_date",
                       "overall_grade", "overall_score", "quality_notes",
                       "parameters", "defect_percentage")
    transitions = QUALITY_REPORT_TRANSITIONS
    editable_statuses = frozenset({"pending", "under_review"})

    def __init__(self, rules: QualityReportRules = None, **kwargs):
        super().__init__(rules or QualityReportRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        rules = self.rules
        return [
            *uuid_fields("product_id", "inspector_id", "farmer_id"),
            date_field("report_date"),
            not_future_field("report_date", self.clock),
            enum_field("overall_grade", enum_values(QualityGrade), code="INVALID_GRADE"),
            range_field("overall_score", rules.min_score, rules.max_score, code="INVALID_SCORE"),
            self._parameters,
            range_field("defect_percentage", 0, 100, code="INVALID_PERCENTAGE"),
            self._defect_limit,
            self._defects,
            string_field("quality_notes", 1, rules.max_notes_length),
            max_length_field("recommendations", rules.max_notes_length),
            string_field("approved_by", 2, 100),
            status_field(QUALITY_REPORT_TRANSITIONS.statuses),
        ]

    def cross_rules(self) -> List[Rule]:
        return [self._grade_matches_score]

    @staticmethod
    def _grade_matches_score(data: Mapping[str, Any]):
        if not (present(data, "overall_grade") and present(data, "overall_score")):
            return []
        grade, score = data["overall_grade"], data["overall_score"]
        expected = grade_for_score(score)
        if grade not in enum_values(QualityGrade) or expected is None:
            return []
        if grade != expected:
            return [error("overall_grade",
                          f"Оценка {grade} не соответствует баллу {score} (ожидается {expected})",
                          "INCONSISTENT_GRADE_SCORE")]
        return []

    @staticmethod
    def _parameters(data: Mapping[str, Any]):
        if not present(data, "parameters"):
            return []
        parameters = data["parameters"]
        if not isinstance(parameters, Mapping):
            return [error("parameters", "Параметры должны быть объектом", "INVALID_TYPE")]
        errors = []
        for name in REQUIRED_PARAMETERS:
            if name not in parameters:
                errors.append(error(f"parameters.{name}", f"Отсутствует параметр {name}",
                                    "MISSING_PARAMETER"))
            elif not p.is_required(parameters[name]):
                errors.append(error(f"parameters.{name}", f"Параметр {name} не может быть пустым",
                                    "EMPTY_PARAMETER"))
        for name, value in parameters.items():
            if p.is_number(value) and not 0 <= value <= 100:
                errors.append(error(f"parameters.{name}", f"Параметр {name} должен быть от 0 до 100",
                                    "INVALID_PARAMETER_VALUE"))
        return errors

    def _defect_limit(self, data: Mapping[str, Any]):
        value = data.get("defect_percentage")
        limit = self.rules.max_defect_percentage
        if p.is_within_range(value, 0, 100) and value > limit:
            return [error("defect_percentage", f"Доля дефектов превышает {limit}%",
                          "EXCESSIVE_DEFECTS")]
        return []

    def _defects(self, data: Mapping[str, Any]):
        if not present(data, "defects_found"):
            return []
        defects = data["defects_found"]
        if not isinstance(defects, (list, tuple)):
            return [error("defects_found", "Дефекты должны быть списком", "INVALID_TYPE")]
        errors = []
        if len(defects) > self.rules.max_defects:
            errors.append(error("defects_found", f"Не более {self.rules.max_defects} дефектов",
                                "TOO_MANY_DEFECTS"))
        for index, defect in enumerate(defects):
            if not p.is_valid_string(defect):
                errors.append(error(f"defects_found[{index}]", "Пустое описание дефекта", "EMPTY_DEFECT"))
            elif len(defect) > self.rules.max_defect_length:
                errors.append(error(f"defects_found[{index}]",
                                    f"Описание дефекта длиннее {self.rules.max_defect_length} символов",
                                    "DEFECT_TOO_LONG"))
        return errors

    def validate_approval(self, data: Mapping[str, Any]) -> ValidationResult:
        """Проверка данных утверждения отчета"""
        if not p.is_valid_string(data.get("approved_by"), 2):
            return ValidationResult([error("approved_by", "Укажите утверждающего (не менее 2 символов)",
                                           "REQUIRED")])
        return ValidationResult()
