"""
MODULE: validators.review_validator
RESPONSIBILITY: Validate listing reviews, moderation updates and rating patterns.
ALLOWED: validators.base, validators.rules, config.settings.
FORBIDDEN: I/O, database access.
ERRORS: None.

Валидатор отзывов.
"""

from typing import Any, List, Mapping, Sequence

from config.settings import ReviewRules
from core.contracts import ValidationResult
from validators import primitives as p
from validators.base import EntityValidator
from validators.rules import (
    Rule, clean_content_field, error, integer_field, range_field, status_field,
    string_field, uuid_fields,
)
from validators.transitions import REVIEW_TRANSITIONS


class ReviewValidator(EntityValidator):
    """Валидатор отзывов"""

    entity_type = "reviews"
    required_fields = ("reviewer_id", "listing_id", "rating")
    transitions = REVIEW_TRANSITIONS

    def __init__(self, rules: ReviewRules = None, **kwargs):
        super().__init__(rules or ReviewRules(), **kwargs)

    def field_rules(self) -> List[Rule]:
        rules = self.rules
        return [
            *uuid_fields("reviewer_id", "listing_id", "farmer_id"),
            range_field("rating", rules.min_rating, rules.max_rating),
            integer_field("rating"),
            string_field("comment", rules.min_comment_length, rules.max_comment_length),
            clean_content_field("comment"),
            string_field("admin_notes", 1, rules.max_admin_notes_length, code="MAX_LENGTH"),
            status_field(REVIEW_TRANSITIONS.statuses),
        ]

    def validate_moderation_update(self, data: Mapping[str, Any]) -> ValidationResult:
        errors = []
        status = data.get("status")
        if not status:
            errors.append(error("status", "Статус обязателен для модерации", "REQUIRED"))
        elif status not in REVIEW_TRANSITIONS.statuses:
            errors.append(error("status", f"Неизвестный статус отзыва: {status}", "INVALID_STATUS"))
        notes = data.get("admin_notes")
        if notes and not p.is_valid_string(notes, 1, self.rules.max_admin_notes_length):
            errors.append(error("admin_notes",
                                f"Заметки модератора не длиннее {self.rules.max_admin_notes_length} символов",
                                "MAX_LENGTH"))
        return ValidationResult(errors)

    @staticmethod
    def validate_rating_pattern(ratings: Sequence[int]) -> ValidationResult:
        """
        Поиск подозрительных распределений оценок

        Пять и более одинаковых оценок или, начиная с десяти оценок,
        более 90% высоких (>=4) либо низких (<=2) считаются подозрительными.
        """
        if not ratings:
            return ValidationResult()
        errors = []
        if len(ratings) >= 5 and len(set(ratings)) == 1:
            errors.append(error("ratings", "Подозрительно: все оценки одинаковы", "SUSPICIOUS"))
        high_ratio = sum(1 for rating in ratings if rating >= 4) / len(ratings)
        low_ratio = sum(1 for rating in ratings if rating <= 2) / len(ratings)
        if len(ratings) >= 10 and (high_ratio > 0.9 or low_ratio > 0.9):
            errors.append(error("ratings", "Подозрительно: необычное распределение оценок", "SUSPICIOUS"))
        return ValidationResult(errors)
