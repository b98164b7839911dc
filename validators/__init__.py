"""
VALIDATORS LAYER CONTRACT

Чистые проверки данных сущностей маркетплейса.

RULES:
- Никакого I/O, никаких обращений к БД
- Все нарушения собираются, первая ошибка не прерывает проверку
- Текущее время берется только из clock валидатора
"""
