"""
MODULE: main
RESPONSIBILITY: Command line entry point for payload validation and status graph inspection.
ALLOWED: sys, argparse, json, loguru, config.settings, logger, validators.registry.
FORBIDDEN: Database writes.
ERRORS: Exit code 1 on invalid payload or unknown entity, 2 on bad arguments.

Консольная утилита маркетплейса.

Использование:
    python main.py entities
    python main.py validate certifications '{"farmer_id": "..."}' --mode create
    python main.py transitions negotiations
"""

import argparse
import json
import sys
from typing import List, Optional

from loguru import logger

from config.settings import config
from logger import setup_logging
from validators.registry import ValidatorRegistry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Проверка данных сущностей маркетплейса')
    subparsers = parser.add_subparsers(dest='command', required=True)

    validate_parser = subparsers.add_parser('validate', help='Проверить JSON-данные сущности')
    validate_parser.add_argument('entity', type=str, help='Тип сущности (например, certifications)')
    validate_parser.add_argument('payload', type=str, help='JSON-объект с полями сущности')
    validate_parser.add_argument(
        '--mode',
        type=str,
        choices=['create', 'update'],
        default='create',
        help='Режим проверки: create (все правила) или update (только переданные поля)'
    )

    transitions_parser = subparsers.add_parser('transitions', help='Показать граф статусов сущности')
    transitions_parser.add_argument('entity', type=str, help='Тип сущности')

    subparsers.add_parser('entities', help='Список поддерживаемых сущностей')
    return parser


def run_validate(registry: ValidatorRegistry, entity: str, payload: str, mode: str) -> int:
    validator = registry.get_validator(entity)
    if validator is None:
        logger.error(f"Неизвестный тип сущности: {entity}")
        return 1

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as error:
        logger.error(f"Некорректный JSON: {error}")
        return 1
    if not isinstance(data, dict):
        logger.error("Ожидается JSON-объект")
        return 1

    result = validator.validate_create(data) if mode == 'create' else validator.validate_update(data)
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    if not result.is_valid:
        logger.warning(f"{entity}: найдено ошибок - {len(result.errors)}")
        return 1
    logger.info(f"{entity}: данные корректны")
    return 0


def run_transitions(registry: ValidatorRegistry, entity: str) -> int:
    validator = registry.get_validator(entity)
    if validator is None:
        logger.error(f"Неизвестный тип сущности: {entity}")
        return 1
    if validator.transitions is None:
        logger.error(f"У сущности {entity} нет статусов")
        return 1
    for line in validator.transitions.describe():
        print(line)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Основная функция консольной утилиты."""
    args = build_parser().parse_args(argv)
    setup_logging(config.app, to_files=False)

    registry = ValidatorRegistry(config.business_rules)
    if args.command == 'validate':
        return run_validate(registry, args.entity, args.payload, args.mode)
    if args.command == 'transitions':
        return run_transitions(registry, args.entity)
    for entity in registry.supported_entity_types():
        print(entity)
    return 0


if __name__ == "__main__":
    sys.exit(main())
