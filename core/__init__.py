"""
CORE LAYER CONTRACT

This package contains core application components and abstractions.

RULES:
- Contains fundamental building blocks for all layers
- Defines records, contracts and Protocol interfaces
- No business rules (validators own them)
- The only infrastructure here is the PostgreSQL adapter (core.database)

LAYER RESPONSIBILITY:
- MarketplaceError hierarchy
- Database connection management
- Query options, result envelopes and validation results
- Entity records and status enums
- Dependency injection container

CROSS-LAYER RESTRICTIONS:
- contracts, models, interfaces and exceptions import nothing from validators or services
- Only dependency_injection wires concrete services

If you need entity rules, you are in the wrong layer.
"""
