"""
SERVICES LAYER CONTRACT

This package contains repositories and entity services of the marketplace.

RULES:
- marketplace_repositories: parameterised SQL over one table per entity
- marketplace_services: use cases over one repository and one validator
- Services never touch SQL directly (use repositories)
- Nothing raises across the service boundary: every outcome is a ServiceResponse

LAYER RESPONSIBILITY:
- Business event logging
- Status workflows (through validator transition graphs)
- Translation of database errors into ServiceErrorCode

CROSS-LAYER RESTRICTIONS:
- No UI or presentation logic
- No direct connection handling (use the injected database manager)

If you need data access, use repositories through interfaces.
"""
