"""
Module ORM Registry (``inventory_modules._orm_registry``).

Responsibility
--------------
Ensure every SQLAlchemy ORM model, kernel and module alike, is imported so
that ``Base.metadata`` holds its table before tables are created.

Also provides ``create_all_tables()`` -- the entry point scripts and
``tests/conftest.py`` use to get a complete schema.

Architecture position
---------------------
**Modules layer** -- utility.  Imports from sibling ``inventory_modules``
packages and from ``inventory_kernel`` (allowed: modules -> kernel).
"""


def import_all_orm_models() -> None:
    """Import kernel models and every ``inventory_modules.*.orm`` module.

    This function is idempotent -- repeated calls are harmless.
    """
    # Kernel tables first (assets, stock ledger, directory, counters)
    import inventory_kernel.models  # noqa: F401
    import inventory_kernel.services.sequence_service  # noqa: F401
    # fmt: off
    import inventory_modules.issue_slip.orm  # noqa: F401
    import inventory_modules.loss.orm  # noqa: F401
    import inventory_modules.maintenance.orm  # noqa: F401
    import inventory_modules.returns.orm  # noqa: F401
    import inventory_modules.ris.orm  # noqa: F401
    import inventory_modules.transfer.orm  # noqa: F401
    import inventory_modules.waste.orm  # noqa: F401
    # fmt: on


def create_all_tables() -> None:
    """Create kernel + all module tables.

    Preconditions:
        Engine must be initialized via ``init_engine_from_url()``.
    """
    from inventory_kernel.db.engine import create_tables

    import_all_orm_models()
    create_tables()
