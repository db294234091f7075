"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

The request boundary maps failures onto HTTP status codes. It can only do
that reliably when every failure has a TYPE and a machine-readable CODE,
and carries its context as attributes instead of inside a message string:

    try:
        issue_slips.update_status_to_issued(slip_id, request)
    except ExceedsInitialQuantityError as e:
        api_response(400, code=e.code, remaining=e.remaining)
    except NotFoundError as e:
        api_response(404, code=e.code)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- NotFoundError
    |   +-- AssetNotFoundError
    |   +-- StockNotFoundError
    |   +-- OfficeNotFoundError
    |   +-- UserNotFoundError
    |   +-- DocumentNotFoundError
    |
    +-- BadRequestError
    |   +-- InsufficientStockError
    |   +-- ExceedsInitialQuantityError
    |   +-- DuplicateKeyError
    |   +-- InvalidTransitionError
    |   +-- InvalidConditionTransitionError
    |   +-- InvalidBatchItemError
    |   +-- InvalidMovementError
    |   +-- AssetHasStockError
    |   +-- StaleStockReferenceError
    |   +-- SerialNumberCountError
    |   +-- CostNotDefinedError
    |   +-- ValidationFailedError
    |
    +-- InternalServerError
    |   +-- CollaboratorError
    |   |   +-- DirectoryUnavailableError
    |   |   +-- NotificationError
    |   +-- ConfigurationError
    |
    +-- TransactionError
    |   +-- TransactionRequiredError
    |   +-- TransactionOwnershipError
    |
    +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                          | When Raised
----------------|-------------------------------|----------------------------------------
NotFound        | ASSET_NOT_FOUND               | Asset missing or soft-deleted
                | STOCK_NOT_FOUND               | Ledger entry id does not exist
                | OFFICE_NOT_FOUND              | Directory has no such office
                | USER_NOT_FOUND                | Directory has no such user
                | DOCUMENT_NOT_FOUND            | Lifecycle document id does not exist
----------------|-------------------------------|----------------------------------------
BadRequest      | INSUFFICIENT_STOCK            | Movement would exceed on-hand quantity
                | EXCEEDS_INITIAL_QUANTITY      | Issuance beyond the initial allotment
                | DUPLICATE_KEY                 | Natural key (type + name) already used
                | INVALID_TRANSITION            | Document status change not allowed
                | INVALID_CONDITION_TRANSITION  | Unit condition change not allowed
                | INVALID_BATCH_ITEM            | Malformed batch item
                | INVALID_MOVEMENT              | ins/outs combination not allowed
                | ASSET_HAS_STOCK               | Deleting an asset with issued units
                | STALE_STOCK_REFERENCE         | Entry is no longer the unit's latest
                | SERIAL_NUMBER_COUNT           | More serial numbers than units
                | COST_NOT_DEFINED              | Asset has no cost to classify by
                | VALIDATION_FAILED             | Request DTO failed validation
----------------|-------------------------------|----------------------------------------
Internal        | DIRECTORY_UNAVAILABLE         | Directory lookup raised unexpectedly
                | NOTIFICATION_FAILED           | Notification dispatch failed
                | CONFIGURATION_ERROR           | Required configuration missing
----------------|-------------------------------|----------------------------------------
Transaction     | TRANSACTION_REQUIRED          | Low-level write outside a unit of work
                | TRANSACTION_OWNERSHIP         | Second unit of work on one session
----------------|-------------------------------|----------------------------------------
Immutability    | IMMUTABILITY_VIOLATION        | Update/delete of a ledger entry

===============================================================================
"""


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses carry a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Not found


class NotFoundError(InventoryKernelError):
    """Referenced record does not exist or is soft-deleted."""

    code: str = "NOT_FOUND"


class AssetNotFoundError(NotFoundError):
    """Asset with given ID was not found."""

    code: str = "ASSET_NOT_FOUND"

    def __init__(self, asset_id: str):
        self.asset_id = str(asset_id)
        super().__init__(f"Asset not found: {asset_id}")


class StockNotFoundError(NotFoundError):
    """Stock ledger entry with given ID was not found."""

    code: str = "STOCK_NOT_FOUND"

    def __init__(self, stock_id: str):
        self.stock_id = str(stock_id)
        super().__init__(f"Stock not found: {stock_id}")


class OfficeNotFoundError(NotFoundError):
    """Office with given ID was not found in the directory."""

    code: str = "OFFICE_NOT_FOUND"

    def __init__(self, office_id: str | None):
        self.office_id = str(office_id) if office_id is not None else None
        super().__init__(f"Office not found: {office_id}")


class UserNotFoundError(NotFoundError):
    """User with given ID was not found in the directory."""

    code: str = "USER_NOT_FOUND"

    def __init__(self, user_id: str | None, role: str = "user"):
        self.user_id = str(user_id) if user_id is not None else None
        self.role = role
        super().__init__(f"{role.capitalize()} not found: {user_id}")


class DocumentNotFoundError(NotFoundError):
    """Lifecycle document with given ID was not found."""

    code: str = "DOCUMENT_NOT_FOUND"

    def __init__(self, document_type: str, document_id: str):
        self.document_type = document_type
        self.document_id = str(document_id)
        super().__init__(f"{document_type} not found: {document_id}")


# Bad request


class BadRequestError(InventoryKernelError):
    """A precondition supplied by the caller was violated."""

    code: str = "BAD_REQUEST"


class InsufficientStockError(BadRequestError):
    """The movement would take more units than the asset has on hand."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, asset_id: str, asset_name: str, available: int, requested: int):
        self.asset_id = str(asset_id)
        self.asset_name = asset_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {asset_name}. "
            f"Available: {available}, Requested: {requested}"
        )


class ExceedsInitialQuantityError(BadRequestError):
    """Issuance would number units beyond the asset's initial quantity."""

    code: str = "EXCEEDS_INITIAL_QUANTITY"

    def __init__(self, asset_id: str, initial_qty: int, total_issued: int, requested: int):
        self.asset_id = str(asset_id)
        self.initial_qty = initial_qty
        self.total_issued = total_issued
        self.requested = requested
        self.remaining = initial_qty - total_issued
        super().__init__(
            f"Requested quantity {requested} exceeds the remaining "
            f"{self.remaining} of initial quantity {initial_qty}"
        )


class DuplicateKeyError(BadRequestError):
    """A record with the same natural key already exists."""

    code: str = "DUPLICATE_KEY"

    def __init__(self, entity_type: str, key: str):
        self.entity_type = entity_type
        self.key = key
        super().__init__(f"{entity_type} already exists: {key}")


class InvalidTransitionError(BadRequestError):
    """Document status change is not in the document's transition table."""

    code: str = "INVALID_TRANSITION"

    def __init__(self, document_type: str, current: str, target: str):
        self.document_type = document_type
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move {document_type} from '{current}' to '{target}'"
        )


class InvalidConditionTransitionError(BadRequestError):
    """Unit condition change is not in the condition transition table."""

    code: str = "INVALID_CONDITION_TRANSITION"

    def __init__(self, current: str | None, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f"Stock in condition '{current}' cannot become '{target}'"
        )


class InvalidBatchItemError(BadRequestError):
    """A batch item is malformed."""

    code: str = "INVALID_BATCH_ITEM"

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Invalid batch item #{index}: {reason}")


class InvalidMovementError(BadRequestError):
    """The ins/outs/balance combination is not allowed for the condition."""

    code: str = "INVALID_MOVEMENT"

    def __init__(self, condition: str, reason: str):
        self.condition = condition
        self.reason = reason
        super().__init__(f"Invalid '{condition}' movement: {reason}")


class AssetHasStockError(BadRequestError):
    """Property asset cannot be deleted once units have left the pool."""

    code: str = "ASSET_HAS_STOCK"

    def __init__(self, asset_id: str, initial_qty: int, quantity: int):
        self.asset_id = str(asset_id)
        self.initial_qty = initial_qty
        self.quantity = quantity
        super().__init__("Cannot delete asset because it has associated stock.")


class StaleStockReferenceError(BadRequestError):
    """The referenced entry is no longer the latest entry for its unit."""

    code: str = "STALE_STOCK_REFERENCE"

    def __init__(self, stock_id: str, latest_stock_id: str):
        self.stock_id = str(stock_id)
        self.latest_stock_id = str(latest_stock_id)
        super().__init__(
            f"Stock {stock_id} has been superseded by {latest_stock_id}"
        )


class SerialNumberCountError(BadRequestError):
    """More serial numbers were supplied than units requested."""

    code: str = "SERIAL_NUMBER_COUNT"

    def __init__(self, serial_count: int, quantity: int):
        self.serial_count = serial_count
        self.quantity = quantity
        super().__init__(
            f"Serial numbers ({serial_count}) exceed the quantity ({quantity})"
        )


class CostNotDefinedError(BadRequestError):
    """Asset has no cost, so the slip type cannot be determined."""

    code: str = "COST_NOT_DEFINED"

    def __init__(self, asset_id: str):
        self.asset_id = str(asset_id)
        super().__init__("Asset cost is not defined.")


class ValidationFailedError(BadRequestError):
    """A request DTO failed schema validation at the boundary."""

    code: str = "VALIDATION_FAILED"

    def __init__(self, dto_name: str, field_errors: list[dict]):
        self.dto_name = dto_name
        self.field_errors = field_errors
        super().__init__(
            f"Validation failed for {dto_name}: {len(field_errors)} error(s)"
        )


# Internal


class InternalServerError(InventoryKernelError):
    """Unexpected failure not attributable to caller input."""

    code: str = "INTERNAL_SERVER_ERROR"


class CollaboratorError(InternalServerError):
    """An external collaborator failed."""

    code: str = "COLLABORATOR_ERROR"


class DirectoryUnavailableError(CollaboratorError):
    """The directory service raised while resolving an office or user."""

    code: str = "DIRECTORY_UNAVAILABLE"

    def __init__(self, lookup: str, key: str, reason: str):
        self.lookup = lookup
        self.key = str(key)
        self.reason = reason
        super().__init__(f"Directory {lookup}({key}) failed: {reason}")


class NotificationError(CollaboratorError):
    """Notification dispatch failed."""

    code: str = "NOTIFICATION_FAILED"

    def __init__(self, recipient: str, reason: str):
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Notification to {recipient} failed: {reason}")


class ConfigurationError(InternalServerError):
    """A required configuration value is missing."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Required configuration not found: {name}")


# Transactions


class TransactionError(InventoryKernelError):
    """Base exception for unit-of-work misuse."""

    code: str = "TRANSACTION_ERROR"


class TransactionRequiredError(TransactionError):
    """A low-level write was attempted outside an active unit of work."""

    code: str = "TRANSACTION_REQUIRED"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} requires an active unit of work")


class TransactionOwnershipError(TransactionError):
    """A unit of work was opened on a session that already has one."""

    code: str = "TRANSACTION_OWNERSHIP"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"{operation} owns its transaction; the session already has an "
            "active unit of work"
        )


# Immutability


class ImmutabilityViolationError(InventoryKernelError):
    """Attempted to modify or delete an append-only record."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = str(entity_id)
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )
