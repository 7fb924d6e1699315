"""Validation and error reporting for item create/update requests."""

from item_validation.binding import BindingResult, FormBinder, bind_form
from item_validation.errors import (
    ItemNotFoundError,
    ItemValidationError,
    MessageNotFoundError,
    PayloadError,
    UnsupportedCandidateError,
)
from item_validation.events import (
    ObservableMixin,
    ValidationEvent,
    ValidationEventType,
    ValidationObserver,
)
from item_validation.messages import (
    DEFAULT_MESSAGES,
    MessageCodesResolver,
    StaticMessageSource,
    render_errors,
    resolve_message,
)
from item_validation.models import Item, ItemCandidate, ItemSaveForm, ItemUpdateForm
from item_validation.observers import (
    ConsoleReportObserver,
    LoggingObserver,
    configure_logging,
    render_report,
)
from item_validation.payload import parse_payload
from item_validation.protocols import MessageSource, ValidatorProtocol
from item_validation.repository import ItemRepository, MemoryItemRepository
from item_validation.results import ErrorReport, FieldError, ObjectError
from item_validation.service import ApiResponse, FormResult, ItemApiHandler, ItemFormHandler
from item_validation.settings import ValidationSettings, get_settings
from item_validation.validators import (
    ItemRule,
    ItemValidator,
    ValidationContext,
    default_rules,
)

# Lazy imports for optional dependencies (sqlmodel)
_SQL_NAMES = frozenset({"SQLItemRepository", "ItemRecord"})


def __getattr__(name: str) -> type:
    """Lazy import for optional dependencies.

    The SQLModel repository requires the optional 'sqlmodel' package and is
    only loaded when first accessed, so the rest of the package imports
    without it.

    Args:
        name: The attribute name being accessed.

    Returns:
        The requested class from the sql_repository module.

    Raises:
        ImportError: If sqlmodel is not installed and a SQL component is requested.
        AttributeError: If the requested attribute doesn't exist.
    """
    if name in _SQL_NAMES:
        try:
            from item_validation.sql_repository import ItemRecord, SQLItemRepository

            _components = {
                "SQLItemRepository": SQLItemRepository,
                "ItemRecord": ItemRecord,
            }
            return _components[name]
        except ImportError as e:
            raise ImportError(
                f"{name} requires sqlmodel. Install with: pip install item-validation[sql]"
            ) from e
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Candidates and items
    "Item",
    "ItemCandidate",
    "ItemSaveForm",
    "ItemUpdateForm",
    # Validation
    "ItemRule",
    "ItemValidator",
    "ValidationContext",
    "ValidatorProtocol",
    "default_rules",
    # Error reports
    "ErrorReport",
    "FieldError",
    "ObjectError",
    # Messages
    "DEFAULT_MESSAGES",
    "MessageCodesResolver",
    "MessageSource",
    "StaticMessageSource",
    "render_errors",
    "resolve_message",
    # Boundaries
    "BindingResult",
    "FormBinder",
    "bind_form",
    "parse_payload",
    "ApiResponse",
    "FormResult",
    "ItemApiHandler",
    "ItemFormHandler",
    # Storage
    "ItemRepository",
    "MemoryItemRepository",
    # Observer pattern
    "ObservableMixin",
    "ValidationEvent",
    "ValidationEventType",
    "ValidationObserver",
    "ConsoleReportObserver",
    "LoggingObserver",
    "configure_logging",
    "render_report",
    # Configuration
    "ValidationSettings",
    "get_settings",
    # Errors
    "ItemNotFoundError",
    "ItemValidationError",
    "MessageNotFoundError",
    "PayloadError",
    "UnsupportedCandidateError",
    # SQL storage (lazy-loaded, requires sqlmodel optional dependency)
    "SQLItemRepository",
    "ItemRecord",
]

__version__ = "0.1.0"
