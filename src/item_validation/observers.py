"""Observers that report validation activity.

LoggingObserver forwards events to the standard ``logging`` module.
ConsoleReportObserver prints a Rich table of the errors whenever a
validation pass rejects a candidate.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from item_validation.events import (
    ValidationEvent,
    ValidationEventType,
    ValidationObserver,
)
from item_validation.messages import StaticMessageSource, resolve_message

if TYPE_CHECKING:
    from rich.console import Console
    from rich.table import Table

    from item_validation.protocols import MessageSource
    from item_validation.results import ErrorReport

__all__ = ["LoggingObserver", "ConsoleReportObserver", "render_report", "configure_logging"]


def configure_logging(level: str | None = None) -> None:
    """Configure root logging at the settings' level.

    Args:
        level: Level name. Defaults to ValidationSettings.log_level.
    """
    if level is None:
        from item_validation.settings import get_settings

        level = get_settings().log_level
    logging.basicConfig(level=level.upper())


class LoggingObserver(ValidationObserver):
    """Write validation events to a logger.

    Lifecycle events go out at DEBUG, accepted/persisted items at INFO,
    rejections (invalid candidates, binding failures, bad payloads) at
    WARNING.

    Example:
        validator = ItemValidator()
        validator.add_observer(LoggingObserver())
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("item_validation")

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def on_event(self, event: ValidationEvent) -> None:
        """Log one event.

        Args:
            event: The validation event to handle.
        """
        data = event.data
        event_type = event.event_type

        if event_type == ValidationEventType.VALIDATION_STARTED:
            self._logger.debug(
                "validation started (validator=%s, context=%s, rules=%d)",
                data.get("validator_name"),
                _context_name(data.get("context")),
                data.get("rule_count", 0),
            )

        elif event_type == ValidationEventType.ERROR_ADDED:
            error = data.get("error")
            self._logger.debug(
                "rule %s failed: %s", data.get("rule"), getattr(error, "codes", None)
            )

        elif event_type == ValidationEventType.VALIDATION_COMPLETED:
            if data.get("is_valid"):
                self._logger.debug(
                    "validation passed in %.2fms", data.get("duration_ms", 0.0)
                )
            else:
                self._logger.warning(
                    "validation failed (context=%s, errors=%d): %s",
                    _context_name(data.get("context")),
                    data.get("error_count", 0),
                    [e.code for e in data["report"]] if "report" in data else [],
                )

        elif event_type == ValidationEventType.BINDING_FAILED:
            self._logger.warning(
                "binding failed for field %s (value=%r)", data.get("field"), data.get("value")
            )

        elif event_type == ValidationEventType.PAYLOAD_REJECTED:
            self._logger.warning("payload rejected: %s", data.get("message"))

        elif event_type == ValidationEventType.ITEM_SAVED:
            self._logger.info("item saved (id=%s)", data.get("item_id"))

        elif event_type == ValidationEventType.ITEM_UPDATED:
            self._logger.info("item updated (id=%s)", data.get("item_id"))


def _context_name(context: object) -> str:
    return getattr(context, "name", str(context))


def render_report(report: ErrorReport, source: MessageSource | None = None) -> Table:
    """Build a Rich table listing a report's errors in order.

    Args:
        report: The report to render.
        source: Message catalog for the Message column. Defaults to the
            built-in English catalog.

    Returns:
        Rich Table with one row per error.
    """
    from rich.table import Table

    if source is None:
        source = StaticMessageSource.default()

    table = Table(
        title=f"Errors for '{report.object_name}'",
        show_header=True,
        header_style="bold magenta",
        expand=True,
    )
    table.add_column("Field", style="cyan", width=12)
    table.add_column("Code", style="yellow", width=16)
    table.add_column("Rejected", style="red", width=12)
    table.add_column("Message")

    for error in report.all_errors():
        field = getattr(error, "field", None)
        if field is None:
            table.add_row("[bold](global)[/]", error.code, "-", resolve_message(error, source))
            continue
        rejected = getattr(error, "rejected_value", None)
        table.add_row(
            field,
            error.code,
            "-" if rejected is None else repr(rejected),
            resolve_message(error, source),
        )

    if not report.has_errors():
        table.add_row("-", "-", "-", "No errors")

    return table


class ConsoleReportObserver(ValidationObserver):
    """Print rejected reports to a Rich console.

    Example:
        observer = ConsoleReportObserver()
        validator.add_observer(observer)
        validator.validate(ItemSaveForm(name="", price=100, quantity=1))
        # prints a table with the name, price and totalPriceMin errors

    Requires:
        pip install rich
    """

    def __init__(
        self,
        console: Console | None = None,
        source: MessageSource | None = None,
        *,
        show_valid: bool = False,
    ) -> None:
        """Initialize the observer.

        Args:
            console: Rich Console instance. If None, creates a new one.
            source: Message catalog for rendering. Defaults to the built-in
                English catalog.
            show_valid: Also print a line for candidates that pass.
        """
        from rich.console import Console

        self._console = console or Console()
        self._source = source if source is not None else StaticMessageSource.default()
        self._show_valid = show_valid
        self.rejected = 0
        self.accepted = 0

    def on_event(self, event: ValidationEvent) -> None:
        """Print the report of a finished validation pass.

        Args:
            event: The validation event to handle.
        """
        if event.event_type != ValidationEventType.VALIDATION_COMPLETED:
            return

        report = event.data.get("report")
        if event.data.get("is_valid"):
            self.accepted += 1
            if self._show_valid:
                self._console.print("[green]✓ valid[/]")
            return

        self.rejected += 1
        if report is not None:
            self._console.print(render_report(report, self._source))
