"""Boundary handlers: form submissions and JSON API calls.

Each handler is given its validator, repository and message source
explicitly. The flow is always the same: turn raw input into a candidate,
validate it for the right context, then either hand the report back to the
caller or persist the item.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from item_validation.binding import FormBinder
from item_validation.errors import ItemNotFoundError, PayloadError
from item_validation.events import (
    ObservableMixin,
    ValidationEvent,
    ValidationEventType,
)
from item_validation.messages import StaticMessageSource, render_errors, resolve_message
from item_validation.models import Item, ItemCandidate, ItemSaveForm, ItemUpdateForm
from item_validation.payload import parse_payload
from item_validation.protocols import MessageSource, ValidatorProtocol
from item_validation.repository import ItemRepository
from item_validation.results import ErrorReport
from item_validation.validators import ValidationContext

__all__ = ["FormResult", "ItemFormHandler", "ApiResponse", "ItemApiHandler"]

logger = logging.getLogger(__name__)


@dataclass
class FormResult:
    """Outcome of a form submission.

    Attributes:
        report: Binding and validation errors. Empty when accepted.
        form: The bound candidate, for redisplay together with
            report.field_value().
        item: The persisted item when accepted.
        messages: Rendered error messages keyed by field (None for global
            errors). Empty when accepted.
        redirect: Where to send the user after a successful submission.
    """

    report: ErrorReport
    form: ItemCandidate
    item: Item | None = None
    messages: dict[str | None, list[str]] = field(default_factory=dict)
    redirect: str | None = None

    @property
    def accepted(self) -> bool:
        return not self.report.has_errors()


class ItemFormHandler(ObservableMixin):
    """Handles item form submissions (create and edit).

    Emits ITEM_SAVED and ITEM_UPDATED events. Binding and validation
    events come from the binder and validator; add observers there.

    Example:
        handler = ItemFormHandler(MemoryItemRepository(), ItemValidator())
        result = handler.add_item({"name": "pen", "price": "1000", "quantity": "10"})
        if result.accepted:
            redirect(result.redirect)
        else:
            render_form(result.form, result.messages)
    """

    def __init__(
        self,
        repository: ItemRepository,
        validator: ValidatorProtocol,
        *,
        messages: MessageSource | None = None,
        binder: FormBinder | None = None,
        base_path: str = "/validation/items",
    ) -> None:
        """Initialize the handler.

        Args:
            repository: Store for accepted items.
            validator: Validator for bound candidates.
            messages: Message catalog for rendering errors. Defaults to the
                built-in English catalog.
            binder: Form binder. Defaults to one using the validator's
                object name.
            base_path: Path prefix for redirects.
        """
        self._repository = repository
        self._validator = validator
        self._messages = messages if messages is not None else StaticMessageSource.default()
        self._binder = binder or FormBinder(
            object_name=getattr(validator, "object_name", "item")
        )
        self._base_path = base_path.rstrip("/")

    @property
    def binder(self) -> FormBinder:
        return self._binder

    def list_items(self) -> list[Item]:
        return self._repository.find_all()

    def get_item(self, item_id: int) -> Item:
        """Get an item for display or for the edit form.

        Raises:
            ItemNotFoundError: If no item has this id.
        """
        item = self._repository.find_by_id(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def add_item(self, params: Mapping[str, Any]) -> FormResult:
        """Bind, validate and save a new item.

        Args:
            params: Raw form parameters.

        Returns:
            FormResult; check ``accepted``.
        """
        bound = self._binder.bind(params, ItemSaveForm)
        report = self._validator.validate(bound.candidate, ValidationContext.SAVE, bound.report)

        if report.has_errors():
            return self._rejected(bound.candidate, report)

        saved = self._repository.save(Item.from_form(bound.candidate))
        logger.info("saved item id=%s", saved.id)
        self.notify(
            ValidationEvent(
                event_type=ValidationEventType.ITEM_SAVED,
                source=self,
                data={"item_id": saved.id, "item": saved},
            )
        )
        return FormResult(
            report=report,
            form=bound.candidate,
            item=saved,
            redirect=f"{self._base_path}/{saved.id}",
        )

    def edit_item(self, item_id: int, params: Mapping[str, Any]) -> FormResult:
        """Bind, validate and apply an edit to an existing item.

        The identity checked by validation is the one submitted with the
        form; the item updated is the one named by item_id.

        Args:
            item_id: Id of the item being edited.
            params: Raw form parameters, including ``id``.

        Returns:
            FormResult; check ``accepted``.

        Raises:
            ItemNotFoundError: If no item has this id.
        """
        self.get_item(item_id)

        bound = self._binder.bind(params, ItemUpdateForm)
        report = self._validator.validate(
            bound.candidate, ValidationContext.UPDATE, bound.report
        )

        if report.has_errors():
            return self._rejected(bound.candidate, report)

        updated = Item.from_form(bound.candidate, item_id=item_id)
        self._repository.update(item_id, updated)
        logger.info("updated item id=%s", item_id)
        self.notify(
            ValidationEvent(
                event_type=ValidationEventType.ITEM_UPDATED,
                source=self,
                data={"item_id": item_id, "item": updated},
            )
        )
        return FormResult(
            report=report,
            form=bound.candidate,
            item=updated,
            redirect=f"{self._base_path}/{item_id}",
        )

    def _rejected(self, form: ItemCandidate, report: ErrorReport) -> FormResult:
        logger.info("errors=%s", [e.code for e in report])
        return FormResult(
            report=report,
            form=form,
            messages=render_errors(report, self._messages),
        )


@dataclass
class ApiResponse:
    """Status code and JSON-ready body returned by ItemApiHandler."""

    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return self.status < 400


class ItemApiHandler(ObservableMixin):
    """Handles item creation from JSON payloads.

    A malformed payload is rejected before validation (status 400, with the
    parse errors). A payload that parses but breaks rules is rejected with
    the serialized error report (status 400). Otherwise the item is saved
    and returned (status 200).

    Emits PAYLOAD_REJECTED and ITEM_SAVED events.
    """

    def __init__(
        self,
        validator: ValidatorProtocol,
        repository: ItemRepository | None = None,
        *,
        messages: MessageSource | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            validator: Validator for parsed candidates.
            repository: Store for accepted items. When None, accepted
                candidates are echoed back without being stored.
            messages: Message catalog; when given, every serialized error
                also carries a rendered ``message``.
        """
        self._validator = validator
        self._repository = repository
        self._messages = messages

    def add_item(self, body: str | bytes | Mapping[str, Any]) -> ApiResponse:
        """Parse, validate and save an item from a request body.

        Args:
            body: JSON text/bytes or decoded mapping.

        Returns:
            ApiResponse with status and JSON-ready body. Rule violations
            answer 400 with the serialized report, the same status as a
            malformed payload; only an accepted item answers 200.
        """
        logger.info("API add_item called")

        try:
            form = parse_payload(body, ItemSaveForm)
        except PayloadError as e:
            self.notify(
                ValidationEvent(
                    event_type=ValidationEventType.PAYLOAD_REJECTED,
                    source=self,
                    data={"message": str(e), "details": e.details},
                )
            )
            return ApiResponse(status=400, body={"error": str(e), "details": e.details})

        report = self._validator.validate(form, ValidationContext.SAVE)
        if report.has_errors():
            logger.info("errors=%s", [e.code for e in report])
            return ApiResponse(status=400, body=self._serialize(report))

        if self._repository is None:
            return ApiResponse(status=200, body=form.model_dump())

        saved = self._repository.save(Item.from_form(form))
        logger.info("saved item id=%s", saved.id)
        self.notify(
            ValidationEvent(
                event_type=ValidationEventType.ITEM_SAVED,
                source=self,
                data={"item_id": saved.id, "item": saved},
            )
        )
        return ApiResponse(status=200, body=saved.model_dump())

    def _serialize(self, report: ErrorReport) -> list[dict[str, Any]]:
        errors = report.to_dicts()
        if self._messages is not None:
            for d, error in zip(errors, report.all_errors()):
                d["message"] = resolve_message(error, self._messages)
        return errors
