"""Tests for form binding."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from item_validation import (
    FormBinder,
    ItemSaveForm,
    ItemUpdateForm,
    ItemValidator,
    StaticMessageSource,
    ValidationContext,
    ValidationEventType,
    ValidationSettings,
    bind_form,
    resolve_message,
)

from .conftest import RecordingObserver, codes_of

VALIDATOR = ItemValidator(settings=ValidationSettings(_env_file=None))  # type: ignore[call-arg]


class TestFormBinderUnit:
    """Unit tests for FormBinder."""

    def test_binds_string_params(self) -> None:
        bound = bind_form({"name": "pen", "price": "1000", "quantity": "10"}, ItemSaveForm)

        assert bound.candidate == ItemSaveForm(name="pen", price=1000, quantity=10)
        assert not bound.report.has_errors()
        assert not bound.has_binding_failures

    def test_report_targets_candidate(self) -> None:
        bound = bind_form({"name": "pen"}, ItemSaveForm)

        assert bound.report.target is bound.candidate

    def test_missing_params_are_absent(self) -> None:
        bound = bind_form({}, ItemSaveForm)

        assert bound.candidate == ItemSaveForm()
        assert not bound.report.has_errors()

    def test_blank_number_is_absent(self) -> None:
        """An empty or whitespace number field is treated as not provided."""
        bound = bind_form({"price": "", "quantity": "  "}, ItemSaveForm)

        assert bound.candidate.price is None
        assert bound.candidate.quantity is None
        assert not bound.report.has_errors()

    def test_blank_name_is_kept(self) -> None:
        """Text fields keep their raw value so the name rule can see it."""
        bound = bind_form({"name": "  "}, ItemSaveForm)

        assert bound.candidate.name == "  "

    def test_numbers_are_stripped(self) -> None:
        bound = bind_form({"price": " 1500 "}, ItemSaveForm)

        assert bound.candidate.price == 1500

    def test_type_mismatch(self) -> None:
        bound = bind_form({"name": "pen", "price": "abc", "quantity": "10"}, ItemSaveForm)

        assert bound.candidate.price is None
        assert bound.has_binding_failures
        error = bound.report.get_field_error("price")
        assert error is not None
        assert error.code == "typeMismatch"
        assert error.rejected_value == "abc"
        assert error.arguments == ("price",)
        assert error.binding_failure
        assert error.codes == (
            "typeMismatch.item.price",
            "typeMismatch.price",
            "typeMismatch.int",
            "typeMismatch",
        )

    def test_failed_field_redisplays_raw_input(self) -> None:
        bound = bind_form({"name": "pen", "price": "abc"}, ItemSaveForm)

        assert bound.report.field_value("price") == "abc"
        assert bound.report.field_value("name") == "pen"

    def test_every_bad_field_reported(self) -> None:
        bound = bind_form({"price": "x", "quantity": "1.5"}, ItemSaveForm)

        assert codes_of(bound.report) == [
            ("price", "typeMismatch"),
            ("quantity", "typeMismatch"),
        ]

    def test_unknown_params_ignored(self) -> None:
        bound = bind_form({"name": "pen", "color": "red"}, ItemSaveForm)

        assert not bound.report.has_errors()
        assert bound.candidate.name == "pen"

    def test_update_form_binds_id(self) -> None:
        bound = bind_form({"id": "7", "name": "pen"}, ItemUpdateForm)

        assert bound.candidate.id == 7

    def test_non_string_values(self) -> None:
        bound = bind_form({"price": 1000, "quantity": None}, ItemSaveForm)

        assert bound.candidate.price == 1000
        assert bound.candidate.quantity is None

    def test_object_name(self) -> None:
        bound = FormBinder(object_name="product").bind({"price": "abc"}, ItemSaveForm)

        error = bound.report.get_field_error("price")
        assert bound.report.object_name == "product"
        assert error is not None
        assert error.codes[0] == "typeMismatch.product.price"

    def test_fallback_message_names_field(self) -> None:
        """Without a catalog entry the default message is used."""
        error = bind_form({"price": "abc"}, ItemSaveForm).report.get_field_error("price")

        assert error is not None
        assert resolve_message(error, StaticMessageSource()) == (
            "Failed to convert value for field 'price'"
        )

    @pytest.mark.parametrize("raw", ["{abc}", "{0}", "{}", "{0!r:>{1}}", "}{"])
    def test_braces_in_input_stay_out_of_message(self, raw: str) -> None:
        """Raw input is kept as the rejected value, never formatted."""
        error = bind_form({"price": raw}, ItemSaveForm).report.get_field_error("price")

        assert error is not None
        assert error.rejected_value == raw
        assert resolve_message(error, StaticMessageSource()) == (
            "Failed to convert value for field 'price'"
        )

    def test_binding_failed_event(self, recorder: RecordingObserver) -> None:
        binder = FormBinder()
        binder.add_observer(recorder)

        binder.bind({"price": "abc", "quantity": "10"}, ItemSaveForm)

        assert recorder.event_types == [ValidationEventType.BINDING_FAILED]
        event = recorder.events[0]
        assert event.source is binder
        assert event.data["field"] == "price"
        assert event.data["value"] == "abc"
        assert event.data["details"]


class TestBindingThenValidation:
    """Binding failures flow into validation."""

    def test_type_mismatch_skips_price_rules(self) -> None:
        """typeMismatch on price: no range error and no totalPriceMin."""
        bound = bind_form({"name": "pen", "price": "abc", "quantity": "10"}, ItemSaveForm)

        report = VALIDATOR.validate(bound.candidate, ValidationContext.SAVE, bound.report)

        assert report is bound.report
        assert codes_of(report) == [("price", "typeMismatch")]

    def test_other_fields_still_validated(self) -> None:
        bound = bind_form({"name": "", "price": "abc", "quantity": "99999"}, ItemSaveForm)

        report = VALIDATOR.validate(bound.candidate, ValidationContext.SAVE, bound.report)

        assert codes_of(report) == [
            ("price", "typeMismatch"),
            ("name", "required"),
            ("quantity", "max"),
        ]

    @given(garbage=st.text(alphabet="abcxyz!?", min_size=1, max_size=10))
    @settings(max_examples=50)
    def test_non_numeric_price_always_mismatch(self, garbage: str) -> None:
        """Property: non-numeric price text is a binding failure, never a range error."""
        bound = bind_form({"name": "pen", "price": garbage, "quantity": "10"}, ItemSaveForm)

        report = VALIDATOR.validate(bound.candidate, ValidationContext.SAVE, bound.report)

        assert report.has_binding_failure("price")
        assert [e.code for e in report.get_field_errors("price")] == ["typeMismatch"]
        assert report.field_value("price") == garbage

    @given(
        raw=st.text(alphabet="{}0abc:!", min_size=1, max_size=12).filter(
            lambda s: "{" in s or "}" in s
        )
    )
    @settings(max_examples=100)
    def test_any_rejected_text_renders(self, raw: str) -> None:
        """Property: every binding failure resolves without a catalog."""
        report = bind_form({"quantity": raw}, ItemSaveForm).report

        messages = [resolve_message(e, StaticMessageSource()) for e in report]

        assert messages == ["Failed to convert value for field 'quantity'"]

    @given(price=st.integers(min_value=-(10**6), max_value=10**7))
    @settings(max_examples=50)
    def test_numeric_text_binds_like_int(self, price: int) -> None:
        """Property: binding str(n) gives the same report as validating n."""
        bound = bind_form({"name": "pen", "price": str(price), "quantity": "10"}, ItemSaveForm)
        report = VALIDATOR.validate(bound.candidate, ValidationContext.SAVE, bound.report)

        direct = VALIDATOR.validate(ItemSaveForm(name="pen", price=price, quantity=10))

        assert codes_of(report) == codes_of(direct)
