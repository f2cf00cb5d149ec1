"""Tests for error types and codes."""

import pytest

from searchvariants.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    SearchVariantsError,
    VariantError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.VARIANT_ACTIVATION_FAILED, 3000),
            (ErrorCode.SWEEP_IN_PROGRESS, 3000),
            (ErrorCode.VARIANT_RESTORE_FAILED, 3000),
            (ErrorCode.INTERNAL_ERROR, 9000),
            (ErrorCode.INTERNAL_TIMEOUT, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestSearchVariantsError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = SearchVariantsError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        # Given
        error = SearchVariantsError(
            code=ErrorCode.INTERNAL_ERROR,
            message="Something broke",
        )

        # When
        result = str(error)

        # Then
        assert result == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_error_when_raised_then_catchable_as_exception(self) -> None:
        with pytest.raises(SearchVariantsError):
            raise VariantError.sweep_in_progress("Page")


class TestConfigError:
    """ConfigError factory method tests."""

    @pytest.mark.parametrize(
        ("factory", "kwargs", "expected_code"),
        [
            (
                "parse_error",
                {"path": "/foo", "reason": "bad yaml"},
                ErrorCode.CONFIG_PARSE_ERROR,
            ),
            (
                "invalid_value",
                {"field": "sweep.lock_timeout_sec", "value": "x", "reason": "not a float"},
                ErrorCode.CONFIG_INVALID_VALUE,
            ),
        ],
    )
    def test_given_factory_when_called_then_correct_code(
        self, factory: str, kwargs: dict[str, object], expected_code: ErrorCode
    ) -> None:
        """Factory methods produce errors with correct error codes."""
        error = getattr(ConfigError, factory)(**kwargs)
        assert error.code == expected_code

    def test_given_parse_error_when_created_then_path_in_details(self) -> None:
        error = ConfigError.parse_error("/config.yaml", "invalid syntax")
        assert error.details["path"] == "/config.yaml"
        assert "invalid syntax" in error.message


class TestVariantError:
    """VariantError factory method tests."""

    def test_activation_failed(self) -> None:
        error = VariantError.activation_failed("VersionedVariant", "Archive", "unknown stage")

        assert error.code == ErrorCode.VARIANT_ACTIVATION_FAILED
        assert error.details == {
            "variant": "VersionedVariant",
            "state": "'Archive'",
            "reason": "unknown stage",
        }
        assert error.retryable is False

    def test_dependency_unavailable(self) -> None:
        error = VariantError.dependency_unavailable("SubsitesVariant", "subsites")

        assert error.code == ErrorCode.VARIANT_DEPENDENCY_UNAVAILABLE
        assert "subsites" in error.message

    def test_sweep_in_progress_is_retryable(self) -> None:
        error = VariantError.sweep_in_progress("Page")

        assert error.code == ErrorCode.SWEEP_IN_PROGRESS
        assert error.retryable is True
        assert error.details == {"target": "Page"}

    def test_restore_failed_lists_every_variant(self) -> None:
        error = VariantError.restore_failed(
            {"SubsitesVariant": RuntimeError("gone"), "VersionedVariant": KeyError("Stage")}
        )

        assert error.code == ErrorCode.VARIANT_RESTORE_FAILED
        assert error.details == {
            "failures": {
                "SubsitesVariant": "RuntimeError('gone')",
                "VersionedVariant": "KeyError('Stage')",
            }
        }
        assert "SubsitesVariant, VersionedVariant" in error.message


class TestInternalError:
    """InternalError tests."""

    def test_given_unexpected_error_when_created_then_includes_extras(self) -> None:
        """Unexpected error captures arbitrary extra details."""
        # Given
        message = "boom"
        extras = {"foo": "bar", "count": 42}

        # When
        error = InternalError.unexpected(message, **extras)

        # Then
        assert error.details == extras
        assert error.code == ErrorCode.INTERNAL_ERROR
