"""Unit tests for infrastructure.logging.formatters module."""

import pytest

from infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
)


@pytest.mark.unit
class TestAddAppInfo:
    def test_adds_name_and_version(self):
        processor = add_app_info("notification-dispatch", "abc123")

        result = processor(None, "info", {"event": "notification_created"})

        assert result == {
            "event": "notification_created",
            "app_name": "notification-dispatch",
            "app_version": "abc123",
        }

    def test_default_version_is_unknown(self):
        result = add_app_info("app")(None, "info", {"event": "x"})

        assert result["app_version"] == "unknown"


@pytest.mark.unit
class TestMaskSensitiveData:
    def test_masks_provider_api_key(self):
        processor = mask_sensitive_data()

        result = processor(
            None,
            "info",
            {"event": "x", "provider_api_key": "secret", "Authorization": "Bearer t"},
        )

        assert result["provider_api_key"] == "***REDACTED***"
        assert result["Authorization"] == "***REDACTED***"
        assert result["event"] == "x"

    def test_none_values_are_left_alone(self):
        result = mask_sensitive_data()(None, "info", {"token": None})

        assert result["token"] is None

    def test_additional_patterns(self):
        processor = mask_sensitive_data(
            mask_value="[hidden]", additional_patterns=frozenset({"phone"})
        )

        result = processor(None, "info", {"phone_number": "+15550100", "user_id": "u-1"})

        assert result == {"phone_number": "[hidden]", "user_id": "u-1"}

    def test_sensitive_patterns_cover_credentials(self):
        assert {"password", "api_key", "authorization"} <= SENSITIVE_PATTERNS


@pytest.mark.unit
class TestTruncateLargeValues:
    def test_long_strings_are_truncated(self):
        result = truncate_large_values(max_length=10)(None, "info", {"message": "x" * 25})

        assert result["message"] == "x" * 10 + "...[truncated, 25 chars total]"

    def test_short_and_non_string_values_are_kept(self):
        result = truncate_large_values(max_length=10)(
            None, "info", {"message": "short", "count": 12345678901}
        )

        assert result == {"message": "short", "count": 12345678901}


@pytest.mark.unit
class TestMaskNestedValues:
    def test_nested_dicts_are_masked(self):
        result = mask_sensitive_data()(
            None,
            "info",
            {"variables": {"reset_token": "abc", "order_id": "A-1"}},
        )

        assert result["variables"] == {"reset_token": "***REDACTED***", "order_id": "A-1"}
