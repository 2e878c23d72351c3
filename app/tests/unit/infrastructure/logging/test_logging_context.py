"""Unit tests for infrastructure.logging.context module.

Tests cover:
- bind_request_context() context manager
- get_correlation_id() / set_correlation_id()
- Context isolation and cleanup
"""

import uuid

import pytest
import structlog

from infrastructure.logging.context import (
    bind_request_context,
    clear_request_context,
    get_correlation_id,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_request_context()
    yield
    clear_request_context()


@pytest.mark.unit
class TestBindRequestContext:
    def test_auto_generates_correlation_id(self):
        with bind_request_context(user_id="u-1"):
            uuid.UUID(get_correlation_id())

    def test_uses_provided_correlation_id(self):
        with bind_request_context(correlation_id="req-123"):
            assert get_correlation_id() == "req-123"

    def test_binds_user_tenant_and_extra(self):
        with bind_request_context(
            user_id="u-1", tenant_id="t-1", notification_type="order_created"
        ):
            ctx = structlog.contextvars.get_contextvars()
            assert ctx["user_id"] == "u-1"
            assert ctx["tenant_id"] == "t-1"
            assert ctx["notification_type"] == "order_created"

    def test_context_is_removed_on_exit(self):
        with bind_request_context(user_id="u-1"):
            pass

        assert structlog.contextvars.get_contextvars() == {}

    def test_nested_context_reuses_outer_correlation_id(self):
        with bind_request_context(correlation_id="outer"):
            with bind_request_context(user_id="u-2"):
                assert get_correlation_id() == "outer"

    def test_nested_context_restores_outer_values(self):
        with bind_request_context(user_id="outer-user", tenant_id="t-1"):
            with bind_request_context(user_id="inner-user"):
                assert structlog.contextvars.get_contextvars()["user_id"] == "inner-user"

            ctx = structlog.contextvars.get_contextvars()
            assert ctx["user_id"] == "outer-user"
            assert ctx["tenant_id"] == "t-1"

    def test_context_is_cleaned_up_on_exception(self):
        with pytest.raises(RuntimeError):
            with bind_request_context(user_id="u-1"):
                raise RuntimeError("boom")

        assert "user_id" not in structlog.contextvars.get_contextvars()


@pytest.mark.unit
class TestCorrelationId:
    def test_none_when_unset(self):
        assert get_correlation_id() is None

    def test_set_correlation_id(self):
        set_correlation_id("abc")

        assert get_correlation_id() == "abc"
