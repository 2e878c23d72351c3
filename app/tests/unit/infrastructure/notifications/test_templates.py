"""Unit tests for template resolution and rendering."""

from unittest.mock import MagicMock

import pytest

from infrastructure.notifications.models import NotificationTemplate
from infrastructure.notifications.templates import (
    TemplateResolver,
    render,
    render_text,
)


def _template(subject: str, message: str, tenant_id=None) -> NotificationTemplate:
    return NotificationTemplate(
        tenant_id=tenant_id,
        notification_type_id="type-1",
        subject_template=subject,
        message_template=message,
    )


@pytest.mark.unit
class TestRender:
    def test_substitutes_placeholders(self):
        rendered = render(
            _template("Order {{order_id}}", "Total {{total}} for {{customer}}"),
            {"order_id": "A-1", "total": 12.5, "customer": "Ada"},
        )

        assert rendered.title == "Order A-1"
        assert rendered.message == "Total 12.5 for Ada"

    def test_unresolved_placeholder_is_left_verbatim(self):
        assert render_text("Hello {{name}}", {}) == "Hello {{name}}"

    def test_partially_resolved(self):
        assert (
            render_text("{{greeting}} {{name}}", {"greeting": "Hi"}) == "Hi {{name}}"
        )

    def test_repeated_placeholder(self):
        assert render_text("{{x}}-{{x}}", {"x": 1}) == "1-1"

    def test_values_are_not_escaped(self):
        assert render_text("{{html}}", {"html": "<b>&</b>"}) == "<b>&</b>"

    def test_rendered_values_are_not_re_expanded(self):
        assert render_text("{{a}}", {"a": "{{b}}", "b": "x"}) == "{{b}}"

    def test_non_word_placeholders_are_ignored(self):
        assert render_text("{{ name }} {{na-me}}", {"name": "x"}) == (
            "{{ name }} {{na-me}}"
        )

    def test_none_value_keeps_placeholder(self):
        assert render_text("Hi {{name}}", {"name": None}) == "Hi {{name}}"

    def test_falsy_values_are_rendered(self):
        assert render_text("{{a}} {{b}} {{c}}", {"a": False, "b": 0, "c": ""}) == "False 0 "

    def test_bool_values_use_str(self):
        assert render_text("{{b}}", {"b": True}) == "True"

    def test_render_is_pure(self):
        template = _template("Hi {{name}}", "{{missing}}")
        variables = {"name": "Ada"}

        assert render(template, variables) == render(template, variables)
        assert variables == {"name": "Ada"}

    def test_empty_template_renders_empty(self):
        rendered = render(NotificationTemplate.empty(), {"a": 1})

        assert rendered.title == ""
        assert rendered.message == ""


@pytest.mark.unit
class TestTemplateResolver:
    def test_prefers_tenant_template(self):
        store = MagicMock()
        tenant_template = _template("tenant", "tenant", tenant_id="tenant-1")
        store.find_template.return_value = tenant_template

        result = TemplateResolver(store).resolve_template("tenant-1", "type-1")

        assert result is tenant_template
        store.find_template.assert_called_once_with("tenant-1", "type-1")

    def test_falls_back_to_global_template(self):
        store = MagicMock()
        global_template = _template("global", "global")
        store.find_template.side_effect = [None, global_template]

        result = TemplateResolver(store).resolve_template("tenant-1", "type-1")

        assert result is global_template
        assert store.find_template.call_args_list[1].args == (None, "type-1")

    def test_returns_empty_template_when_nothing_matches(self):
        store = MagicMock()
        store.find_template.return_value = None

        result = TemplateResolver(store).resolve_template("tenant-1", "type-1")

        assert result.is_empty


@pytest.mark.unit
class TestTemplateResolverWithStore:
    def test_tenant_template_is_preferred_over_global(
        self, record_store, order_created_type
    ):
        record_store.add_template(order_created_type.id, "Global", "Global message")
        record_store.add_template(
            order_created_type.id, "Tenant", "Tenant message", tenant_id="tenant-1"
        )
        resolver = TemplateResolver(record_store)

        first = resolver.resolve_template("tenant-1", order_created_type.id)
        second = resolver.resolve_template("tenant-1", order_created_type.id)

        assert first.subject_template == "Tenant"
        assert first == second

    def test_other_tenant_gets_global_template(self, record_store, order_created_type):
        record_store.add_template(order_created_type.id, "Global", "Global message")
        record_store.add_template(
            order_created_type.id, "Tenant", "Tenant message", tenant_id="tenant-1"
        )

        result = TemplateResolver(record_store).resolve_template(
            "tenant-2", order_created_type.id
        )

        assert result.subject_template == "Global"
        assert result.tenant_id is None

    def test_inactive_templates_are_ignored(self, record_store, order_created_type):
        record_store.add_template(
            order_created_type.id, "Old", "Old", tenant_id="tenant-1", is_active=False
        )

        result = TemplateResolver(record_store).resolve_template(
            "tenant-1", order_created_type.id
        )

        assert result.is_empty
