"""Template resolution and rendering.

A template is looked up tenant first, then global (``tenant_id`` NULL). When
neither exists the caller gets an empty template and falls back to the raw
title and message of the request.

Placeholders have the form ``{{name}}`` where name is one or more word
characters. A placeholder whose name is missing from the variables map, or maps to
None, is left in the output verbatim; other values are rendered with
``str()`` and never escaped.
"""

import re
from typing import Mapping, Optional

from pydantic import JsonValue

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import NotificationTemplate, RenderedContent
from infrastructure.notifications.store import NotificationRecordStore

logger = get_module_logger()

PLACEHOLDER_PATTERN = re.compile(r"\{\{(\w+)\}\}")


def render_text(text: str, variables: Mapping[str, JsonValue]) -> str:
    """Substitute ``{{name}}`` placeholders in a single string."""

    def _replace(match: re.Match) -> str:
        name = match.group(1)
        value = variables.get(name)
        if value is None:
            return match.group(0)
        return str(value)

    return PLACEHOLDER_PATTERN.sub(_replace, text)


def render(
    template: NotificationTemplate, variables: Mapping[str, JsonValue]
) -> RenderedContent:
    """Render a template's subject and message."""
    return RenderedContent(
        title=render_text(template.subject_template, variables),
        message=render_text(template.message_template, variables),
    )


class TemplateResolver:
    """Finds the template that applies to a tenant and notification type."""

    def __init__(self, store: NotificationRecordStore):
        self._store = store

    def resolve_template(
        self, tenant_id: str, notification_type_id: str
    ) -> NotificationTemplate:
        template: Optional[NotificationTemplate] = self._store.find_template(
            tenant_id, notification_type_id
        )
        if template is not None:
            return template

        template = self._store.find_template(None, notification_type_id)
        if template is not None:
            logger.debug(
                "using_global_template",
                tenant_id=tenant_id,
                notification_type_id=notification_type_id,
            )
            return template

        logger.debug(
            "no_template_found",
            tenant_id=tenant_id,
            notification_type_id=notification_type_id,
        )
        return NotificationTemplate.empty()

    def render(
        self, template: NotificationTemplate, variables: Mapping[str, JsonValue]
    ) -> RenderedContent:
        return render(template, variables)
