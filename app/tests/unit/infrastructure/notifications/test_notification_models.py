"""Unit tests for notification dispatch models."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from infrastructure.notifications.models import (
    ChannelName,
    ChannelOutcome,
    ChannelResult,
    ChannelSet,
    DispatchResult,
    NotificationPreference,
    NotificationQuery,
    NotificationRequest,
    NotificationTemplate,
)


@pytest.mark.unit
class TestChannelSet:
    def test_missing_keys_are_disabled(self):
        channels = ChannelSet(email=True)

        assert channels.enabled() == [ChannelName.EMAIL]

    def test_system_default(self):
        channels = ChannelSet.system_default()

        assert channels.in_app is True
        assert channels.email is True
        assert channels.push is True
        assert channels.sms is False
        assert channels.whatsapp is False

    def test_enabled_uses_canonical_order(self):
        channels = ChannelSet(whatsapp=True, in_app=True, sms=True)

        assert channels.enabled() == [
            ChannelName.IN_APP,
            ChannelName.SMS,
            ChannelName.WHATSAPP,
        ]

    def test_accepts_camel_case_keys(self):
        channels = ChannelSet.model_validate({"inApp": True, "whatsapp": True})

        assert channels.is_enabled(ChannelName.IN_APP)
        assert channels.is_enabled(ChannelName.WHATSAPP)


@pytest.mark.unit
class TestNotificationRequest:
    def test_parses_camel_case_payload(self):
        request = NotificationRequest.model_validate(
            {
                "title": "Low stock",
                "message": "{{sku}} is running out",
                "type": "low_stock",
                "relatedEntity": {"type": "product", "id": "p-1"},
                "action": {"url": "/products/p-1", "text": "View", "data": {"qty": 2}},
                "variables": {"sku": "SKU-1", "remaining": 3},
            }
        )

        assert request.related_entity.id == "p-1"
        assert request.action.data == {"qty": 2}
        assert request.variables["remaining"] == 3
        assert request.priority is None
        assert request.channels is None

    def test_blank_type_is_rejected(self):
        with pytest.raises(ValidationError):
            NotificationRequest(title="t", message="m", type="  ")

    def test_naive_expiry_is_taken_as_utc(self):
        request = NotificationRequest(
            title="t",
            message="m",
            type="order_created",
            expires_at=datetime(2030, 1, 1, 12, 0),
        )

        assert request.expires_at == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_expiry_is_normalized_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        request = NotificationRequest(
            title="t",
            message="m",
            type="order_created",
            expires_at=datetime(2030, 1, 1, 12, 0, tzinfo=plus_two),
        )

        assert request.expires_at.utcoffset() == timedelta(0)
        assert request.expires_at.hour == 10


@pytest.mark.unit
class TestSupportingModels:
    def test_empty_template(self):
        assert NotificationTemplate.empty().is_empty
        assert not NotificationTemplate(subject_template="Hi").is_empty

    def test_preference_maps_flags_to_channel_set(self):
        preference = NotificationPreference(
            notification_type_id="type-1",
            email_enabled=False,
            sms_enabled=True,
            push_enabled=False,
            in_app_enabled=True,
            whatsapp_enabled=True,
        )

        assert preference.to_channel_set().enabled() == [
            ChannelName.IN_APP,
            ChannelName.SMS,
            ChannelName.WHATSAPP,
        ]

    def test_query_limits(self):
        assert NotificationQuery().limit == 10
        with pytest.raises(ValidationError):
            NotificationQuery(limit=0)
        with pytest.raises(ValidationError):
            NotificationQuery(offset=-1)
        with pytest.raises(ValidationError):
            NotificationQuery(status="deleted")

    def test_channel_result_helpers(self):
        sent = ChannelResult.sent(ChannelName.SMS, "ok", external_id="ext-1")
        failed = ChannelResult.failed(ChannelName.SMS, "down", error_code="TIMEOUT")

        assert sent.is_success and sent.external_id == "ext-1"
        assert not failed.is_success and failed.error_code == "TIMEOUT"

    def test_dispatch_result_serializes_camel_case(self):
        result = DispatchResult(
            success=True,
            notification_id="n-1",
            channel_status={ChannelName.IN_APP: ChannelOutcome.SENT},
        )

        assert result.model_dump(mode="json", by_alias=True) == {
            "success": True,
            "notificationId": "n-1",
            "error": None,
            "errorCode": None,
            "channelStatus": {"in_app": "sent"},
        }
