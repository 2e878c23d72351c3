"""Route tests for /api/v1/notifications."""

import pytest

from infrastructure.notifications.errors import PersistenceError
from infrastructure.notifications.models import ChannelName

BASE = "/api/v1/notifications"


def _send(client, headers, **body):
    payload = {
        "title": "Order received",
        "message": "A new order was placed",
        "type": "order_created",
    }
    payload.update(body)
    return client.post(f"{BASE}/send", json=payload, headers=headers)


@pytest.mark.unit
class TestSend:
    def test_send_returns_camel_case_result(
        self, client, caller_headers, order_created_type
    ):
        response = _send(client, caller_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["notificationId"]
        assert body["channelStatus"] == {
            "in_app": "sent",
            "email": "sent",
            "push": "sent",
        }

    def test_explicit_channels_accept_camel_case(
        self, client, caller_headers, order_created_type
    ):
        response = _send(
            client,
            caller_headers,
            channels={"inApp": True, "sms": True},
            priority="urgent",
            variables={"orderId": "A-1"},
        )

        assert response.status_code == 201
        assert response.json()["channelStatus"] == {"in_app": "sent", "sms": "failed"}

    def test_unknown_type_is_404(self, client, caller_headers):
        response = _send(client, caller_headers, type="unknown")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["errorCode"] == "NOT_FOUND"

    def test_send_to_another_user_of_the_tenant(
        self, client, caller_headers, order_created_type
    ):
        response = _send(client, caller_headers, userId="U2")

        assert response.status_code == 201
        recipient_headers = {**caller_headers, "X-User-Id": "U2"}
        recipient_count = client.get(f"{BASE}/unread-count", headers=recipient_headers)
        caller_count = client.get(f"{BASE}/unread-count", headers=caller_headers)
        assert recipient_count.json()["count"] == 1
        assert caller_count.json()["count"] == 0

    def test_send_defaults_recipient_to_caller(
        self, client, caller_headers, order_created_type
    ):
        _send(client, caller_headers)

        count = client.get(f"{BASE}/unread-count", headers=caller_headers)
        assert count.json()["count"] == 1

    def test_blank_recipient_is_422(self, client, caller_headers, order_created_type):
        response = _send(client, caller_headers, userId="  ")

        assert response.status_code == 422
        assert response.json()["errorCode"] == "VALIDATION_ERROR"

    def test_blank_type_is_rejected(self, client, caller_headers):
        assert _send(client, caller_headers, type="  ").status_code == 422

    def test_missing_identity_headers_are_rejected(self, client):
        assert _send(client, {}).status_code == 422

    def test_blank_identity_header_is_400(self, client):
        response = _send(client, {"X-User-Id": " ", "X-Tenant-Id": "T1"})

        assert response.status_code == 400

    def test_bulk_send(self, client, caller_headers, order_created_type):
        response = client.post(
            f"{BASE}/send/bulk",
            json={
                "userIds": ["U1", "U2"],
                "notification": {
                    "title": "Low stock",
                    "message": "Restock soon",
                    "type": "order_created",
                },
            },
            headers=caller_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [r["userId"] for r in body["results"]] == ["U1", "U2"]

    def test_bulk_send_requires_recipients(self, client, caller_headers):
        response = client.post(
            f"{BASE}/send/bulk",
            json={
                "userIds": [],
                "notification": {"title": "t", "message": "m", "type": "order_created"},
            },
            headers=caller_headers,
        )

        assert response.status_code == 422


@pytest.mark.unit
class TestInbox:
    def test_list_count_read_and_archive(
        self, client, caller_headers, order_created_type
    ):
        ids = [
            _send(client, caller_headers, title=f"Order {i}").json()["notificationId"]
            for i in range(3)
        ]

        listing = client.get(BASE, params={"limit": 2}, headers=caller_headers).json()
        assert listing["total"] == 3
        assert len(listing["notifications"]) == 2
        assert listing["notifications"][0]["typeName"] == "order_created"

        count = client.get(f"{BASE}/unread-count", headers=caller_headers).json()
        assert count == {"count": 3}

        read = client.post(
            f"{BASE}/read", json={"notificationIds": [ids[0]]}, headers=caller_headers
        )
        assert read.json() == {"count": 1}

        archived = client.post(
            f"{BASE}/archive", json={"notificationIds": [ids[1]]}, headers=caller_headers
        )
        assert archived.json() == {"count": 1}

        read_all = client.post(f"{BASE}/read", headers=caller_headers)
        assert read_all.json() == {"count": 1}

        archived_list = client.get(
            BASE, params={"status": "archived"}, headers=caller_headers
        ).json()
        assert [n["id"] for n in archived_list["notifications"]] == [ids[1]]

    def test_invalid_status_filter_is_rejected(self, client, caller_headers):
        response = client.get(BASE, params={"status": "deleted"}, headers=caller_headers)

        assert response.status_code == 422

    def test_limit_is_bounded(self, client, caller_headers):
        response = client.get(BASE, params={"limit": 101}, headers=caller_headers)

        assert response.status_code == 422

    def test_archive_requires_ids(self, client, caller_headers):
        response = client.post(
            f"{BASE}/archive", json={"notificationIds": []}, headers=caller_headers
        )

        assert response.status_code == 422

    def test_store_failure_is_503(self, mock_service_client, caller_headers):
        client, service = mock_service_client
        service.get_unread_count.side_effect = PersistenceError("db down", "count_unread")

        response = client.get(f"{BASE}/unread-count", headers=caller_headers)

        assert response.status_code == 503
        assert response.json() == {"detail": "db down", "errorCode": "PERSISTENCE_ERROR"}


@pytest.mark.unit
class TestPreferences:
    def test_update_then_get(self, client, caller_headers, order_created_type):
        response = client.put(
            f"{BASE}/preferences",
            json={
                "preferences": [
                    {"notificationTypeId": order_created_type.id, "smsEnabled": True}
                ]
            },
            headers=caller_headers,
        )
        assert response.json() == {"success": True}

        preferences = client.get(f"{BASE}/preferences", headers=caller_headers).json()

        assert len(preferences) == 1
        assert preferences[0]["smsEnabled"] is True
        assert preferences[0]["emailEnabled"] is True
        assert preferences[0]["typeName"] == "order_created"

    def test_update_failure_is_503(self, mock_service_client, caller_headers):
        client, service = mock_service_client
        service.update_preferences.return_value = False

        response = client.put(
            f"{BASE}/preferences",
            json={"preferences": [{"notificationTypeId": "type-1"}]},
            headers=caller_headers,
        )

        assert response.status_code == 503
        assert response.json() == {"success": False}


@pytest.mark.unit
class TestCatalogAndHealth:
    def test_list_types(self, client, order_created_type, low_stock_type):
        response = client.get(f"{BASE}/types")

        assert [t["typeName"] for t in response.json()] == ["low_stock", "order_created"]

    def test_channel_health(self, mock_service_client):
        client, service = mock_service_client
        service.channel_health.return_value = {
            ChannelName.IN_APP: True,
            ChannelName.EMAIL: False,
        }

        response = client.get(f"{BASE}/channels/health")

        assert response.json() == {
            "channels": {"in_app": True, "email": False},
            "healthy": False,
        }
