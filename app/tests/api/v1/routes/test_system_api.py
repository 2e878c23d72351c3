from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError


@pytest.mark.unit
def test_health_checks_database(client, db_engine):
    with patch("api.routes.system.get_engine", return_value=db_engine):
        response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "up"}


@pytest.mark.unit
def test_health_reports_database_down(client):
    engine = MagicMock()
    engine.connect.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

    with patch("api.routes.system.get_engine", return_value=engine):
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["database"] == "down"


@pytest.mark.unit
def test_version(client):
    response = client.get("/version")

    assert response.status_code == 200
    assert "version" in response.json()
