"""
Fixtures compartidos: app de testing con sqlite en memoria y webhooks mockeados
"""
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from order_dashboard.app_factory import create_app
from order_dashboard.db import db

# 12:00 en Buenos Aires
NOON_UTC = datetime(2026, 10, 19, 15, 0, 0)


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


def webhook_response(ok=True, status_code=200, text="ok"):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.text = text
    return response


@pytest.fixture
def mock_post():
    with patch("order_dashboard.services.webhooks.requests.post") as post:
        post.return_value = webhook_response()
        yield post


@pytest.fixture
def clock():
    """Reloj fijo del blueprint de pedidos; se puede mover con clock.return_value"""
    with patch("order_dashboard.api.orders.utcnow") as now:
        now.return_value = NOON_UTC
        yield now
