"""
Tests del envío de tickets a cocina y caja
"""
import base64

import requests

from order_dashboard.services import webhooks
from order_dashboard.services.order_diff import OrderChanges
from order_dashboard.services.tickets import CASHIER, KITCHEN

from .conftest import webhook_response

KITCHEN_URL = "http://printers.test/cocina"
CASHIER_URL = "http://printers.test/caja"

ORDER = {
    "order_number": 3,
    "nombre": "Leo",
    "telefono": "123",
    "monto": 9000.0,
    "metodo_pago": "efectivo",
    "direccion_envio": None,
    "items": [{"burger_type": "ruby", "patty_size": "simple", "combo": False, "quantity": 1}],
}


def posted_urls(mock_post):
    return sorted(c.args[0] for c in mock_post.call_args_list)


class TestDispatch:

    def test_posts_both(self, app_context, mock_post):
        errors = webhooks.dispatch({"order_number": 1}, {"order_number": 1})
        assert errors == []
        assert posted_urls(mock_post) == sorted([KITCHEN_URL, CASHIER_URL])
        for call in mock_post.call_args_list:
            assert call.kwargs["timeout"] == 1.0

    def test_kitchen_skipped(self, app_context, mock_post):
        errors = webhooks.dispatch(None, {"order_number": 1})
        assert errors == []
        assert posted_urls(mock_post) == [CASHIER_URL]

    def test_http_error_is_collected(self, app_context, mock_post):
        mock_post.return_value = webhook_response(ok=False, status_code=500, text="boom")
        errors = webhooks.dispatch({"order_number": 1}, {"order_number": 1})
        assert {e["type"] for e in errors} == {KITCHEN, CASHIER}
        assert "Cashier webhook failed: 500 - boom" in [e["error"] for e in errors]

    def test_connection_error_does_not_block_other(self, app_context, mock_post):
        def fake_post(url, json, timeout):
            if url == KITCHEN_URL:
                raise requests.ConnectionError("printer offline")
            return webhook_response()

        mock_post.side_effect = fake_post
        errors = webhooks.dispatch({"order_number": 1}, {"order_number": 1})
        assert errors == [{"type": KITCHEN, "error": "printer offline"}]
        assert mock_post.call_count == 2


class TestPayloads:

    def test_new_order(self):
        kitchen, cashier = webhooks.new_order_payloads(ORDER, b"k", b"c")
        assert base64.b64decode(kitchen["ticket"]) == b"k"
        assert base64.b64decode(cashier["ticket"]) == b"c"
        assert "telefono" not in kitchen
        assert cashier["monto"] == 9000.0
        assert cashier["items"] == ORDER["items"]

    def test_modification_without_kitchen_ticket(self):
        changes = OrderChanges(phone_changed=True)
        kitchen, cashier = webhooks.modification_payloads(ORDER, changes, None, b"c")
        assert kitchen is None
        assert cashier["tipo"] == "modificacion"
        assert cashier["phone_changed"] is True
        assert cashier["items_added"] == []

    def test_cancel(self):
        kitchen, cashier = webhooks.cancel_payloads(3, "Leo", b"k", b"c")
        assert kitchen["type"] == cashier["type"] == "cancel"
        assert kitchen["order_number"] == 3
        assert kitchen["ticket"] != cashier["ticket"]
