"""
Tests de validación de entrada
"""
import pytest
from pydantic import ValidationError

from order_dashboard.schemas import (
    OrderEdit,
    StructuredIntake,
    TextIntake,
    intake_adapter,
    validation_details,
)


class TestIntake:

    def test_structured(self):
        intake = intake_adapter.validate_python({
            "nombre": "Ana",
            "monto": 100,
            "metodo_pago": "Transferencia",
            "telefono": "  ",
            "items": [{"burger_type": "Ruby", "patty_size": "DOBLE", "quantity": None, "price": 50}],
        })
        assert isinstance(intake, StructuredIntake)
        assert intake.metodo_pago == "transferencia"
        assert intake.telefono is None
        items, pedido = intake.resolve_items()
        assert pedido is None
        assert items == [{
            "burger_type": "Ruby",
            "patty_size": "doble",
            "combo": False,
            "additions": None,
            "removals": None,
            "quantity": 1,
            "price": 50.0,
        }]

    def test_text(self):
        intake = intake_adapter.validate_python({"nombre": "Ana", "total": 100, "pedido": ["2 ruby", "1 clásica"]})
        assert isinstance(intake, TextIntake)
        assert intake.monto == 100
        items, pedido = intake.resolve_items()
        assert len(items) == 2
        assert pedido == "2 ruby\n1 clásica"

    def test_neither_items_nor_text(self):
        with pytest.raises(ValidationError) as exc:
            intake_adapter.validate_python({"nombre": "Ana", "monto": 1})
        assert validation_details(exc.value)[0]["msg"] == "Missing required fields: nombre, items, monto"

    def test_empty_items(self):
        with pytest.raises(ValidationError):
            intake_adapter.validate_python({"nombre": "Ana", "monto": 1, "items": []})

    def test_bad_payment_method(self):
        with pytest.raises(ValidationError):
            intake_adapter.validate_python({"nombre": "Ana", "monto": 1, "pedido": "ruby", "metodo_pago": "bitcoin"})


class TestOrderEdit:

    def test_only_sent_fields(self):
        edit = OrderEdit.model_validate({"order_number": 3, "direccion_envio": "Calle 9"})
        assert edit.updates() == {"direccion_envio": "Calle 9"}

    def test_null_clears_phone_but_not_name(self):
        edit = OrderEdit.model_validate({"order_number": 3, "telefono": None, "nombre": None})
        assert edit.updates() == {"telefono": None}

    def test_text_items(self):
        updates = OrderEdit.model_validate({"order_number": 3, "pedido": "2 ruby"}).updates()
        assert updates["items"][0]["quantity"] == 2
        assert updates["pedido"] is None

    def test_unparseable_text(self):
        updates = OrderEdit.model_validate({"order_number": 3, "pedido": "???"}).updates()
        assert updates == {"items": [], "pedido": "???"}

    def test_numeric_phone_is_text(self):
        updates = OrderEdit.model_validate({"order_number": 3, "telefono": 1166667777}).updates()
        assert updates == {"telefono": "1166667777"}

    def test_blank_address_clears_it(self):
        updates = OrderEdit.model_validate({"order_number": 3, "direccion_envio": "   "}).updates()
        assert updates == {"direccion_envio": None}

    def test_structured_items_drop_raw_text(self):
        updates = OrderEdit.model_validate({"order_number": 3, "items": [{"burger_type": "Ruby"}]}).updates()
        assert updates["pedido"] is None
        assert updates["items"][0]["burger_type"] == "Ruby"
