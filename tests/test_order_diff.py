"""
Tests de normalización y diferencias entre ediciones de un pedido
"""
from order_dashboard.services.order_diff import (
    OrderChanges,
    compare_orders,
    diff_items,
    merge_lines,
    normalize_item,
    same_item,
)


def item(burger_type, quantity=1, patty_size="simple", combo=False, additions=None, removals=None):
    return {
        "burger_type": burger_type,
        "patty_size": patty_size,
        "combo": combo,
        "additions": additions,
        "removals": removals,
        "quantity": quantity,
    }


class TestNormalize:

    def test_case_and_whitespace(self):
        assert same_item(item("  Ruby Clove "), item("ruby clove"))

    def test_modifier_order_does_not_matter(self):
        a = item("ruby", additions=["bacon", "cheddar"])
        b = item("ruby", additions=["Cheddar", "bacon"])
        assert same_item(a, b)

    def test_absent_and_empty_modifiers_are_equal(self):
        assert normalize_item(item("ruby", additions=None)) == normalize_item(item("ruby", additions=[]))

    def test_quantity_is_ignored(self):
        assert same_item(item("ruby", 1), item("ruby", 3))

    def test_different_size_is_different_line(self):
        assert not same_item(item("ruby", patty_size="doble"), item("ruby"))


class TestDiffItems:

    def test_no_changes(self):
        items = [item("ruby", 2), item("clásica", additions=["bacon"])]
        result = diff_items(items, items)
        assert result["added"] == []
        assert result["removed"] == []
        assert result["has_changes"] is False
        assert result["is_swap"] is False

    def test_swap(self):
        result = diff_items([item("ruby")], [item("clásica")])
        assert [i["burger_type"] for i in result["added"]] == ["clásica"]
        assert [i["burger_type"] for i in result["removed"]] == ["ruby"]
        assert result["is_swap"] is True

    def test_swap_needs_same_quantity(self):
        result = diff_items([item("ruby", 2)], [item("clásica", 1)])
        assert result["is_swap"] is False

    def test_quantity_increase_adds_only_delta(self):
        result = diff_items([item("ruby", 1)], [item("ruby", 3)])
        assert result["added"][0]["quantity"] == 2
        assert result["removed"] == []

    def test_quantity_decrease_removes_only_delta(self):
        result = diff_items([item("ruby", 3)], [item("ruby", 1)])
        assert result["removed"][0]["quantity"] == 2
        assert result["added"] == []

    def test_new_modifier_is_a_new_line(self):
        result = diff_items([item("ruby")], [item("ruby", removals=["cebolla"])])
        assert result["added"][0]["removals"] == ["cebolla"]
        assert result["removed"][0]["removals"] is None
        assert result["is_swap"] is True

    def test_duplicate_lines_are_merged(self):
        old = [item("ruby"), item("Ruby")]
        new = [item("ruby", 2)]
        assert diff_items(old, new)["has_changes"] is False

    def test_merge_lines_keeps_order(self):
        merged = merge_lines([item("ruby"), item("clásica"), item("ruby", 2)])
        assert [(i["burger_type"], i["quantity"]) for i in merged] == [("ruby", 3), ("clásica", 1)]


class TestCompareOrders:

    def test_only_address_changed(self):
        existing = {"order_number": 4, "items": [item("ruby")], "direccion_envio": "Calle 1"}
        changes = compare_orders(existing, {"direccion_envio": "Calle 2"})
        assert changes.address_changed is True
        assert changes.has_item_changes is False
        assert changes.must_notify is True

    def test_same_values_are_not_changes(self):
        existing = {"order_number": 4, "items": [item("ruby")], "telefono": "123", "metodo_pago": "efectivo"}
        changes = compare_orders(existing, {"telefono": "123", "metodo_pago": "efectivo", "items": [item("ruby")]})
        assert changes.must_notify is False

    def test_items_not_sent_means_no_item_diff(self):
        existing = {"order_number": 4, "items": [item("ruby")]}
        changes = compare_orders(existing, {"metodo_pago": "transferencia"})
        assert changes.added == []
        assert changes.payment_changed is True


class TestMarks:

    def test_new_line(self):
        changes = OrderChanges(added=[item("clásica")])
        assert changes.mark_for(item("clásica")) == "(NUEVA)"

    def test_quantity_increase(self):
        changes = OrderChanges(added=[item("ruby", 1)])
        assert changes.mark_for(item("ruby", 3)) == "(AGREGADA)"

    def test_quantity_decrease(self):
        changes = OrderChanges(removed=[item("ruby", 1)])
        assert changes.mark_for(item("ruby", 2)) == "(CANCELADA)"

    def test_unchanged(self):
        assert OrderChanges().mark_for(item("ruby")) == ""
