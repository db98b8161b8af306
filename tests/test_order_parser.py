"""
Tests del parser de pedidos en texto libre
"""
from order_dashboard.services.order_parser import (
    detect_patty_size,
    parse_fragment,
    parse_order_text,
    split_fragments,
    split_phrase,
)


class TestParseOrderText:

    def test_full_line(self):
        items = parse_order_text("2x Ruby Clove doble combo sin cebolla")
        assert items == [{
            "burger_type": "ruby clove",
            "patty_size": "doble",
            "combo": True,
            "additions": None,
            "removals": ["cebolla"],
            "quantity": 2,
        }]

    def test_multiple_lines(self):
        items = parse_order_text("1 clásica con cheddar y bacon\n3 ruby triple")
        assert len(items) == 2
        assert items[0]["burger_type"] == "clásica"
        assert items[0]["additions"] == ["cheddar", "bacon"]
        assert items[1]["quantity"] == 3
        assert items[1]["patty_size"] == "triple"

    def test_list_input(self):
        items = parse_order_text(["2x ruby", "clásica extra cheddar, sin pepinos"])
        assert [i["quantity"] for i in items] == [2, 1]
        assert items[1]["additions"] == ["cheddar"]
        assert items[1]["removals"] == ["pepinos"]

    def test_comma_before_quantity_splits(self):
        items = parse_order_text("2 ruby, 1 clásica")
        assert [i["burger_type"] for i in items] == ["ruby", "clásica"]

    def test_combo_fries_are_not_an_addition(self):
        items = parse_order_text("ruby combo con papas")
        assert items[0]["combo"] is True
        assert items[0]["additions"] is None

    def test_fries_without_combo_are_an_addition(self):
        items = parse_order_text("ruby con papas")
        assert items[0]["additions"] == ["papas"]

    def test_defaults(self):
        item = parse_order_text("Ruby Clove")[0]
        assert item["patty_size"] == "simple"
        assert item["combo"] is False
        assert item["quantity"] == 1

    def test_reparsing_burger_type_is_stable(self):
        item = parse_order_text("2x Ruby Clove doble combo sin cebolla")[0]
        reparsed = parse_order_text(item["burger_type"])[0]
        assert reparsed["burger_type"] == item["burger_type"]
        assert reparsed["additions"] is None
        assert reparsed["removals"] is None

    def test_same_input_same_output(self):
        text = "2x Ruby Clove doble combo sin cebolla y tomate"
        assert parse_order_text(text) == parse_order_text(text)

    def test_empty_input(self):
        assert parse_order_text("") is None
        assert parse_order_text("   \n  ") is None
        assert parse_order_text(None) is None
        assert parse_order_text([]) is None

    def test_only_numbers(self):
        assert parse_order_text("2") is None

    def test_hyphenated_name_after_quantity(self):
        item = parse_order_text("2 x-burger doble")[0]
        assert item["burger_type"] == "x-burger"
        assert item["quantity"] == 2
        assert item["patty_size"] == "doble"

    def test_spaced_x_quantity(self):
        item = parse_order_text("3 x ruby")[0]
        assert (item["burger_type"], item["quantity"]) == ("ruby", 3)


class TestHelpers:

    def test_detect_patty_size_priority(self):
        assert detect_patty_size("doble o triple") == "triple"
        assert detect_patty_size("dobles") == "doble"
        assert detect_patty_size("ruby") == "simple"

    def test_split_fragments_strips_bullets(self):
        assert split_fragments("- 2 ruby\n• 1 clásica") == ["2 ruby", "1 clásica"]

    def test_split_phrase(self):
        assert split_phrase(" cebolla y tomate, pepinos") == ["cebolla", "tomate", "pepinos"]

    def test_parse_fragment_leading_filler(self):
        item = parse_fragment("1 hamburguesa de ruby")
        assert item["burger_type"] == "ruby"

    def test_parse_fragment_keeps_en_phrase_in_name(self):
        item = parse_fragment("ruby en pan de papa")
        assert item["burger_type"] == "ruby en pan de papa"
        assert item["additions"] is None
