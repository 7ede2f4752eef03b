import json
from decimal import Decimal

import pytest

from pricelist.loader import InputFormatError, PriceData, load_price_data, parse_price_data
from pricelist.models import PriceList

PAYLOAD = {
    "priceList": {"code": "05-GROS", "name": "Grossistes"},
    "items": [
        {
            "itemId": 10,
            "itemCode": "DEG-500",
            "description": "Dégraissant",
            "format": "500ML",
            "caisse": "12",
            "categoryName": "Nettoyants",
            "className": "Dégraissants",
            "ranges": [
                {"qtyMin": 12, "columns": {"05-GROS": "9,50", "01-EXP": 6}},
                {"qtyMin": 1, "qtyMax": 11, "columns": {"05-GROS": 10, "01-EXP": 6}},
            ],
        },
        {"itemId": "11", "format": " ", "ranges": []},
    ],
}


def _write(path, payload):
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_parse_price_data_reads_items_and_sorts_ranges():
    data = parse_price_data(PAYLOAD)

    assert data.price_list == PriceList(code="05-GROS", name="Grossistes")
    first, second = data.items
    assert first.item_code == "DEG-500"
    assert first.caisse == Decimal("12")
    assert first.category_name == "Nettoyants"
    assert second.item_id == 11
    assert second.item_code == "11"
    assert second.format is None

    ranges = data.ranges[10]
    assert [price_range.qty_min for price_range in ranges] == [1, 12]
    assert ranges[0].qty_max == 11
    assert ranges[1].qty_max is None
    assert ranges[1].price("05-GROS") == Decimal("9.50")
    assert data.ranges[11] == ()


def test_parse_price_data_accepts_bare_item_list():
    data = parse_price_data(PAYLOAD["items"])
    assert data.price_list is None
    assert len(data.items) == 2


def test_parse_price_data_drops_duplicate_items():
    data = parse_price_data([{"itemId": 1, "itemCode": "A"}, {"itemId": 1, "itemCode": "B"}])
    assert [item.item_code for item in data.items] == ["A"]


@pytest.mark.parametrize(
    "payload",
    [
        {"items": {"itemId": 1}},
        [{"itemCode": "A"}],
        ["not-an-object"],
        [{"itemId": 1, "ranges": {"qtyMin": 1}}],
        [{"itemId": 1, "ranges": [{"qtyMax": 3}]}],
        [{"itemId": 1, "ranges": [{"qtyMin": 1, "qtyMax": "many"}]}],
        [{"itemId": 1, "ranges": [{"qtyMin": 1, "columns": ["05-GROS"]}]}],
    ],
)
def test_parse_price_data_rejects_malformed_input(payload):
    with pytest.raises(InputFormatError):
        parse_price_data(payload)


def test_load_price_data_merges_files_first_wins(tmp_path):
    first = _write(tmp_path / "a.json", PAYLOAD)
    second = _write(
        tmp_path / "b.json",
        {
            "priceList": {"code": "03-IND"},
            "items": [
                {"itemId": 10, "itemCode": "OTHER"},
                {"itemId": 12, "itemCode": "NEW", "ranges": [{"qtyMin": 1, "columns": {"05-GROS": 3}}]},
            ],
        },
    )

    data = load_price_data([first, second])

    assert data.price_list.code == "05-GROS"
    assert [item.item_code for item in data.items] == ["DEG-500", "11", "NEW"]
    assert len(data.ranges[10]) == 2
    assert data.ranges[12][0].price("05-GROS") == Decimal("3")


def test_load_price_data_reports_invalid_json(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(InputFormatError, match="broken.json"):
        load_price_data([broken])


def test_empty_price_data_merge():
    merged = PriceData().merge(PriceData())
    assert merged.items == []
    assert merged.ranges == {}


FLAT_PAYLOAD = {
    "priceList": {"code": "05-GROS", "name": "Grossistes"},
    "items": [
        {"itemId": 1, "itemCode": "FLAT-1", "format": "1L"},
        {"itemId": 2, "itemCode": "INLINE", "ranges": [{"qtyMin": 1, "columns": {"05-GROS": 5}}]},
        {"itemId": 3, "itemCode": "UNPRICED"},
    ],
    "prices": [
        {"itemId": 1, "qtyMin": 12, "priceCode": "05-GROS", "price": "9"},
        {"itemId": 1, "qtyMin": 1, "priceCode": "05-GROS", "price": 10},
        {"itemId": 1, "qtyMin": 1, "priceCode": "02-DET", "price": 14},
        {"itemId": 2, "qtyMin": 1, "priceCode": "05-GROS", "price": 7},
    ],
    "discounts": [
        {"itemId": 1, "greaterThan": 1, "costingDiscountAmt": "0.5"},
        {"itemId": 1, "greaterThan": 12, "costingDiscountAmt": 1},
    ],
}


def test_parse_price_data_builds_ranges_from_flat_prices():
    data = parse_price_data(FLAT_PAYLOAD)

    ranges = data.ranges[1]
    assert [(r.qty_min, r.qty_max) for r in ranges] == [(1, 11), (12, None)]
    assert dict(ranges[0].columns) == {"05-GROS": Decimal("10")}
    assert ranges[1].price("05-GROS") == Decimal("9")
    assert [r.costing_discount for r in ranges] == [Decimal("0.5"), Decimal("1")]
    assert data.ranges[2][0].price("05-GROS") == Decimal("5")
    assert data.ranges[3] == ()


def test_parse_price_data_flat_prices_follow_selected_list():
    data = parse_price_data(FLAT_PAYLOAD, selected_code="02-DET")

    assert [dict(r.columns) for r in data.ranges[1]] == [{"02-DET": Decimal("14")}]


@pytest.mark.parametrize(
    "extra",
    [
        {"prices": {"itemId": 1}},
        {"prices": [{"itemId": 1, "qtyMin": 1, "price": 3}]},
        {"prices": [{"itemId": 1, "priceCode": "05-GROS", "price": 3}]},
        {"prices": [], "discounts": [{"itemId": 1, "costingDiscountAmt": 1}]},
    ],
)
def test_parse_price_data_rejects_malformed_flat_rows(extra):
    with pytest.raises(InputFormatError):
        parse_price_data({"items": [{"itemId": 1}], **extra})
