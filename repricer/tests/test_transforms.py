from decimal import Decimal

from django.test import TestCase

from repricer.exceptions import InvalidPayloadError
from repricer.transforms import (
    RecognizedShape,
    UnrecognizedShape,
    deduplicate,
    normalize_buy_box,
    parse_offers_response,
    parse_price,
    parse_stock,
    total_stock,
    transform_offer,
    validate_offer,
)


def _valid_raw_offer():
    return {
        "offer_id": 81234567,
        "sku": "A1",
        "title": "Espresso Machine",
        "selling_price": 2499,
        "leadtime_stock": [{"merchant_warehouse": {"name": "CPT"}, "quantity_available": 4}],
        "warehouse_stock": [{"warehouse": {"name": "JHB"}, "quantity_available": 3}],
        "image_url": "https://media.takealot.test/a1.jpg",
        "buy_box_winner": True,
    }


class TestValidation(TestCase):
    def test_valid_offer(self):
        is_valid, reason = validate_offer(_valid_raw_offer())
        self.assertTrue(is_valid)
        self.assertEqual(reason, "")

    def test_missing_sku_is_invalid(self):
        is_valid, reason = validate_offer({"offer_id": 1, "selling_price": 100})
        self.assertFalse(is_valid)
        self.assertIn("missing SKU", reason)

    def test_null_price_is_invalid(self):
        is_valid, reason = validate_offer({"sku": "A1", "selling_price": None})
        self.assertFalse(is_valid)
        self.assertIn("null price", reason)

    def test_negative_price_is_invalid(self):
        is_valid, reason = validate_offer({"sku": "A1", "selling_price": -5})
        self.assertFalse(is_valid)
        self.assertIn("negative price", reason)

    def test_non_numeric_price_is_invalid(self):
        is_valid, reason = validate_offer({"sku": "A1", "selling_price": "free"})
        self.assertFalse(is_valid)
        self.assertIn("non-numeric price", reason)

    def test_falls_back_to_price_field(self):
        is_valid, _ = validate_offer({"sku": "A1", "price": 10})
        self.assertTrue(is_valid)

    def test_non_dict_is_invalid(self):
        is_valid, _ = validate_offer("A1")
        self.assertFalse(is_valid)


class TestParsePrice(TestCase):
    def test_quantizes_to_cents(self):
        self.assertEqual(parse_price(99.999), Decimal("100.00"))
        self.assertEqual(parse_price("12.5"), Decimal("12.50"))

    def test_rejects_booleans(self):
        with self.assertRaises(InvalidPayloadError):
            parse_price(True)

    def test_rejects_nan(self):
        with self.assertRaises(InvalidPayloadError):
            parse_price("NaN")


class TestTransformation(TestCase):
    def test_split_stock_is_summed(self):
        result = transform_offer({"sku": "A1", "selling_price": 100, "leadtime_stock": 3, "warehouse_stock": 2})
        self.assertEqual(result.stock, 5)
        self.assertEqual(result.price, Decimal("100.00"))

    def test_stock_lists_are_summed(self):
        result = transform_offer(_valid_raw_offer())
        self.assertEqual(result.stock, 7)

    def test_non_numeric_stock_skipped(self):
        raw = {"sku": "A1", "selling_price": 1, "leadtime_stock": "N/A", "warehouse_stock": 5}
        self.assertEqual(total_stock(raw), 5)

    def test_plain_stock_field(self):
        self.assertEqual(total_stock({"stock": 9}), 9)
        self.assertEqual(total_stock({}), 0)

    def test_offer_id_is_stringified(self):
        result = transform_offer(_valid_raw_offer())
        self.assertEqual(result.offer_id, "81234567")

    def test_missing_offer_id_is_none(self):
        result = transform_offer({"sku": "A1", "selling_price": 1})
        self.assertIsNone(result.offer_id)

    def test_buy_box_from_winner_flag(self):
        result = transform_offer(_valid_raw_offer())
        self.assertEqual(result.buy_box_status, "won")

    def test_buy_box_absent_is_none(self):
        result = transform_offer({"sku": "A1", "selling_price": 1})
        self.assertIsNone(result.buy_box_status)

    def test_invalid_cost_price_is_dropped(self):
        result = transform_offer({"sku": "A1", "selling_price": 1, "cost_price": "n/a"})
        self.assertIsNone(result.cost_price)

    def test_cost_price_parsed(self):
        result = transform_offer({"sku": "A1", "selling_price": 1, "cost_price": 55.5})
        self.assertEqual(result.cost_price, Decimal("55.50"))


class TestBuyBox(TestCase):
    def test_winner_flag_takes_precedence(self):
        self.assertEqual(normalize_buy_box(False, "won"), "lost")

    def test_status_string(self):
        self.assertEqual(normalize_buy_box(None, "WON"), "won")
        self.assertEqual(normalize_buy_box(None, "lost"), "lost")

    def test_unexpected_status_is_unknown(self):
        self.assertEqual(normalize_buy_box(None, "pending"), "unknown")

    def test_nothing_is_none(self):
        self.assertIsNone(normalize_buy_box())


class TestResponseShape(TestCase):
    def test_bare_list(self):
        shape = parse_offers_response([{"sku": "A1"}])
        self.assertIsInstance(shape, RecognizedShape)
        self.assertEqual(shape.envelope, "list")
        self.assertIsNone(shape.total_results)

    def test_offers_envelope_with_total(self):
        shape = parse_offers_response({"offers": [], "total_results": 12, "page_number": 1})
        self.assertIsInstance(shape, RecognizedShape)
        self.assertEqual(shape.envelope, "offers")
        self.assertEqual(shape.total_results, 12)

    def test_data_and_results_envelopes(self):
        self.assertEqual(parse_offers_response({"data": []}).envelope, "data")
        self.assertEqual(parse_offers_response({"results": []}).envelope, "results")

    def test_unknown_dict(self):
        shape = parse_offers_response({"items": []})
        self.assertIsInstance(shape, UnrecognizedShape)
        self.assertEqual(shape.keys, ("items",))

    def test_scalar_body(self):
        shape = parse_offers_response("oops")
        self.assertIsInstance(shape, UnrecognizedShape)
        self.assertEqual(shape.type_name, "str")


class TestDeduplication(TestCase):
    def test_keeps_last_occurrence_per_offer(self):
        data = [
            {"offer_id": 1, "sku": "A", "title": "First"},
            {"offer_id": 1, "sku": "A", "title": "Second"},
        ]
        result = deduplicate(data)
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0]["title"], "Second")

    def test_falls_back_to_sku(self):
        data = [{"sku": "A"}, {"sku": "A"}, {"sku": "B"}]
        self.assertEqual(len(deduplicate(data)), 2)

    def test_unkeyed_records_are_kept(self):
        data = [{"title": "x"}, {"title": "y"}, "junk"]
        self.assertEqual(len(deduplicate(data)), 3)


class TestNumericEdges(TestCase):
    def test_price_beyond_column_range(self):
        with self.assertRaisesRegex(InvalidPayloadError, "out of range"):
            parse_price(1e30)

    def test_largest_storable_price(self):
        self.assertEqual(parse_price("9999999999.99"), Decimal("9999999999.99"))

    def test_out_of_range_offer_is_invalid(self):
        is_valid, reason = validate_offer({"sku": "BIG", "selling_price": 1e30})
        self.assertFalse(is_valid)
        self.assertIn("out of range", reason)

    def test_non_finite_stock_ignored(self):
        raw = {"sku": "A1", "selling_price": 1, "leadtime_stock": 3, "warehouse_stock": float("inf")}
        self.assertEqual(total_stock(raw), 3)
        self.assertEqual(total_stock({"stock": float("nan")}), 0)
        self.assertEqual(total_stock({"leadtime_stock": [{"quantity_available": float("-inf")}]}), 0)

    def test_non_finite_stock_rejected(self):
        with self.assertRaises(InvalidPayloadError):
            parse_stock(float("inf"))
        with self.assertRaises(InvalidPayloadError):
            parse_stock(float("nan"))

    def test_offer_ids_and_skus_do_not_collide(self):
        data = [{"offer_id": "A1", "sku": "Z9"}, {"sku": "A1"}]
        self.assertEqual(len(deduplicate(data)), 2)

    def test_numeric_and_string_offer_ids_match(self):
        data = [{"offer_id": 1001, "sku": "A", "title": "First"}, {"offer_id": "1001", "sku": "A", "title": "Second"}]
        result = deduplicate(data)
        self.assertEqual(len(result), 1)
        self.assertEqual(result[0]["title"], "Second")
