import json
import logging
import os
import tempfile
import unittest
from datetime import date

from config import JsonFormatter, dict_to_batch, load_batch, parse_rental, write_report
from errors import (
    InvalidDistance, InvalidIdentifier, InvalidOption, InvalidPeriod, MalformedDate, MissingField,
    UnknownCarReference,
)
from models import Car

CARS = [
    {"id": 1, "price_per_day": 2000, "price_per_km": 10},
    {"id": 2, "price_per_day": 3000, "price_per_km": 15},
]


def rental_row(rid, **overrides):
    row = {"id": rid, "car_id": 1, "start_date": "2015-12-08", "end_date": "2015-12-08", "distance": 100}
    row.update(overrides)
    return row


class TestParseRental(unittest.TestCase):
    def setUp(self):
        self.cars = {1: Car(1, 2000, 10)}

    def test_valid_row(self):
        r = parse_rental(rental_row(7, deductible_reduction=True), self.cars)
        self.assertEqual(r.id, 7)
        self.assertEqual(r.start_date, date(2015, 12, 8))
        self.assertTrue(r.options.deductible_reduction)

    def test_deductible_reduction_defaults_to_false(self):
        self.assertFalse(parse_rental(rental_row(7), self.cars).options.deductible_reduction)

    def test_error_taxonomy(self):
        cases = [
            ({"id": 1, "car_id": 1, "start_date": "2015-12-08", "end_date": "2015-12-08"}, MissingField),
            (rental_row(1, start_date="2015-13-45"), MalformedDate),
            (rental_row(1, end_date=20151208), MalformedDate),
            (rental_row(1, start_date="2015-12-09"), InvalidPeriod),
            (rental_row(1, car_id=99), UnknownCarReference),
            (rental_row(1, distance=-5), InvalidDistance),
            (rental_row(1, car_id=[1]), UnknownCarReference),
            (rental_row(1, deductible_reduction="false"), InvalidOption),
        ]
        for row, err in cases:
            with self.subTest(err=err.__name__):
                with self.assertRaises(err) as ctx:
                    parse_rental(row, self.cars)
                self.assertEqual(ctx.exception.record_id, 1)

    def test_unhashable_own_id(self):
        with self.assertRaises(InvalidIdentifier):
            parse_rental(rental_row([1]), self.cars)


class TestDictToBatch(unittest.TestCase):
    def test_bad_rows_are_dropped_and_logged(self):
        data = {
            "cars": CARS + [{"id": 3, "price_per_day": 100}],
            "rentals": [
                rental_row(1),
                {"id": 2, "car_id": 1, "start_date": "2015-12-08", "end_date": "2015-12-08"},
                rental_row(3, car_id=3),
                rental_row(4, car_id=2, end_date="2015-12-10"),
            ],
        }
        with self.assertLogs("config", level="WARNING") as logs:
            batch = dict_to_batch(data)

        self.assertEqual(sorted(batch.cars), [1, 2])
        self.assertEqual(list(batch.rentals), [1, 4])
        self.assertEqual(batch.rentals[4].car.price_per_day, 3000)
        self.assertEqual(len(logs.records), 3)
        self.assertIn("MissingField", logs.output[0])
        self.assertEqual(logs.records[1].record_id, 2)
        self.assertIn("UnknownCarReference", logs.output[2])

    def test_missing_distance_does_not_affect_other_rentals(self):
        base = dict_to_batch({"cars": CARS, "rentals": [rental_row(1), rental_row(3)]})
        with self.assertLogs("config", level="WARNING"):
            mixed = dict_to_batch({"cars": CARS, "rentals": [
                rental_row(1),
                {"id": 2, "car_id": 1, "start_date": "2015-12-08", "end_date": "2015-12-08"},
                rental_row(3),
            ]})
        self.assertEqual(mixed.rentals, base.rentals)

    def test_modifications(self):
        data = {
            "cars": CARS,
            "rentals": [rental_row(1, end_date="2015-12-10")],
            "rental_modifications": [
                {"id": 1, "rental_id": 1, "end_date": "2015-12-12", "distance": 150},
                {"id": 2, "rental_id": 42, "distance": 10},
                {"id": 3, "rental_id": 1, "start_date": "2015-12-11"},
                {"id": 4, "rental_id": 1, "start_date": "not a date"},
                {"rental_id": 1},
                {"id": 6, "rental_id": 1},
            ],
        }
        with self.assertLogs("config", level="WARNING") as logs:
            batch = dict_to_batch(data)

        self.assertEqual([m.id for m in batch.modifications], [1, 6])
        first = batch.modifications[0]
        self.assertEqual(first.end_date, date(2015, 12, 12))
        self.assertEqual(first.distance, 150)
        self.assertIsNone(first.start_date)
        self.assertEqual(len(logs.records), 4)
        self.assertIn("UnknownRentalReference", logs.output[0])
        self.assertIn("InvalidPeriod", logs.output[1])
        self.assertEqual(logs.records[1].record_id, 3)
        self.assertIn("MalformedDate", logs.output[2])

    def test_unhashable_ids_and_references_are_dropped(self):
        data = {
            "cars": CARS + [{"id": [2], "price_per_day": 100, "price_per_km": 1}],
            "rentals": [
                rental_row(1),
                rental_row(2, car_id=[1]),
                rental_row({"x": 3}),
            ],
            "rental_modifications": [
                {"id": 1, "rental_id": {"x": 1}},
                {"id": [2], "rental_id": 1},
                {"id": 3, "rental_id": 1, "distance": 5},
            ],
        }
        with self.assertLogs("config", level="WARNING") as logs:
            batch = dict_to_batch(data)

        self.assertEqual(sorted(batch.cars), [1, 2])
        self.assertEqual(list(batch.rentals), [1])
        self.assertEqual([m.id for m in batch.modifications], [3])
        self.assertEqual(len(logs.records), 5)
        self.assertIn("InvalidIdentifier", logs.output[0])
        self.assertIn("UnknownCarReference", logs.output[1])
        self.assertIn("InvalidIdentifier", logs.output[2])
        self.assertIn("UnknownRentalReference", logs.output[3])
        self.assertIn("InvalidIdentifier", logs.output[4])

    def test_wrong_shapes_raise_value_error(self):
        for data in ([], "cars", {"cars": {"id": 1}}, {"rentals": 5}):
            with self.subTest(data=data):
                with self.assertRaises(ValueError):
                    dict_to_batch(data)

    def test_null_sections_are_empty(self):
        batch = dict_to_batch({"cars": None, "rentals": None, "rental_modifications": None})
        self.assertEqual(batch.rentals, {})

    def test_missing_sections_are_empty(self):
        batch = dict_to_batch({})
        self.assertEqual(batch.cars, {})
        self.assertEqual(batch.rentals, {})
        self.assertEqual(batch.modifications, [])


class TestFiles(unittest.TestCase):
    def test_load_and_write(self):
        with tempfile.TemporaryDirectory() as tmp:
            src = os.path.join(tmp, "data.json")
            with open(src, "w", encoding="utf-8") as f:
                json.dump({"cars": CARS, "rentals": [rental_row(1)]}, f)
            batch = load_batch(src)
            self.assertEqual(list(batch.rentals), [1])

            out = os.path.join(tmp, "output.json")
            write_report({"rentals": [{"id": 1, "price": 3000}]}, out)
            with open(out, encoding="utf-8") as f:
                text = f.read()
            self.assertTrue(text.endswith("\n"))
            self.assertEqual(json.loads(text), {"rentals": [{"id": 1, "price": 3000}]})


class TestJsonFormatter(unittest.TestCase):
    def test_record_id_is_included(self):
        record = logging.LogRecord("config", logging.WARNING, __file__, 1, "skipping %s", ("x",), None)
        record.record_id = 12
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["level"], "WARNING")
        self.assertEqual(payload["message"], "skipping x")
        self.assertEqual(payload["record_id"], 12)


if __name__ == "__main__":
    unittest.main()
