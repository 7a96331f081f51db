"""
Configuration, logging and data loading/saving for RentalSplitLedger
"""
from __future__ import annotations
import json
import logging
import os
import sys
from typing import Any, Dict, Iterable, List

from dotenv import load_dotenv

from errors import RecordError, UnknownCarReference, UnknownRentalReference
from models import Car, Modification, RentalBatch, RentalOptions, RentalRecord
from computations import amend
from utils import (
    is_identifier, parse_date, parse_distance, parse_flag, parse_price, project_dir, require, require_id,
)

# Load environment variables from .env file in project root
load_dotenv(os.path.join(project_dir(), ".env"))

logger = logging.getLogger(__name__)


class Config:
    """Defaults for the command line, overridable from the environment"""

    DATA_FILE = os.getenv("RENTAL_DATA_FILE", "data.json")
    OUTPUT_FILE = os.getenv("RENTAL_OUTPUT_FILE", "output.json")
    REPORT_LEVEL = os.getenv("RENTAL_REPORT_LEVEL", "modifications")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class JsonFormatter(logging.Formatter):
    """One JSON object per log line"""

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
        }
        if hasattr(record, "record_id"):
            log_record["record_id"] = record.record_id
        return json.dumps(log_record, default=str)


def setup_logging(level="INFO"):
    """Configure structured JSON logging on stderr."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplication
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)


def _skip(section: str, err: RecordError) -> None:
    logger.warning(
        "[%s] skipping record: %s: %s", section, type(err).__name__, err,
        extra={"record_id": err.record_id},
    )


def parse_car(row: Dict[str, Any]) -> Car:
    """Build one Car from an input row"""
    cid = require_id(row)
    return Car(
        id=cid,
        price_per_day=parse_price(require(row, "price_per_day", cid), "price_per_day", cid),
        price_per_km=parse_price(require(row, "price_per_km", cid), "price_per_km", cid),
    )


def parse_cars(rows: Iterable[Dict[str, Any]]) -> Dict[Any, Car]:
    """Car catalog keyed by id; bad rows are logged and skipped"""
    cars = {}
    for row in rows:
        try:
            car = parse_car(row)
        except RecordError as e:
            _skip("cars", e)
            continue
        cars[car.id] = car
    return cars


def parse_rental(row: Dict[str, Any], cars: Dict[Any, Car]) -> RentalRecord:
    """Build one RentalRecord from an input row"""
    rid = require_id(row)
    cid = require(row, "car_id", rid)
    distance = parse_distance(require(row, "distance", rid), rid)
    start_date = parse_date(require(row, "start_date", rid), rid)
    end_date = parse_date(require(row, "end_date", rid), rid)
    car = cars.get(cid) if is_identifier(cid) else None
    if car is None:
        raise UnknownCarReference(f"unknown car_id {cid!r}", rid)
    options = RentalOptions(deductible_reduction=parse_flag(row, "deductible_reduction", rid))
    return RentalRecord(rid, car, start_date, end_date, distance, options)


def parse_rentals(rows: Iterable[Dict[str, Any]], cars: Dict[Any, Car]) -> Dict[Any, RentalRecord]:
    """Rentals keyed by id; bad rows are logged and skipped"""
    rentals = {}
    for row in rows:
        try:
            rental = parse_rental(row, cars)
        except RecordError as e:
            _skip("rentals", e)
            continue
        rentals[rental.id] = rental
    return rentals


def parse_modification(row: Dict[str, Any], rentals: Dict[Any, RentalRecord]) -> Modification:
    """Build one Modification and check it applies cleanly to its rental"""
    mid = require_id(row)
    rental_id = require(row, "rental_id", mid)
    rental = rentals.get(rental_id) if is_identifier(rental_id) else None
    if rental is None:
        raise UnknownRentalReference(f"unknown rental_id {rental_id!r}", mid)

    start_date = end_date = distance = None
    if "start_date" in row:
        start_date = parse_date(row["start_date"], mid)
    if "end_date" in row:
        end_date = parse_date(row["end_date"], mid)
    if "distance" in row:
        distance = parse_distance(row["distance"], mid)
    mod = Modification(mid, rental_id, start_date, end_date, distance)

    try:
        amend(rental, mod)
    except RecordError as e:
        raise type(e)(str(e.args[0]), mid) from None
    return mod


def parse_modifications(rows: Iterable[Dict[str, Any]], rentals: Dict[Any, RentalRecord]) -> List[Modification]:
    """Modifications in input order; bad rows are logged and skipped"""
    mods = []
    for row in rows:
        try:
            mods.append(parse_modification(row, rentals))
        except RecordError as e:
            _skip("rental_modifications", e)
    return mods


def _section(d: Dict[str, Any], key: str) -> List[Any]:
    rows = d.get(key) or []
    if not isinstance(rows, list):
        raise ValueError(f"{key!r} must be a JSON array, got {type(rows).__name__}")
    return rows


def dict_to_batch(d: Dict[str, Any]) -> RentalBatch:
    """Convert dictionary from JSON to RentalBatch object"""
    if not isinstance(d, dict):
        raise ValueError(f"input must be a JSON object, got {type(d).__name__}")
    cars = parse_cars(_section(d, "cars"))
    rentals = parse_rentals(_section(d, "rentals"), cars)
    mods = parse_modifications(_section(d, "rental_modifications"), rentals)
    logger.info(
        "loaded %d cars, %d rentals, %d modifications", len(cars), len(rentals), len(mods),
    )
    return RentalBatch(cars=cars, rentals=rentals, modifications=mods)


def load_batch(path: str) -> RentalBatch:
    """Load cars, rentals and modifications from JSON file"""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return dict_to_batch(data)


def write_report(report: Dict[str, Any], path: str) -> None:
    """Write report dictionary as pretty JSON"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2)
        f.write("\n")
