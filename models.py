"""
Data models for RentalSplitLedger
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from errors import InvalidPeriod

DRIVER = "driver"
OWNER = "owner"
INSURANCE = "insurance"
ASSISTANCE = "assistance"
PLATFORM = "drivy"

# ledger order of the five parties
ACTORS = (DRIVER, OWNER, INSURANCE, ASSISTANCE, PLATFORM)

DEBIT = "debit"
CREDIT = "credit"


@dataclass(frozen=True)
class Car:
    """Per-vehicle pricing parameters"""
    id: Any
    price_per_day: int
    price_per_km: int


@dataclass(frozen=True)
class RentalOptions:
    """Optional extras chosen by the driver"""
    deductible_reduction: bool = False


@dataclass(frozen=True)
class RentalRecord:
    """One rental snapshot. Amending produces a new record."""
    id: Any
    car: Car
    start_date: date
    end_date: date
    distance: int
    options: RentalOptions = field(default_factory=RentalOptions)

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise InvalidPeriod(
                f"end_date {self.end_date.isoformat()} is before start_date {self.start_date.isoformat()}",
                self.id,
            )


@dataclass(frozen=True)
class Modification:
    """Sparse patch on a rental; None means unchanged"""
    id: Any
    rental_id: Any
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    distance: Optional[int] = None


@dataclass(frozen=True)
class Settlement:
    """Money breakdown of one rental snapshot"""
    price: int
    commission: int
    insurance_fee: int
    assistance_fee: int
    platform_fee: int  # can go negative when assistance outgrows commission
    deductible_reduction_fee: int = 0


@dataclass(frozen=True)
class Action:
    """One money movement for one party"""
    actor: str
    type: str  # debit | credit
    amount: int

    def signed_amount(self) -> int:
        return self.amount if self.type == CREDIT else -self.amount

    def to_dict(self) -> Dict[str, Any]:
        return {"who": self.actor, "type": self.type, "amount": self.amount}


@dataclass
class RentalBatch:
    """Everything loaded from one input file"""
    cars: Dict[Any, Car] = field(default_factory=dict)
    rentals: Dict[Any, RentalRecord] = field(default_factory=dict)
    modifications: List[Modification] = field(default_factory=list)
