"""
Business logic and computations for RentalSplitLedger
"""
from __future__ import annotations
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from models import ACTORS, CREDIT, DEBIT, DRIVER, Action, Modification, RentalRecord, Settlement

# (last day of the tier, percentage of the day rate); None means open-ended
PRICE_TIERS: Tuple[Tuple[Optional[int], int], ...] = (
    (1, 100),
    (4, 90),
    (10, 70),
    (None, 50),
)

COMMISSION_PERCENT = 30
ASSISTANCE_FEE_PER_DAY = 100
DEDUCTIBLE_REDUCTION_FEE_PER_DAY = 400


def number_of_days(record: RentalRecord) -> int:
    """Rental length in days, both endpoints included"""
    return (record.end_date - record.start_date).days + 1


def time_component(price_per_day: int, days: int) -> int:
    """
    Time part of the price under the decreasing day-rate schedule.
    Tier contributions are summed in percent units and truncated once.
    """
    total = 0
    lower = 0
    for upper, percent in PRICE_TIERS:
        top = days if upper is None else min(days, upper)
        if top <= lower:
            break
        total += price_per_day * (top - lower) * percent
        if upper is None:
            break
        lower = upper
    return total // 100


def rental_price(record: RentalRecord) -> int:
    """Base rental price: time component plus distance component"""
    car = record.car
    return time_component(car.price_per_day, number_of_days(record)) + record.distance * car.price_per_km


def settle(record: RentalRecord) -> Settlement:
    """Full money breakdown for one rental snapshot"""
    days = number_of_days(record)
    price = rental_price(record)
    commission = price * COMMISSION_PERCENT // 100
    insurance_fee = commission // 2
    assistance_fee = days * ASSISTANCE_FEE_PER_DAY
    ddr = days * DEDUCTIBLE_REDUCTION_FEE_PER_DAY if record.options.deductible_reduction else 0
    return Settlement(
        price=price,
        commission=commission,
        insurance_fee=insurance_fee,
        assistance_fee=assistance_fee,
        platform_fee=commission - (insurance_fee + assistance_fee),
        deductible_reduction_fee=ddr,
    )


def signed_action(actor: str, delta: int, zero_type: str = DEBIT) -> Action:
    """Action from a signed amount: positive -> credit, negative -> debit"""
    if delta > 0:
        return Action(actor, CREDIT, delta)
    if delta < 0:
        return Action(actor, DEBIT, -delta)
    return Action(actor, zero_type, 0)


def _party_shares(s: Settlement) -> List[int]:
    """What each party ends up with, in ACTORS order (driver pays, hence negative)"""
    ddr = s.deductible_reduction_fee
    return [
        -(s.price + ddr),
        s.price - s.commission,
        s.insurance_fee,
        s.assistance_fee,
        s.platform_fee + ddr,
    ]


def ledger_for(settlement: Settlement) -> List[Action]:
    """Five actions for a new rental: the driver pays, everyone else is paid"""
    actions = []
    for actor, share in zip(ACTORS, _party_shares(settlement)):
        zero_type = DEBIT if actor == DRIVER else CREDIT
        actions.append(signed_action(actor, share, zero_type))
    return actions


def diff(original: Settlement, modified: Settlement) -> List[Action]:
    """
    Five actions moving money from the original split to the modified one.
    credit when a party is better off after the change, debit otherwise.
    """
    before = _party_shares(original)
    after = _party_shares(modified)
    return [signed_action(actor, a - b) for actor, b, a in zip(ACTORS, before, after)]


def amend(record: RentalRecord, patch: Modification) -> RentalRecord:
    """Copy of the record with the patched fields; car, options and id are kept"""
    changes = {}
    if patch.start_date is not None:
        changes["start_date"] = patch.start_date
    if patch.end_date is not None:
        changes["end_date"] = patch.end_date
    if patch.distance is not None:
        changes["distance"] = patch.distance
    return replace(record, **changes)


def modification_actions(record: RentalRecord, patch: Modification) -> List[Action]:
    """Settle the original and the amended rental separately and diff them"""
    return diff(settle(record), settle(amend(record, patch)))


def net_amount(actions: Iterable[Action]) -> int:
    """Signed sum of actions; zero when money is conserved"""
    return sum(a.signed_amount() for a in actions)

