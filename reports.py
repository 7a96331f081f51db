"""
Report building for RentalSplitLedger
"""
from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List

from models import PLATFORM, Action, RentalBatch
from computations import ledger_for, modification_actions, settle


class ReportLevel(str, Enum):
    """How much of the money split the report shows"""
    PRICE = "price"
    FEES = "fees"
    ACTIONS = "actions"
    MODIFICATIONS = "modifications"


PLATFORM_FEE_KEY = f"{PLATFORM}_fee"


def _actions_to_list(actions: List[Action]) -> List[Dict[str, Any]]:
    return [a.to_dict() for a in actions]


def price_report(batch: RentalBatch) -> Dict[str, Any]:
    """{rentals: [{id, price}]}"""
    return {
        "rentals": [
            {"id": rid, "price": settle(r).price} for rid, r in batch.rentals.items()
        ]
    }


def fees_report(batch: RentalBatch) -> Dict[str, Any]:
    """{rentals: [{id, price, commission: {insurance_fee, assistance_fee, <platform>_fee}}]}"""
    rentals = []
    for rid, r in batch.rentals.items():
        s = settle(r)
        rentals.append({
            "id": rid,
            "price": s.price,
            "commission": {
                "insurance_fee": s.insurance_fee,
                "assistance_fee": s.assistance_fee,
                PLATFORM_FEE_KEY: s.platform_fee,
            },
        })
    return {"rentals": rentals}


def actions_report(batch: RentalBatch) -> Dict[str, Any]:
    """{rentals: [{id, actions}]}"""
    return {
        "rentals": [
            {"id": rid, "actions": _actions_to_list(ledger_for(settle(r)))}
            for rid, r in batch.rentals.items()
        ]
    }


def modifications_report(batch: RentalBatch) -> Dict[str, Any]:
    """{rental_modifications: [{id, rental_id, actions}]}"""
    out = []
    for m in batch.modifications:
        actions = modification_actions(batch.rentals[m.rental_id], m)
        out.append({"id": m.id, "rental_id": m.rental_id, "actions": _actions_to_list(actions)})
    return {"rental_modifications": out}


_BUILDERS = {
    ReportLevel.PRICE: price_report,
    ReportLevel.FEES: fees_report,
    ReportLevel.ACTIONS: actions_report,
    ReportLevel.MODIFICATIONS: modifications_report,
}


def build_report(batch: RentalBatch, level) -> Dict[str, Any]:
    """Build the report for a level (ReportLevel or its string value)"""
    return _BUILDERS[ReportLevel(level)](batch)
