"""
CSV export functionality for RentalSplitLedger
"""
from __future__ import annotations
import csv
from typing import Any, Iterator, List

from models import RentalBatch
from computations import ledger_for, modification_actions, settle

CSV_COLUMNS = ['kind', 'id', 'rental_id', 'who', 'type', 'amount']


def iter_action_rows(batch: RentalBatch) -> Iterator[List[Any]]:
    """Yield one row per action: rental ledgers first, then modification diffs"""
    for rid, rental in batch.rentals.items():
        for a in ledger_for(settle(rental)):
            yield ['rental', rid, rid, a.actor, a.type, a.amount]
    for m in batch.modifications:
        for a in modification_actions(batch.rentals[m.rental_id], m):
            yield ['modification', m.id, m.rental_id, a.actor, a.type, a.amount]


def export_actions_to_csv(batch: RentalBatch, filepath: str) -> None:
    """
    Export every ledger action to CSV file
    CSV columns: kind, id, rental_id, who, type, amount
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for row in iter_action_rows(batch):
            writer.writerow(row)
