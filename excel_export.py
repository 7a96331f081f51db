"""
Excel export functionality for RentalSplitLedger
"""
from __future__ import annotations

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import PLATFORM, RentalBatch
from computations import ledger_for, modification_actions, number_of_days, settle


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            v = cell.value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _rentals_sheet(wb, batch: RentalBatch):
    ws = wb.create_sheet("Rentals")
    ws.append([
        "rental", "car", "start", "end", "days", "distance", "price", "commission",
        "insurance_fee", "assistance_fee", f"{PLATFORM}_fee", "deductible_reduction",
    ])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"

    for rid, r in batch.rentals.items():
        s = settle(r)
        ws.append([
            rid, r.car.id, r.start_date.isoformat(), r.end_date.isoformat(),
            number_of_days(r), r.distance, s.price, s.commission,
            s.insurance_fee, s.assistance_fee, s.platform_fee, s.deductible_reduction_fee,
        ])

    # Footer totals over the money columns
    last_data_row = ws.max_row
    if last_data_row >= 2:
        ws.append(["TOTALS"])
        trow = ws.max_row
        ws.cell(trow, 1).font = Font(bold=True)
        for col in range(7, 13):
            letter = get_column_letter(col)
            ws.cell(trow, col).value = f"=SUM({letter}2:{letter}{last_data_row})"
    _autosize_columns(ws)


def _actions_sheet(wb, batch: RentalBatch):
    ws = wb.create_sheet("Actions")
    ws.append(["rental", "who", "type", "amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for rid, r in batch.rentals.items():
        for a in ledger_for(settle(r)):
            ws.append([rid, a.actor, a.type, a.amount])
    _autosize_columns(ws)


def _modifications_sheet(wb, batch: RentalBatch):
    ws = wb.create_sheet("Modifications")
    ws.append(["modification", "rental", "who", "type", "amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for m in batch.modifications:
        actions = modification_actions(batch.rentals[m.rental_id], m)
        title = f"modification {m.id} on rental {m.rental_id}"
        ws.append([title] + [""] * 4)
        title_row = ws.max_row
        ws.cell(title_row, 1).font = Font(bold=True)
        ws.cell(title_row, 1).fill = PatternFill("solid", fgColor="D9E1F2")
        for a in actions:
            ws.append([m.id, m.rental_id, a.actor, a.type, a.amount])
    _autosize_columns(ws)


def export_excel(batch: RentalBatch, filepath: str) -> None:
    """
    Export batch to Excel file with sheets:
    - Rentals: settlement breakdown per rental, with totals
    - Actions: the five ledger actions of each rental
    - Modifications: the five diff actions of each modification
    """
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    _rentals_sheet(wb, batch)
    _actions_sheet(wb, batch)
    _modifications_sheet(wb, batch)

    wb.save(filepath)

