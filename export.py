"""
Result export: share summary text and a downloadable workbook.
Time formatting lives here, not in the calculation engine.
"""

from __future__ import annotations

import io
import logging
from datetime import datetime
from typing import Callable, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from config import DEFAULT_TIME_FORMAT, DelayResult, DelayRules, InputModel
from model import delay_components

logger = logging.getLogger(__name__)

TimeFormatter = Callable[[datetime], str]
ShareGateway = Callable[[str], object]

SPICY_NOTE = "🌶️ Spicy Colombian women factor included!"


def format_timestamp(ts: datetime, fmt: Optional[str] = None) -> str:
    return pd.Timestamp(ts).strftime(fmt or DEFAULT_TIME_FORMAT)


def share_text(
    inputs: InputModel,
    result: DelayResult,
    formatter: TimeFormatter = format_timestamp,
) -> str:
    category = inputs.event_category
    lines = [
        "🇨🇴 Colombian Time Calculator Results! 🇨🇴",
        "",
        f"Event: {category.emoji} {category.label}",
        f"Original time: {formatter(inputs.requested_time)}",
        f"Colombian time: {formatter(result.arrival_time)}",
        "",
        f"Total delay: {result.delay_minutes} minutes",
        SPICY_NOTE if inputs.spicy_factor_present else "",
        "",
        "¡Ya voy, ya voy...! 😅",
    ]
    return "\n".join(lines)


def share_result(gateway: ShareGateway, text: str) -> None:
    """Hand the summary to a share target. Its return value is ignored."""
    logger.debug("Sharing %d characters", len(text))
    gateway(text)


# ═══════════════════════════════════════════════════════════════════════════
# Excel export
# ═══════════════════════════════════════════════════════════════════════════
def result_workbook(
    inputs: InputModel,
    result: DelayResult,
    formatter: TimeFormatter = format_timestamp,
    rules: Optional[DelayRules] = None,
) -> bytes:
    wb = Workbook()

    blue_fill = PatternFill(start_color="0033A0", end_color="0033A0", fill_type="solid")
    light_fill = PatternFill(start_color="FFF8DC", end_color="FFF8DC", fill_type="solid")
    white_fill = PatternFill(start_color="FFFFFF", end_color="FFFFFF", fill_type="solid")
    hdr_font = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
    title_font = Font(name="Calibri", size=16, bold=True, color="0033A0")
    label_font = Font(name="Calibri", size=10, bold=True, color="4B2E2E")
    body_font = Font(name="Calibri", size=10, color="4B2E2E")
    bdr = Border(
        left=Side(style="thin", color="D0D5DD"), right=Side(style="thin", color="D0D5DD"),
        top=Side(style="thin", color="D0D5DD"), bottom=Side(style="thin", color="D0D5DD"),
    )

    def _hdr_row(ws, row, ncol):
        for c in range(2, ncol + 2):
            cell = ws.cell(row=row, column=c)
            cell.fill = blue_fill
            cell.font = hdr_font
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = bdr

    def _data_row(ws, row, ncol, alt=False):
        for c in range(2, ncol + 2):
            cell = ws.cell(row=row, column=c)
            cell.fill = light_fill if alt else white_fill
            cell.font = body_font
            cell.border = bdr

    # Summary
    ws = wb.active
    ws.title = "Summary"
    ws.merge_cells("B2:D2")
    ws["B2"] = "Colombian Time"
    ws["B2"].font = title_font
    info = [
        ("Event", f"{inputs.event_category.emoji} {inputs.event_category.label}"),
        ("Original time", formatter(inputs.requested_time)),
        ("Colombian time", formatter(result.arrival_time)),
        ("Total delay (min)", result.delay_minutes),
        ("Breakdown", result.breakdown.text),
    ]
    row = 4
    for lbl, val in info:
        ws.cell(row=row, column=2, value=lbl).font = label_font
        ws.cell(row=row, column=3, value=val).font = body_font
        row += 1
    if not result.breakdown.is_consistent:
        ws.cell(row=row, column=2, value="Note").font = label_font
        ws.cell(
            row=row, column=3,
            value=f"Breakdown terms add up to {result.breakdown.stated_minutes} min",
        ).font = body_font
        row += 1

    row += 1
    for ci, h in enumerate(["Component", "Minutes"], 2):
        ws.cell(row=row, column=ci, value=h)
    _hdr_row(ws, row, 2)
    row += 1
    for lbl, minutes in delay_components(inputs, rules):
        ws.cell(row=row, column=2, value=lbl)
        ws.cell(row=row, column=3, value=minutes)
        _data_row(ws, row, 2, alt=(row % 2 == 0))
        row += 1
    ws.column_dimensions["A"].width = 3
    ws.column_dimensions["B"].width = 22
    ws.column_dimensions["C"].width = 60

    # Inputs
    ws_i = wb.create_sheet("Inputs")
    ws_i["B2"] = "Wizard Inputs"
    ws_i["B2"].font = title_font
    for ci, h in enumerate(["Input", "Value"], 2):
        ws_i.cell(row=4, column=ci, value=h)
    _hdr_row(ws_i, 4, 2)
    rows = [
        ("Requested time", formatter(inputs.requested_time)),
        ("Event type", inputs.event_category.label),
        ("Formal event", "No" if inputs.event_category.is_informal else "Yes"),
        ("Total participants", inputs.total_participants),
        ("Colombian participants", inputs.colombian_participants),
        ("Spicy factor", "Yes" if inputs.spicy_factor_present else "No"),
    ]
    for r_i, (lbl, val) in enumerate(rows, 5):
        ws_i.cell(row=r_i, column=2, value=lbl)
        ws_i.cell(row=r_i, column=3, value=val)
        _data_row(ws_i, r_i, 2, alt=(r_i % 2 == 0))
    ws_i.column_dimensions["A"].width = 3
    ws_i.column_dimensions["B"].width = 26
    ws_i.column_dimensions["C"].width = 30

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
