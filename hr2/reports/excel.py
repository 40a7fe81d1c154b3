from __future__ import annotations

from datetime import datetime, timezone
from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from hr2.utils.datetime import to_display_tz


def _auto_fit(ws) -> None:
    for col in ws.columns:
        longest = max((len(str(c.value)) for c in col if c.value is not None), default=0)
        ws.column_dimensions[get_column_letter(col[0].column)].width = min(max(12, longest + 2), 60)


def _write_table(ws, headers: list[str], rows: list[list[Any]]) -> None:
    ws.append(headers)
    for r in rows:
        ws.append(r)

    ws.freeze_panes = "A2"
    ws.auto_filter.ref = ws.dimensions

    bold = Font(bold=True)
    for cell in ws[1]:
        cell.font = bold
        cell.alignment = Alignment(horizontal="center")

    _auto_fit(ws)


def build_workbook_bytes(
    *, report_type: str, timezone_display: str, data: dict[str, Any], window: tuple[str, str] | None = None
) -> bytes:
    wb = Workbook()
    wb.remove(wb.active)

    meta_rows: list[list[Any]] = [["type", report_type]]
    if window:
        meta_rows += [["from", window[0]], ["to", window[1]]]
    meta_rows.append(["generatedAt", to_display_tz(datetime.now(timezone.utc), timezone_display)])
    _write_table(wb.create_sheet("Meta"), ["key", "value"], meta_rows)

    if report_type == "competency":
        summary = data["competency"]
        _write_table(
            wb.create_sheet("Skills"),
            ["skill", "category", "averageScore", "employees"],
            [[r["skill"], r["category"], r["averageScore"], r["count"]] for r in summary["bySkill"]],
        )
        _write_table(
            wb.create_sheet("Levels"),
            ["level", "count"],
            [[r["level"], r["count"]] for r in summary["byLevel"]],
        )
    else:
        report = data["results"]
        _write_table(
            wb.create_sheet("Results"),
            ["skill", "submissions", "passed", "passRate", "averageScore"],
            [
                [r["skill"], r["submissions"], r["passed"], r["passRate"], r["averageScore"]]
                for r in report["bySkill"]
            ],
        )

    with BytesIO() as bio:
        wb.save(bio)
        return bio.getvalue()
