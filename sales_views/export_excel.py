from __future__ import annotations

from pathlib import Path
import pandas as pd

from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.utils import get_column_letter
from openpyxl.formatting.rule import ColorScaleRule


HEADER_FILL = PatternFill("solid", fgColor="D9E1F2")  # light blue-grey
HEADER_FONT = Font(bold=True)
TITLE_FONT = Font(bold=True, size=12)
CENTER = Alignment(horizontal="center")
LEFT = Alignment(horizontal="left")

NUM_FMT = "#,##0.##"
INT_FMT = "#,##0"

# Sheets whose first column is a label and the rest are figures
FIGURE_SHEETS = ["TimeSeries", "MonthlyStacked", "CategoryTotals", "SalesComparison", "Ratio"]


def _style_header_row(ws, header_row: int, max_col: int) -> None:
    for c in range(1, max_col + 1):
        cell = ws.cell(row=header_row, column=c)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = CENTER


def _auto_fit_columns(ws, min_row: int = 1, max_row: int | None = None, max_col: int | None = None) -> None:
    if max_row is None:
        max_row = ws.max_row
    if max_col is None:
        max_col = ws.max_column

    for col in range(1, max_col + 1):
        max_len = 0
        for row in range(min_row, max_row + 1):
            v = ws.cell(row=row, column=col).value
            if v is None:
                continue
            s = str(v)
            if len(s) > max_len:
                max_len = len(s)

        width = min(max_len + 2, 45)
        ws.column_dimensions[get_column_letter(col)].width = max(10, width)


def _format_figures(ws, data_start_row: int = 2) -> None:
    for row in ws.iter_rows(min_row=data_start_row, max_row=ws.max_row):
        for cell in row:
            if cell.value is None:
                continue
            if isinstance(cell.value, str):
                cell.alignment = LEFT
            elif isinstance(cell.value, int):
                cell.number_format = INT_FMT
            elif isinstance(cell.value, float):
                cell.number_format = NUM_FMT


def _format_table_sheet(ws) -> None:
    ws.freeze_panes = "B2"
    _style_header_row(ws, header_row=1, max_col=ws.max_column)
    _format_figures(ws)
    _auto_fit_columns(ws)


def _apply_value_color_scale(ws, header: str = "value") -> None:
    """Light-to-blue scale over a totals column."""
    if ws.max_row < 3:
        return

    rule = ColorScaleRule(
        start_type="min",
        start_color="FFFFFF",
        end_type="max",
        end_color="3B82F6",
    )
    for col in range(1, ws.max_column + 1):
        if str(ws.cell(row=1, column=col).value).lower() == header:
            col_letter = get_column_letter(col)
            ws.conditional_formatting.add(f"{col_letter}2:{col_letter}{ws.max_row}", rule)


def write_excel_pack(
    out_path: Path,
    tables: dict[str, pd.DataFrame],
    warnings: list[str] | None = None,
) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        tables["Summary"].to_excel(writer, sheet_name="Summary", index=False)
        for name in FIGURE_SHEETS:
            df = tables.get(name, pd.DataFrame())
            df.to_excel(writer, sheet_name=name, index=False)

        book = writer.book

        ws_sum = writer.sheets["Summary"]
        ws_sum.freeze_panes = "A2"
        _style_header_row(ws_sum, header_row=1, max_col=ws_sum.max_column)
        _format_figures(ws_sum)
        _auto_fit_columns(ws_sum)

        for name in FIGURE_SHEETS:
            _format_table_sheet(writer.sheets[name])

        _apply_value_color_scale(writer.sheets["CategoryTotals"])

        if warnings:
            ws = book.create_sheet("Warnings")
            ws.cell(row=1, column=1, value="WARNINGS").font = TITLE_FONT
            for i, w in enumerate(warnings, start=2):
                ws.cell(row=i, column=1, value=w)
            _auto_fit_columns(ws)
