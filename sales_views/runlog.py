from __future__ import annotations

from pathlib import Path
from datetime import datetime


def write_run_log(
    out_path: Path,
    *,
    source: str,
    out_dir: str,
    rows_loaded: int,
    rows_skipped: int,
    categories: list[str],
    charts_count: int,
    pdf_created: bool,
    warnings: list[str] | None,
) -> None:
    out_path.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("Sales Dashboard Build - Run Log")
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("")
    lines.append(f"Source: {source}")
    lines.append(f"Output dir: {out_dir}")
    lines.append(f"Rows loaded: {rows_loaded}")
    lines.append(f"Rows skipped: {rows_skipped}")
    lines.append(f"Categories: {', '.join(categories) if categories else '(none)'}")
    lines.append(f"Charts generated: {charts_count}")
    lines.append(f"PDF created: {pdf_created}")
    lines.append("")
    lines.append("Warnings:")
    if warnings:
        for w in warnings:
            lines.append(f"- {w}")
    else:
        lines.append("- (none)")

    out_path.write_text("\n".join(lines), encoding="utf-8")
