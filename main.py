from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
import random
import pandas as pd

from sales_views.aggregate import aggregate
from sales_views.charts import generate_charts
from sales_views.clean import (
    CATEGORY_LABEL,
    DOMESTIC_VALUE_LABEL,
    DOMESTIC_VOLUME_LABEL,
    EXPORT_VALUE_LABEL,
    MONTH_LABEL,
    YEAR_LABEL,
    parse_rows,
)
from sales_views.config import resolve_config
from sales_views.export_excel import write_excel_pack
from sales_views.export_json import write_bundle_json
from sales_views.ingest import is_url, read_rows
from sales_views.logging_config import configure_logging
from sales_views.pdf_report import write_pdf_report
from sales_views.runlog import write_run_log
from sales_views.tables import build_tables

log = logging.getLogger(__name__)


def make_demo_inputs(path: Path) -> None:
    random.seed(42)
    path.parent.mkdir(parents=True, exist_ok=True)

    categories = ["فلزی", "پالایشی", "معدنی"]

    rows = []
    for year in (1402, 1403):
        for month in range(1, 13):
            for cat in categories:
                rows.append(
                    {
                        CATEGORY_LABEL: cat,
                        YEAR_LABEL: year,
                        MONTH_LABEL: month,
                        DOMESTIC_VOLUME_LABEL: random.randint(800, 2500),
                        DOMESTIC_VALUE_LABEL: random.randint(10_000, 90_000),
                        EXPORT_VALUE_LABEL: random.choice([0, random.randint(100, 20_000)]),
                    }
                )
    df = pd.DataFrame(rows)
    # a couple of messy cells, like the real exports
    df.loc[5, EXPORT_VALUE_LABEL] = None
    df.loc[9, CATEGORY_LABEL] = None
    df.to_excel(path, index=False)


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Sales dashboard views from a sales workbook")

    # Default config.yaml so `python main.py` just works
    p.add_argument("--config", type=str, default="config.yaml", help="Path to config.yaml (default: config.yaml)")
    p.add_argument("--input", type=str, default=None, help="Override source (path or URL) from config")
    p.add_argument("--out", type=str, default=None, help="Override out_dir from config")

    p.add_argument("--demo", action="store_true", help="Generate a demo workbook at the source path then run")

    # Optional override for PDF only (config controls defaults)
    g = p.add_mutually_exclusive_group()
    g.add_argument("--pdf", action="store_true", help="Force PDF on (override config)")
    g.add_argument("--no-pdf", action="store_true", help="Force PDF off (override config)")

    return p.parse_args(argv)


def main(argv: list[str]) -> int:
    args = parse_args(argv)

    try:
        cfg = resolve_config(
            config_path=args.config,
            cli_source=args.input,
            cli_out=args.out,
        )
    except (OSError, ValueError) as e:
        print(f"ERROR loading config: {e}", file=sys.stderr)
        return 2

    out_dir = cfg.out_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    configure_logging(out_dir / "build.log")

    # CLI override for PDF
    make_pdf = cfg.make_pdf
    if args.pdf:
        make_pdf = True
    if args.no_pdf:
        make_pdf = False

    if args.demo:
        if is_url(cfg.source):
            print(f"ERROR: --demo needs a local source path, got {cfg.source}", file=sys.stderr)
            return 2
        make_demo_inputs(Path(cfg.source))

    try:
        rows = read_rows(cfg.source)
    except (OSError, ValueError) as e:
        print(f"ERROR reading {cfg.source}: {e}", file=sys.stderr)
        return 2

    if not rows:
        print(f"ERROR: No rows found in {cfg.source}", file=sys.stderr)
        return 2

    result = parse_rows(rows, aliases=cfg.aliases)
    bundle = aggregate(result.records)
    tables = build_tables(bundle, rows_loaded=len(rows), rows_skipped=result.skipped)
    log.info(
        "Aggregated %d records into %d categories, %d periods",
        len(result.records),
        len(bundle.categories),
        len(bundle.time_series),
    )

    if cfg.write_json:
        json_path = out_dir / "views.json"
        write_bundle_json(json_path, bundle)
        print(f"🧾 Views JSON written: {json_path}")

    if cfg.write_excel_pack:
        xlsx_path = out_dir / "sales_views.xlsx"
        try:
            write_excel_pack(xlsx_path, tables, warnings=result.warnings)
        except PermissionError:
            print(f"ERROR: Can't write {xlsx_path}. Close it if open in Excel, then re-run.", file=sys.stderr)
        else:
            print(f"📦 Excel pack created: {xlsx_path}")

    # Charts (generate if either charts are requested OR PDF needs them)
    created: list[Path] = []
    if cfg.write_charts or make_pdf:
        created = generate_charts(tables, out_dir / "charts")
        if created:
            print("📊 Charts saved:")
            for p in created:
                print(" -", p)
        else:
            print("📊 No charts generated (no groupable rows).")

    pdf_created = False
    if make_pdf:
        pdf_path = out_dir / "report.pdf"
        try:
            write_pdf_report(
                out_path=pdf_path,
                tables=tables,
                chart_paths=created,
                source_label=cfg.source,
                report_title=cfg.report_title,
                report_subtitle=cfg.report_subtitle,
                notes=cfg.notes,
                warnings=result.warnings,
            )
        except PermissionError:
            print(f"ERROR: Can't write {pdf_path}. Close it if open, then re-run.", file=sys.stderr)
        else:
            pdf_created = True
            print(f"📄 PDF report created: {pdf_path}")

    if cfg.write_run_log:
        log_path = out_dir / "run_log.txt"
        write_run_log(
            log_path,
            source=cfg.source,
            out_dir=str(out_dir),
            rows_loaded=len(rows),
            rows_skipped=result.skipped,
            categories=list(bundle.categories),
            charts_count=len(created),
            pdf_created=pdf_created,
            warnings=result.warnings,
        )
        print(f"🧾 Run log written: {log_path}")

    print(f"✅ Loaded rows: {len(rows)} from: {cfg.source}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
