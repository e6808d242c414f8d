from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class AppConfig:
    # Path or http(s) URL of the sales workbook
    source: str = "data/in/sales.xlsx"
    out_dir: Path = Path("out")
    aliases: dict[str, str] = field(default_factory=dict)

    # Report text
    report_title: str = "Sales Dashboard"
    report_subtitle: str = ""
    notes: list[str] = field(default_factory=list)

    # Run toggles
    make_pdf: bool = True
    write_excel_pack: bool = True
    write_charts: bool = True
    write_json: bool = True
    write_run_log: bool = True


def load_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError("Config must be a YAML mapping (key: value)")
    return data


def _as_bool(x: Any, default: bool) -> bool:
    if x is None:
        return default
    if isinstance(x, bool):
        return x
    if isinstance(x, (int, float)):
        return bool(x)
    s = str(x).strip().lower()
    if s in {"true", "yes", "y", "1", "on"}:
        return True
    if s in {"false", "no", "n", "0", "off"}:
        return False
    return default


def _parse_notes(raw_notes: Any) -> list[str]:
    if raw_notes is None:
        return []
    if isinstance(raw_notes, str):
        s = raw_notes.strip()
        return [s] if s else []
    if isinstance(raw_notes, list):
        out: list[str] = []
        for x in raw_notes:
            if x is None:
                continue
            s = str(x).strip()
            if s:
                out.append(s)
        return out
    raise ValueError("config.yaml notes must be a string or a list of strings")


def resolve_config(
    *,
    config_path: str | None,
    cli_source: str | None = None,
    cli_out: str | None = None,
) -> AppConfig:
    # If user doesn't provide a path, we default to config.yaml at project root
    path = Path(config_path or "config.yaml")
    raw = load_config(path)

    defaults = AppConfig()

    aliases_raw = raw.get("aliases", {}) or {}
    if not isinstance(aliases_raw, dict):
        raise ValueError("config.yaml aliases must be a mapping")
    aliases = {str(k): str(v) for k, v in aliases_raw.items()}

    cfg = AppConfig(
        source=str(raw.get("source") or defaults.source).strip(),
        out_dir=Path(raw.get("out_dir") or defaults.out_dir),
        aliases=aliases,
        report_title=str(raw.get("report_title", defaults.report_title)).strip() or defaults.report_title,
        report_subtitle=str(raw.get("report_subtitle", "") or "").strip(),
        notes=_parse_notes(raw.get("notes")),
        make_pdf=_as_bool(raw.get("make_pdf"), True),
        write_excel_pack=_as_bool(raw.get("write_excel_pack"), True),
        write_charts=_as_bool(raw.get("write_charts"), True),
        write_json=_as_bool(raw.get("write_json"), True),
        write_run_log=_as_bool(raw.get("write_run_log"), True),
    )

    # CLI overrides config (optional)
    return replace(
        cfg,
        source=cli_source or cfg.source,
        out_dir=Path(cli_out) if cli_out else cfg.out_dir,
    )
