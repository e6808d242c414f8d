from __future__ import annotations

import json
from pathlib import Path

from sales_views.models import AggregateBundle
from sales_views.tables import bundle_to_dict


def write_bundle_json(out_path: Path, bundle: AggregateBundle) -> None:
    """Write the bundle for a web renderer (UTF-8, labels kept unescaped)."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(
        json.dumps(bundle_to_dict(bundle), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
