from __future__ import annotations

from typing import List, Dict, Any, Optional

import rel_config
from rel_engine import Relation


def _to_str(x: Any) -> str:
    return x if isinstance(x, str) else str(x)

def _clip(s: str, width: int) -> str:
    if len(s) > width:
        s = s[: max(0, width - 1)] + "…"
    return s.rjust(width)

def format_table(rel: Relation, width: Optional[int] = None) -> str:
    """Boxed fixed-width rendering of a relation, one line per tuple."""
    width = width or rel_config.DISPLAY_COLUMN_WIDTH
    rule = "|-" + "-" * (width * len(rel.attributes)) + "-|"

    def fmt(cells):
        return "| " + "".join(_clip(_to_str(c), width) for c in cells) + " |"

    lines = [f" Table {rel.name}", rule, fmt(rel.attributes), rule]
    lines.extend(fmt(row) for row in rel)
    lines.append(rule)
    return "\n".join(lines)

def format_index(rel: Relation) -> str:
    lines = [f" Index for {rel.name} ({rel.index.kind})", "-" * 19]
    for key, tup in rel.index.items():
        lines.append(f"{list(key.values)} -> {list(tup)}")
    lines.append("-" * 19)
    return "\n".join(lines)

def to_csv(rel: Relation, delimiter: str = ",") -> str:
    out = [delimiter.join(rel.attributes)]
    for r in rel:
        out.append(delimiter.join(map(_to_str, r)))
    return "\n".join(out)

def to_records(rel: Relation) -> List[Dict[str, Any]]:
    return [dict(zip(rel.attributes, row)) for row in rel]
