"""表格回答的纯文本渲染。"""

from typing import Any, List, Optional

from refchat.domain.models import Table


PLACEHOLDER = "-"


def _cell(value: Any) -> str:
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def table_rows(table: Optional[Table]) -> List[List[str]]:
    """返回 [表头, 行1, 行2, ...]；缺失的单元格用占位符代替。

    表格为空或缺少列/行时返回空列表。
    """
    if table is None or not table.columns or not table.rows:
        return []
    rows = [list(table.columns)]
    for row in table.rows:
        rows.append([_cell(row.get(col)) for col in table.columns])
    return rows


def format_table(table: Optional[Table]) -> str:
    rows = table_rows(table)
    if not rows:
        return ""
    widths = [max(len(r[i]) for r in rows) for i in range(len(rows[0]))]
    lines = []
    for n, row in enumerate(rows):
        lines.append(" | ".join(cell.ljust(w) for cell, w in zip(row, widths)).rstrip())
        if n == 0:
            lines.append("-+-".join("-" * w for w in widths))
    return "\n".join(lines)
