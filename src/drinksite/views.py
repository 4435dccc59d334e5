from __future__ import annotations

import html as html_lib
import json
import math
from typing import Iterable

from .constants import CATEGORIES, CHART_JS_URL, CHART_MEASURES, DETAIL_MEASURES
from .dataset import Record
from .index import slugify


def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == int(value):
        return str(int(value))
    return repr(value)


def _country_link(name: str, label: str | None = None) -> str:
    text = html_lib.escape(name) if label is None else label
    return f'<a href="/country/{slugify(name)}">{text}</a>'


def nav_list() -> str:
    return "\n".join(
        f'<li><a href="/{segment}">{segment.capitalize()}</a></li>' for segment, *_ in CATEGORIES
    )


def ranked(records: Iterable[Record], column: str) -> list[Record]:
    """Sort descending by one measure; NaN values go last, ties keep input order."""
    items = list(records)
    numbered = [r for r in items if not math.isnan(r.measure(column))]
    missing = [r for r in items if math.isnan(r.measure(column))]
    numbered.sort(key=lambda r: r.measure(column), reverse=True)
    return numbered + missing


def table_rows(records: Iterable[Record], column: str) -> str:
    return "\n".join(
        f"<tr><td>{_country_link(r.name)}</td><td>{format_number(r.measure(column))}</td></tr>"
        for r in records
    )


def detail_list(record: Record, prev_name: str, next_name: str) -> str:
    lines = [
        f"<li>{label}: {format_number(record.measure(column))}</li>" for label, column in DETAIL_MEASURES
    ]
    lines.append(
        f"<li>{_country_link(prev_name, '&larr; Prev')} | {_country_link(next_name, 'Next &rarr;')}</li>"
    )
    lines.append('<li><canvas id="chart" width="400" height="200"></canvas></li>')
    return "\n" + "\n".join(lines) + "\n"


def chart_script(record: Record) -> str:
    labels = json.dumps([label for label, _, _ in CHART_MEASURES])
    colors = json.dumps([color for _, _, color in CHART_MEASURES])
    data = ", ".join(format_number(record.measure(column)) for _, column, _ in CHART_MEASURES)
    return f"""
<script src="{CHART_JS_URL}"></script>
<script>
const ctx = document.getElementById('chart');
if (ctx) {{
  new Chart(ctx, {{
    type: 'bar',
    data: {{
      labels: {labels},
      datasets: [{{ label: 'Servings', data: [{data}], backgroundColor: {colors} }}]
    }},
    options: {{ responsive: true, maintainAspectRatio: false }}
  }});
}}
</script>"""
