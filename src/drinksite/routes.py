from __future__ import annotations

import html as html_lib
import sys
from typing import Any, Protocol
from urllib.parse import unquote, urlparse

from .config import SiteContext
from .constants import CATEGORIES
from .index import UnknownEntityError
from .templates import MissingTemplateError, load_template, render
from .views import chart_script, detail_list, nav_list, ranked, table_rows


class HandlerLike(Protocol):
    path: str
    headers: Any

    def _ctx(self) -> SiteContext: ...

    def _send_text(self, text: str, status: int = 200) -> None: ...

    def _send_html(self, text: str, status: int = 200) -> None: ...


def _template(handler: HandlerLike, name: str) -> str | None:
    try:
        return load_template(handler._ctx().cfg.template_dir, name)
    except MissingTemplateError as exc:
        sys.stderr.write(f"[drinksite] {exc}\n")
        handler._send_text("Missing template", status=500)
        return None


def _home(handler: HandlerLike) -> None:
    tpl = _template(handler, "index.html")
    if tpl is None:
        return
    handler._send_html(render(tpl, [("$$$DRINKS_LIST$$$", nav_list())]))


def _category(handler: HandlerLike, template: str, token: str, column: str) -> None:
    tpl = _template(handler, template)
    if tpl is None:
        return
    rows = ranked(handler._ctx().records, column)
    handler._send_html(render(tpl, [(token, table_rows(rows, column))]))


def _country(handler: HandlerLike, slug: str) -> None:
    index = handler._ctx().index
    try:
        name = index.resolve(slug)
        record = index.record_for(name)
        prev_name, next_name = index.neighbours(name)
    except UnknownEntityError as exc:
        handler._send_text(f"Error: {exc}", status=404)
        return
    tpl = _template(handler, "drinks.html")
    if tpl is None:
        return
    out = render(
        tpl,
        [
            ("$$$DRINK_TYPE$$$", html_lib.escape(name)),
            ("$$$DRINKS_LIST$$$", detail_list(record, prev_name, next_name)),
        ],
    )
    handler._send_html(out + chart_script(record))


def handle_get(handler: HandlerLike) -> None:
    path = urlparse(handler.path).path
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    lowered = path.lower()
    if path == "/":
        _home(handler)
        return
    for segment, template, token, column in CATEGORIES:
        if lowered == f"/{segment}":
            _category(handler, template, token, column)
            return
    if lowered.startswith("/country/"):
        slug = unquote(path[len("/country/") :])
        if slug and "/" not in slug:
            _country(handler, slug)
            return
    handler._send_text(f"Error: unknown route {handler.path}", status=404)
