from __future__ import annotations

import re
import shutil
from pathlib import Path

from drinksite.app import build_context
from drinksite.config import SiteConfig, SiteContext
from drinksite.routes import handle_get

REPO_ROOT = Path(__file__).resolve().parents[1]
HEADER = "country,beer_servings,wine_servings,spirit_servings,total_litres_of_pure_alcohol\n"


class DummyHandler:
    def __init__(self, ctx: SiteContext, path: str) -> None:
        self._ctx_obj = ctx
        self.path = path
        self.headers: dict[str, str] = {}
        self.response: tuple[int, str, str] | None = None

    def _ctx(self) -> SiteContext:
        return self._ctx_obj

    def _send_text(self, text: str, status: int = 200) -> None:
        self.response = (status, "text", text)

    def _send_html(self, text: str, status: int = 200) -> None:
        self.response = (status, "html", text)


def make_ctx(tmp_path: Path, rows: str | None = "Aland,10,20,30,1.5\nZimbabwe,5,1,1,0.1\n") -> SiteContext:
    template_dir = tmp_path / "templates"
    shutil.copytree(REPO_ROOT / "templates", template_dir)
    public_dir = tmp_path / "public"
    public_dir.mkdir()
    data_path = tmp_path / "drinks.csv"
    if rows is not None:
        data_path.write_text(HEADER + rows, encoding="utf-8")
    cfg = SiteConfig(
        root=tmp_path,
        public_dir=public_dir,
        template_dir=template_dir,
        data_path=data_path,
        db_path=tmp_path / "alcohol.sqlite3",
    )
    return build_context(cfg)


def get(ctx: SiteContext, path: str) -> tuple[int, str, str]:
    handler = DummyHandler(ctx, path)
    handle_get(handler)
    assert handler.response is not None
    return handler.response


def test_home_lists_categories(tmp_path: Path) -> None:
    status, kind, body = get(make_ctx(tmp_path), "/")
    assert (status, kind) == (200, "html")
    assert '<a href="/beer">Beer</a>' in body
    assert "$$$DRINKS_LIST$$$" not in body


def test_beer_table_lists_aland_first(tmp_path: Path) -> None:
    status, _, body = get(make_ctx(tmp_path), "/beer")
    assert status == 200
    assert body.index("Aland") < body.index("Zimbabwe")


def test_category_rows_are_non_increasing(tmp_path: Path) -> None:
    rows = "Aland,10,20,30,1.5\nBrazil,50,3,9,2\nChad,7,40,1,0.3\nZimbabwe,5,1,1,0.1\n"
    ctx = make_ctx(tmp_path, rows)
    for path, column in (("/beer", "beer_servings"), ("/wine", "wine_servings"), ("/spirits", "spirit_servings")):
        status, _, body = get(ctx, path)
        assert status == 200
        values = [float(v) for v in re.findall(r"</a></td><td>([^<]+)</td>", body)]
        assert len(values) == 4
        assert values == sorted(values, reverse=True), column


def test_country_page_prev_next_wrap(tmp_path: Path) -> None:
    ctx = make_ctx(tmp_path)
    status, kind, body = get(ctx, "/country/zimbabwe")
    assert (status, kind) == (200, "html")
    assert "<title>Zimbabwe</title>" in body
    assert '<a href="/country/aland">&larr; Prev</a>' in body
    assert '<a href="/country/aland">Next &rarr;</a>' in body
    assert "data: [5, 1, 1]" in body
    assert body.rstrip().endswith("</script>")


def test_country_unknown_slug_is_404(tmp_path: Path) -> None:
    status, kind, body = get(make_ctx(tmp_path), "/country/not-a-real-place")
    assert (status, kind) == (404, "text")
    assert "not-a-real-place" in body


def test_unknown_route_echoes_path(tmp_path: Path) -> None:
    status, _, body = get(make_ctx(tmp_path), "/cider?x=1")
    assert status == 404
    assert body == "Error: unknown route /cider?x=1"


def test_missing_template_is_500(tmp_path: Path) -> None:
    ctx = make_ctx(tmp_path)
    (ctx.cfg.template_dir / "wine.html").unlink()
    status, _, body = get(ctx, "/wine")
    assert (status, body) == (500, "Missing template")


def test_degraded_mode_without_dataset(tmp_path: Path) -> None:
    ctx = make_ctx(tmp_path, rows=None)
    assert len(ctx.index) == 0
    status, _, body = get(ctx, "/spirits")
    assert status == 200
    assert "<tr><td>" not in body
    status, _, _ = get(ctx, "/country/aland")
    assert status == 404


def test_routes_accept_trailing_slash_and_any_case(tmp_path: Path) -> None:
    ctx = make_ctx(tmp_path)
    for path in ("/beer/", "/BEER", "/Wine/"):
        status, kind, body = get(ctx, path)
        assert (status, kind) == (200, "html"), path
        assert "<tr><td>" in body
    status, _, body = get(ctx, "/country/zimbabwe/")
    assert status == 200
    assert "<title>Zimbabwe</title>" in body
    status, _, _ = get(ctx, "/Country/aland")
    assert status == 200


def test_country_slug_stays_case_sensitive(tmp_path: Path) -> None:
    status, _, body = get(make_ctx(tmp_path), "/country/Zimbabwe")
    assert status == 404
    assert "Zimbabwe" in body
