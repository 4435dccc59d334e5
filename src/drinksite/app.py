from __future__ import annotations

import argparse
import mimetypes
import sys
import traceback
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from typing import Any, Iterable, Optional
from urllib.parse import unquote, urlparse

from .config import SiteConfig, SiteContext
from .constants import (
    DEFAULT_DATA_FILE,
    DEFAULT_DB_FILE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_PUBLIC_DIR,
    DEFAULT_TEMPLATE_DIR,
)
from .dataset import load_records, open_store
from .index import build_index
from .routes import handle_get


class SiteHandler(BaseHTTPRequestHandler):
    server_version = "drinksite/0.1"

    def _ctx(self) -> SiteContext:
        return self.server.ctx  # type: ignore[attr-defined]

    def log_message(self, format: str, *args: Any) -> None:
        sys.stderr.write("[drinksite] " + format % args + "\n")

    def _send_bytes(self, data: bytes, content_type: str, status: int = 200) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _send_text(self, text: str, status: int = 200) -> None:
        self._send_bytes(text.encode("utf-8"), "text/plain; charset=utf-8", status)

    def _send_html(self, text: str, status: int = 200) -> None:
        self._send_bytes(text.encode("utf-8"), "text/html; charset=utf-8", status)

    def do_GET(self) -> None:  # noqa: N802
        try:
            if self._serve_static():
                return
            handle_get(self)
        except Exception as exc:  # pragma: no cover - safety net for local servers
            tb = traceback.format_exc()
            sys.stderr.write(f"[drinksite] GET error: {exc}\n{tb}\n")
            try:
                self.send_error(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
            except Exception:
                pass

    def _serve_static(self) -> bool:
        public_dir = self._ctx().cfg.public_dir.resolve()
        rel = unquote(urlparse(self.path).path).lstrip("/")
        if not rel:
            return False
        target = (public_dir / rel).resolve()
        try:
            target.relative_to(public_dir)
        except ValueError:
            return False
        if not target.is_file():
            return False
        ctype, _ = mimetypes.guess_type(str(target))
        ctype = ctype or "application/octet-stream"
        if ctype.startswith("text/") or ctype in {"application/javascript", "application/json"}:
            ctype += "; charset=utf-8"
        self._send_bytes(target.read_bytes(), ctype)
        return True


class SiteHTTPServer(HTTPServer):
    allow_reuse_address = True


def build_context(cfg: SiteConfig) -> SiteContext:
    records = load_records(cfg.data_path)
    return SiteContext(
        cfg=cfg,
        records=tuple(records),
        index=build_index(records),
        store=open_store(cfg.db_path),
    )


class _HelpFormatter(argparse.ArgumentDefaultsHelpFormatter, argparse.RawTextHelpFormatter):
    """Preserve example formatting while still showing defaults."""


def build_parser() -> argparse.ArgumentParser:
    examples = """Examples:
  # Serve the site from the current directory.
  drinksite --root . --port 8080
  # Share on the LAN (bind all interfaces).
  drinksite --root . --host 0.0.0.0
  # Alternate dataset and templates (still under --root).
  drinksite --root . --data data/drinks.csv --template-dir site/templates
  # Module entrypoint.
  python -m drinksite.app --root .
"""
    ap = argparse.ArgumentParser(
        prog="drinksite",
        description="Serve per-country drink servings as ranked tables and detail pages.",
        epilog=examples,
        formatter_class=_HelpFormatter,
    )
    ap.add_argument("--host", default=DEFAULT_HOST, help="Host to bind.")
    ap.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port to bind.")
    ap.add_argument("--root", default=".", help="Site root. Other paths resolve under this directory.")
    ap.add_argument("--public-dir", default=DEFAULT_PUBLIC_DIR, help="Static asset directory.")
    ap.add_argument("--template-dir", default=DEFAULT_TEMPLATE_DIR, help="HTML template directory.")
    ap.add_argument("--data", default=DEFAULT_DATA_FILE, help="CSV dataset. Missing file serves no data.")
    ap.add_argument("--db", default=DEFAULT_DB_FILE, help="Optional SQLite store, opened read-only.")
    return ap


def config_from_args(args: argparse.Namespace) -> SiteConfig:
    root = Path(args.root).resolve()
    return SiteConfig(
        root=root,
        public_dir=(root / args.public_dir).resolve(),
        template_dir=(root / args.template_dir).resolve(),
        data_path=(root / args.data).resolve(),
        db_path=(root / args.db).resolve(),
    )


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = config_from_args(args)
    ctx = build_context(cfg)

    server = SiteHTTPServer((args.host, args.port), SiteHandler)
    server.ctx = ctx  # type: ignore[attr-defined]

    print(f"[drinksite] Now listening on http://{args.host}:{args.port}/")
    if not cfg.public_dir.exists():
        print(f"[drinksite] Public dir missing: {cfg.public_dir}", file=sys.stderr)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\n[drinksite] Shutting down.")
    finally:
        server.server_close()
        if ctx.store is not None:
            ctx.store.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
