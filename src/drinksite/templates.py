from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Union

Replacements = Union[Mapping[str, str], Iterable[tuple[str, str]]]


class MissingTemplateError(FileNotFoundError):
    pass


def load_template(template_dir: Path, name: str) -> str:
    base = template_dir.resolve()
    path = (base / name).resolve()
    try:
        path.relative_to(base)
    except ValueError as exc:
        raise MissingTemplateError(f"Template outside template dir: {name}") from exc
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MissingTemplateError(f"Template load error {path}: {exc}") from exc


def render(template_text: str, replacements: Replacements) -> str:
    """Substitute literal tokens in order; unmatched tokens stay as written."""
    pairs = replacements.items() if isinstance(replacements, Mapping) else replacements
    out = template_text
    for token, value in pairs:
        if not token:
            continue
        out = out.replace(token, str(value))
    return out
