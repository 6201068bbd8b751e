from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Optional

from .options import Option, new_attrs, render_attrs

TAG_RE = re.compile(r"<[^>]+>")
VOID_TAGS = {"br", "hr", "img", "input", "link", "meta"}


def strip_tags(html_text: str) -> str:
    return TAG_RE.sub("", html_text)


def render_template(template: str, **context: str) -> str:
    output = template
    late_keys = {"content"}
    for key, value in context.items():
        if key in late_keys:
            continue
        output = output.replace(f"{{{{{key}}}}}", value)
    for key in late_keys:
        if key in context:
            output = output.replace(f"{{{{{key}}}}}", context[key])
    return output


def element(
    tag: str,
    body: str = "",
    opts: Optional[Iterable[Option]] = None,
    *defaults: Option,
) -> str:
    attrs = render_attrs(new_attrs(opts, *defaults))
    if tag in VOID_TAGS:
        return f"<{tag}{attrs}>"
    return f"<{tag}{attrs}>{body}</{tag}>"


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
