from __future__ import annotations

import datetime as dt
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import markdown
import yaml

DELIMITER = b"---"
LEADING_DELIMITER = DELIMITER + b"\n"
POST_SUFFIX = ".md"
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "codehilite"]


class PostError(Exception):
    """Raised when a markdown post cannot be turned into a Post."""


class MissingHeaderError(PostError):
    pass


@dataclass(frozen=True)
class Post:
    title: str
    published: Optional[dt.datetime]
    content: str
    summary: str = ""
    tags: tuple[str, ...] = ()
    slug: str = ""
    source: str = ""


def slugify(text: str) -> str:
    text = text.lower()
    text = re.sub(r"[^\w]+", "-", text, flags=re.UNICODE)
    text = text.strip("-_").replace("_", "-")
    return text or "post"


def post_slug(post: Post) -> str:
    if post.slug:
        return slugify(post.slug)
    if post.title:
        return slugify(post.title)
    return slugify(Path(post.source).stem)


def parse_published(value: object, source: str) -> Optional[dt.datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        published = value
    elif isinstance(value, dt.date):
        published = dt.datetime.combine(value, dt.time())
    elif isinstance(value, str):
        try:
            published = dt.datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise PostError(f"{source}: invalid published date {value!r}") from exc
    else:
        raise PostError(f"{source}: invalid published date {value!r}")
    if published.tzinfo is None:
        return published.replace(tzinfo=dt.timezone.utc)
    return published


def parse_tags(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if isinstance(value, list):
        return tuple(str(item).strip() for item in value if str(item).strip())
    return (str(value),)


def parse_post(data: bytes, source: str = "") -> Post:
    if data.startswith(LEADING_DELIMITER):
        data = data[len(LEADING_DELIMITER) :]
    parts = data.split(DELIMITER, 1)
    if len(parts) != 2:
        raise MissingHeaderError(f"{source}: missing header" if source else "missing header")
    header, body = parts

    try:
        meta = yaml.safe_load(header.decode("utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise PostError(f"{source}: invalid front matter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise PostError(f"{source}: front matter must be a mapping")

    published = meta.get("published")
    if published is None:
        published = meta.get("date")
    try:
        content = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PostError(f"{source}: post body is not valid UTF-8") from exc
    return Post(
        title=str(meta.get("title") or ""),
        published=parse_published(published, source),
        content=content,
        summary=str(meta.get("summary") or ""),
        tags=parse_tags(meta.get("tags")),
        slug=str(meta.get("slug") or ""),
        source=source,
    )


def _raise(exc: OSError) -> None:
    raise exc


def walk_markdown(root: Path) -> list[Path]:
    if not root.exists():
        raise FileNotFoundError(f"Posts directory not found: {root}")
    if root.is_file():
        return [root] if root.suffix == POST_SUFFIX else []
    paths = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if path.suffix == POST_SUFFIX:
                paths.append(path)
    return paths


def sort_key(post: Post) -> dt.datetime:
    if post.published is None:
        return dt.datetime.min.replace(tzinfo=dt.timezone.utc)
    return post.published


def read_posts(root: Path | str) -> list[Post]:
    posts = []
    for path in walk_markdown(Path(root)):
        posts.append(parse_post(path.read_bytes(), path.as_posix()))
    posts.sort(key=sort_key, reverse=True)
    return posts


def render_markdown(text: str) -> str:
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs={"codehilite": {"guess_lang": False}},
    )
    return md.convert(text)
