from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Sequence

from .config import Settings
from .content import Post
from .pages import render_blog, render_index, render_packages, render_redirect
from .render import write_text


def redirect_filename(name: str) -> str:
    return PurePosixPath(name).name


def generate(settings: Settings, posts: Sequence[Post]) -> list[Path]:
    output_dir = settings.output_dir
    written = [
        write_text(output_dir / "index.html", render_index(settings, posts)),
        write_text(output_dir / "blog.html", render_blog(settings, posts)),
        write_text(output_dir / "packages.html", render_packages(settings)),
    ]
    for package in settings.packages:
        path = output_dir / redirect_filename(package.name)
        written.append(write_text(path, render_redirect(settings, package)))
    return written
