"""
Pytest Configuration and Fixtures

Shared fixtures for building post directories and site settings in
temporary locations.
"""

import pytest
from pathlib import Path

from homesite.config import Package, Settings


def make_post(title: str, published: str, body: str = "Body text.\n") -> str:
    return f'---\ntitle: "{title}"\npublished: {published}\n---\n{body}'


@pytest.fixture
def write_post(tmp_path):
    """Write a markdown post under the temporary posts directory."""
    posts_dir = tmp_path / "posts"

    def _write(name: str, text: str) -> Path:
        path = posts_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    posts_dir.mkdir()
    _write.root = posts_dir
    return _write


@pytest.fixture
def posts_dir(write_post):
    """A posts directory with three well-formed posts."""
    write_post("a.md", make_post("First", "2024-01-01"))
    write_post("b.md", make_post("Second", "2024-06-01", "```python\nprint('hi')\n```\n"))
    write_post("c.md", make_post("Third", "2024-01-01"))
    return write_post.root


@pytest.fixture
def settings(tmp_path):
    """Settings pointing every directory at the temporary path."""
    return Settings(
        addr="127.0.0.1:0",
        assets_dir=tmp_path,
        posts_dir=tmp_path / "posts",
        output_dir=tmp_path / "out",
        site_name="Test Site",
        site_description="A site for tests.",
        author="Tester",
        module_host="go.example.dev",
        repo_base="https://github.com/example",
        packages=(Package("ptr", "ptr-go"), Package("tools/sub", "tools-go")),
    )
