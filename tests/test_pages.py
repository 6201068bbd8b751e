"""
Tests for page rendering and static generation.
"""

import datetime as dt

from homesite.config import Package
from homesite.content import Post, parse_post, read_posts
from homesite.generate import generate, redirect_filename
from homesite.pages import (
    highlight_css,
    post_summary,
    package_import_path,
    render_blog,
    render_index,
    render_packages,
    render_redirect,
    unique_slugs,
)

UTC = dt.timezone.utc


def make(title, day=1):
    return Post(title=title, published=dt.datetime(2024, 1, day, tzinfo=UTC), content="Hello *there*.")


class TestIndexPage:

    def test_active_nav_link(self, settings):
        """Test: The home link carries the active class."""
        html = render_index(settings)
        assert '<a class="is-active nav-link" href="/">Home</a>' in html
        assert '<a class="nav-link" href="/blog.html">Blog</a>' in html

    def test_site_details(self, settings):
        html = render_index(settings)
        assert "<title>Test Site</title>" in html
        assert "A site for tests." in html
        assert "Tester" in html

    def test_recent_posts_link_to_blog(self, settings, posts_dir):
        """Test: Recent posts link to anchors on the blog page."""
        html = render_index(settings, read_posts(posts_dir))
        assert 'href="/blog.html#second"' in html
        assert "Recent writing" in html

    def test_no_posts_no_recent_section(self, settings):
        assert "Recent writing" not in render_index(settings, [])


class TestBlogPage:

    def test_posts_rendered_in_order(self, settings, posts_dir):
        """Test: Articles appear newest first with markdown rendered."""
        html = render_blog(settings, read_posts(posts_dir))
        assert html.index('id="second"') < html.index('id="first"') < html.index('id="third"')
        assert 'class="codehilite"' in html
        assert '<time class="post-date" datetime="2024-06-01T00:00:00Z">June 1, 2024</time>' in html

    def test_date_shown_in_written_offset(self, settings):
        """Test: The calendar day follows the offset in the front matter."""
        post = parse_post(b"---\ntitle: Late\npublished: 2024-01-01T01:00:00+09:00\n---\nBody\n")
        html = render_blog(settings, [post])
        assert '<time class="post-date" datetime="2023-12-31T16:00:00Z">January 1, 2024</time>' in html
        assert "December 31, 2023" not in html

    def test_title_escaped(self, settings):
        html = render_blog(settings, [make("<script>")])
        assert "&lt;script&gt;" in html
        assert "<script>" not in html

    def test_markdown_body(self, settings):
        html = render_blog(settings, [make("Post")])
        assert "<em>there</em>" in html

    def test_highlight_styles_inlined(self, settings):
        html = render_blog(settings, [])
        assert ".codehilite" in html
        assert ".codehilite" in highlight_css()

    def test_duplicate_titles_get_unique_anchors(self):
        assert unique_slugs([make("Same"), make("Same", 2), make("Other")]) == ["same", "same-2", "other"]


class TestPackages:

    def test_packages_page(self, settings):
        html = render_packages(settings)
        assert 'href="https://pkg.go.dev/go.example.dev/ptr"' in html
        assert 'href="https://github.com/example/ptr-go"' in html
        assert 'id="pkg-ptr"' in html

    def test_import_path(self, settings):
        assert package_import_path(settings, Package("run", "run-go")) == "go.example.dev/run"

    def test_redirect_page(self, settings):
        """Test: Redirect pages carry go-import and go-source metadata."""
        html = render_redirect(settings, Package("ptr", "ptr-go"))
        assert '<meta name="go-import" content="go.example.dev/ptr git https://github.com/example/ptr-go">' in html
        assert "https://github.com/example/ptr-go/tree/main{/dir}/{file}#L{line}" in html
        assert 'url=https://pkg.go.dev/go.example.dev/ptr"' in html


class TestGenerate:

    def test_writes_all_pages(self, settings, posts_dir):
        written = generate(settings, read_posts(posts_dir))
        out = settings.output_dir
        assert sorted(path.name for path in written) == sorted(
            ["index.html", "blog.html", "packages.html", "ptr", "sub"]
        )
        assert "Second" in (out / "blog.html").read_text(encoding="utf-8")
        assert "go-import" in (out / "sub").read_text(encoding="utf-8")

    def test_redirect_filename(self):
        assert redirect_filename("quake-kube") == "quake-kube"
        assert redirect_filename("tools/sub") == "sub"


class TestSummary:

    def test_front_matter_summary_preferred(self):
        post = Post(title="X", published=None, content="Body", summary="Given")
        assert post_summary(post) == "Given"

    def test_summary_from_content(self):
        """Test: Markup is stripped and long text truncated."""
        assert post_summary(make("X")) == "Hello there."
        long_post = Post(title="X", published=None, content="word " * 100)
        summary = post_summary(long_post)
        assert summary.endswith("...")
        assert len(summary) == 203
