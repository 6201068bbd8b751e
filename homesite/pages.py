from __future__ import annotations

import datetime as dt
import html
from typing import Optional, Sequence

from pygments.formatters import HtmlFormatter

from .config import Package, Settings
from .content import Post, post_slug, render_markdown
from .options import Option, Options, css_class, with_attrs
from .render import element, render_template, strip_tags
from .utils import display_date, iso_date, join_url

RECENT_POSTS = 3
SUMMARY_LENGTH = 200
HIGHLIGHT_CLASS = "codehilite"

NAV_ITEMS = (
    ("/", "Home"),
    ("/blog.html", "Blog"),
    ("/packages.html", "Packages"),
)

BASE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{{title}}</title>
    <link rel="stylesheet" href="/assets/css/site.css">
    {{extra_head}}
  </head>
  <body>
    <header class="site-header">
      <a class="site-name" href="/">{{site_name}}</a>
      {{nav}}
    </header>
    <main class="site-main">
{{content}}
    </main>
    <footer class="site-footer">&copy; {{year}} {{author}}</footer>
  </body>
</html>
"""

REDIRECT_TEMPLATE = """<html>
  <head>
    <meta name="go-import" content="{{name}} git {{repo}}">
    <meta name="go-source" content="{{name}} {{repo}} {{repo}}/tree/main{/dir} {{repo}}/tree/main{/dir}/{file}#L{line}">
    <meta name="robots" content="noindex">
    <meta http-equiv="refresh" content="0; url=https://pkg.go.dev/{{name}}">
  </head>
  <body>
    Redirecting to <a href="https://pkg.go.dev/{{name}}">pkg.go.dev/{{name}}</a>.
  </body>
</html>
"""


def highlight_css() -> str:
    return HtmlFormatter().get_style_defs(f".{HIGHLIGHT_CLASS}")


def package_import_path(settings: Settings, package: Package) -> str:
    return join_url(settings.module_host, package.name)


def package_repo_url(settings: Settings, package: Package) -> str:
    return join_url(settings.repo_base, package.repo)


def build_nav(active: str) -> str:
    links = []
    for href, label in NAV_ITEMS:
        opts: list[Option] = [css_class("is-active")] if href == active else []
        links.append(element("a", html.escape(label), opts, with_attrs("href", href), css_class("nav-link")))
    return element("nav", "".join(links), None, css_class("site-nav"))


def render_page(
    settings: Settings,
    title: str,
    content: str,
    active: str,
    extra_head: str = "",
) -> str:
    page_title = f"{title} | {settings.site_name}" if title else settings.site_name
    return render_template(
        BASE_TEMPLATE,
        title=html.escape(page_title),
        site_name=html.escape(settings.site_name),
        author=html.escape(settings.author or settings.site_name),
        year=str(dt.datetime.now().year),
        nav=build_nav(active),
        extra_head=extra_head,
        content=content,
    )


def build_post_date(post: Post) -> str:
    if post.published is None:
        return ""
    return element(
        "time",
        display_date(post.published),
        None,
        with_attrs("datetime", iso_date(post.published)),
        css_class("post-date"),
    )


def unique_slugs(posts: Sequence[Post]) -> list[str]:
    used: set[str] = set()
    slugs = []
    for post in posts:
        base = post_slug(post)
        slug = base
        counter = 2
        while slug in used:
            slug = f"{base}-{counter}"
            counter += 1
        used.add(slug)
        slugs.append(slug)
    return slugs


def post_summary(post: Post) -> str:
    if post.summary:
        return post.summary
    summary = strip_tags(render_markdown(post.content)).strip().replace("\n", " ")
    return summary[:SUMMARY_LENGTH] + ("..." if len(summary) > SUMMARY_LENGTH else "")


def build_post_list(
    posts: Sequence[Post],
    slugs: Sequence[str],
    href_prefix: str = "",
    with_summary: bool = False,
) -> str:
    items = []
    for post, slug in zip(posts, slugs):
        link = element(
            "a",
            html.escape(post.title or "Untitled"),
            None,
            with_attrs("href", f"{href_prefix}#{slug}"),
            css_class("post-link"),
        )
        body = f"{link}{build_post_date(post)}"
        if with_summary:
            body += element("p", html.escape(post_summary(post)), None, css_class("post-summary"))
        items.append(element("li", body, None, css_class("post-list-item")))
    if not items:
        return element("p", "Nothing here yet.", None, css_class("empty"))
    return element("ul", "".join(items), None, css_class("post-list"))


def build_post(post: Post, slug: str) -> str:
    tags = "".join(element("span", html.escape(tag), None, css_class("chip")) for tag in post.tags)
    header = (
        element("h2", html.escape(post.title or "Untitled"), None, css_class("post-title"))
        + element("div", f"{build_post_date(post)}{tags}", None, css_class("post-meta"))
    )
    body = element("div", render_markdown(post.content), None, css_class("post-body"))
    return element(
        "article",
        f"{header}{body}",
        [Options(id=slug)],
        css_class("post"),
    )


def render_index(settings: Settings, posts: Optional[Sequence[Post]] = None) -> str:
    intro = element(
        "section",
        element("h1", html.escape(settings.site_name), None)
        + element("p", html.escape(settings.site_description), None, css_class("lead")),
        None,
        css_class("intro"),
    )
    recent = list(posts or [])[:RECENT_POSTS]
    sections = [intro]
    if recent:
        sections.append(
            element(
                "section",
                element("h2", "Recent writing", None)
                + build_post_list(
                    recent,
                    unique_slugs(posts or [])[:RECENT_POSTS],
                    "/blog.html",
                    with_summary=True,
                ),
                None,
                css_class("recent"),
            )
        )
    return render_page(settings, "", "\n".join(sections), "/")


def render_blog(settings: Settings, posts: Sequence[Post]) -> str:
    slugs = unique_slugs(posts)
    articles = "\n".join(build_post(post, slug) for post, slug in zip(posts, slugs))
    content = element(
        "section",
        element("h1", "Blog", None) + build_post_list(posts, slugs) + articles,
        None,
        css_class("blog"),
    )
    extra_head = f"<style>{highlight_css()}</style>"
    return render_page(settings, "Blog", content, "/blog.html", extra_head=extra_head)


def build_package(settings: Settings, package: Package) -> str:
    import_path = package_import_path(settings, package)
    link = element(
        "a",
        html.escape(import_path),
        None,
        with_attrs("href", f"https://pkg.go.dev/{import_path}"),
        css_class("package-link"),
    )
    source = element(
        "a",
        "source",
        None,
        with_attrs("href", package_repo_url(settings, package), "rel", "noopener"),
        css_class("package-source"),
    )
    return element("li", f"{link} {source}", [Options(id=f"pkg-{package.name}")], css_class("package"))


def render_packages(settings: Settings) -> str:
    items = "".join(build_package(settings, package) for package in settings.packages)
    content = element(
        "section",
        element("h1", "Packages", None) + element("ul", items, None, css_class("package-list")),
        None,
        css_class("packages"),
    )
    return render_page(settings, "Packages", content, "/packages.html")


def render_redirect(settings: Settings, package: Package) -> str:
    return render_template(
        REDIRECT_TEMPLATE,
        name=html.escape(package_import_path(settings, package)),
        repo=html.escape(package_repo_url(settings, package)),
    )
