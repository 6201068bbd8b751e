from __future__ import annotations

import http.server
import signal
import sys
import threading
from http import HTTPStatus
from typing import Callable, Sequence
from urllib.parse import urlsplit

from .config import Settings
from .content import Post
from .pages import render_blog, render_index, render_packages

ASSETS_PREFIX = "/assets/"
SHUTDOWN_MESSAGE = "\rCTRL+C pressed, attempting graceful shutdown ..."


def build_routes(settings: Settings, posts: Sequence[Post]) -> dict[str, Callable[[], str]]:
    return {
        "/": lambda: render_index(settings, posts),
        "/index.html": lambda: render_index(settings, posts),
        "/blog.html": lambda: render_blog(settings, posts),
        "/packages.html": lambda: render_packages(settings),
    }


def make_handler(settings: Settings, posts: Sequence[Post]) -> type[http.server.SimpleHTTPRequestHandler]:
    routes = build_routes(settings, posts)
    directory = str(settings.assets_dir)

    class SiteHandler(http.server.SimpleHTTPRequestHandler):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, directory=directory, **kwargs)

        def do_GET(self) -> None:
            self.dispatch(head_only=False)

        def do_HEAD(self) -> None:
            self.dispatch(head_only=True)

        def dispatch(self, head_only: bool) -> None:
            path = urlsplit(self.path).path
            render = routes.get(path)
            if render is not None:
                self.send_page(render().encode("utf-8"), head_only)
                return
            if path.startswith(ASSETS_PREFIX):
                if head_only:
                    super().do_HEAD()
                else:
                    super().do_GET()
                return
            self.send_page(routes["/"]().encode("utf-8"), head_only)

        def send_page(self, body: bytes, head_only: bool) -> None:
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            if not head_only:
                self.wfile.write(body)

    return SiteHandler


def make_server(settings: Settings, posts: Sequence[Post]) -> http.server.ThreadingHTTPServer:
    return http.server.ThreadingHTTPServer((settings.host, settings.port), make_handler(settings, posts))


def shutdown_handler(httpd: http.server.HTTPServer) -> Callable[[int, object], None]:
    def request_shutdown(signum: int, frame: object) -> None:
        print(SHUTDOWN_MESSAGE, file=sys.stderr)
        threading.Thread(target=httpd.shutdown, daemon=True).start()

    return request_shutdown


def serve(settings: Settings, posts: Sequence[Post]) -> None:
    httpd = make_server(settings, posts)
    previous = signal.signal(signal.SIGTERM, shutdown_handler(httpd))
    host = settings.host or "0.0.0.0"
    print(f"Serving http://{host}:{settings.port}/ (assets dir: {settings.assets_dir})")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print(SHUTDOWN_MESSAGE, file=sys.stderr)
    finally:
        httpd.server_close()
        signal.signal(signal.SIGTERM, previous)
