from __future__ import annotations

import argparse
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from .config import ConfigError, Settings, load_config, settings_from_config, settings_from_env, validate_addr
from .content import PostError, read_posts
from .generate import generate
from .server import serve


def build_parser(defaults: Settings, config_path: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal website and blog generator.")
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--posts", default=str(defaults.posts_dir), help="Directory containing Markdown posts.")
    parser.add_argument(
        "--output",
        action=argparse.BooleanOptionalAction,
        default=defaults.output,
        help="Write static pages instead of serving them.",
    )
    parser.add_argument(
        "--out-dir",
        default=str(defaults.output_dir),
        help="Directory generated pages are written to.",
    )
    parser.add_argument("--addr", default=defaults.addr, help="Address to listen on, e.g. :8080.")
    parser.add_argument(
        "--dir",
        default=str(defaults.assets_dir),
        help="Directory served for /assets/ requests.",
    )
    return parser


def resolve_settings(argv: Optional[Sequence[str]] = None) -> Settings:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default="site.toml")
    pre_args, _ = pre_parser.parse_known_args(argv)

    settings = settings_from_config(load_config(Path(pre_args.config)))
    settings = settings_from_env(base=settings)

    args = build_parser(settings, pre_args.config).parse_args(argv)
    return replace(
        settings,
        posts_dir=Path(args.posts),
        output=args.output,
        output_dir=Path(args.out_dir),
        addr=validate_addr(args.addr),
        assets_dir=Path(args.dir),
    )


def run(settings: Settings) -> None:
    posts = read_posts(settings.posts_dir)
    if settings.output:
        start = time.perf_counter()
        written = generate(settings, posts)
        elapsed = time.perf_counter() - start
        print(f"Wrote {len(written)} files to {settings.output_dir} in {elapsed:.2f}s.")
        return
    serve(settings, posts)


def main(argv: Optional[Sequence[str]] = None) -> None:
    try:
        settings = resolve_settings(argv)
        run(settings)
    except ConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)
    except PostError as exc:
        print(f"Failed to load posts: {exc}", file=sys.stderr)
        sys.exit(1)
    except OSError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
