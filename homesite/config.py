from __future__ import annotations

import json
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional

import yaml

from .utils import parse_bool, parse_int

ENV_PREFIX = "LOCAL_DEV"
DEFAULT_ADDR = ":8080"
MIN_PORT = 1024


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Package:
    name: str
    repo: str


DEFAULT_PACKAGES = (
    Package("ptr", "ptr-go"),
    Package("x", "exp"),
    Package("leaselock", "leaselock"),
    Package("log", "log-go"),
    Package("group", "group-go"),
    Package("quake-kube", "quake-kube"),
    Package("result", "result-go"),
    Package("run", "run-go"),
    Package("tools", "tools-go"),
    Package("webos", "webos"),
)


@dataclass(frozen=True)
class Settings:
    addr: str = DEFAULT_ADDR
    assets_dir: Path = Path(".")
    output: bool = False
    posts_dir: Path = Path("posts")
    output_dir: Path = Path(".")
    site_name: str = "Home"
    site_description: str = "Notes, projects and Go packages."
    author: str = ""
    module_host: str = "go.example.dev"
    repo_base: str = "https://github.com/example"
    packages: tuple[Package, ...] = field(default=DEFAULT_PACKAGES)

    @property
    def host(self) -> str:
        return split_addr(self.addr)[0]

    @property
    def port(self) -> int:
        return split_addr(self.addr)[1]


def split_addr(addr: str) -> tuple[str, int]:
    host, sep, port_value = addr.strip().rpartition(":")
    if not sep:
        raise ConfigError(f"Invalid address {addr!r}: expected [host]:port")
    port = parse_int(port_value, -1)
    if port < 0 or port > 65535:
        raise ConfigError(f"Invalid port in address {addr!r}")
    return host.strip("[]"), port


def validate_addr(addr: str) -> str:
    _, port = split_addr(addr)
    if port <= MIN_PORT:
        raise ConfigError(f"Port in address {addr!r} must be greater than {MIN_PORT}")
    return addr


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {path}")
    return data


def parse_packages(value: object) -> tuple[Package, ...]:
    if not isinstance(value, list):
        raise ConfigError("packages must be a list of {name, repo} entries")
    packages = []
    for item in value:
        if not isinstance(item, dict) or not item.get("name"):
            raise ConfigError(f"Invalid package entry: {item!r}")
        name = str(item["name"]).strip()
        packages.append(Package(name, str(item.get("repo") or name).strip()))
    return tuple(packages)


def settings_from_config(config: Mapping[str, object], base: Optional[Settings] = None) -> Settings:
    settings = base or Settings()
    changes: dict[str, object] = {}
    for key in ("site_name", "site_description", "author", "module_host", "repo_base"):
        value = config.get(key)
        if value is not None:
            changes[key] = str(value)
    for key, attr in (("posts", "posts_dir"), ("output_dir", "output_dir"), ("assets", "assets_dir")):
        value = config.get(key)
        if value:
            changes[attr] = Path(str(value))
    if config.get("addr"):
        changes["addr"] = validate_addr(str(config["addr"]))
    if "packages" in config:
        changes["packages"] = parse_packages(config["packages"])
    return replace(settings, **changes)


def settings_from_env(
    environ: Optional[Mapping[str, str]] = None,
    prefix: str = ENV_PREFIX,
    base: Optional[Settings] = None,
) -> Settings:
    env = os.environ if environ is None else environ
    settings = base or Settings()

    def env_value(name: str) -> Optional[str]:
        value = env.get(f"{prefix}_{name}" if prefix else name)
        if value is None or value == "":
            return None
        return value

    changes: dict[str, object] = {}
    addr = env_value("ADDR")
    if addr is not None:
        changes["addr"] = validate_addr(addr)
    assets = env_value("DIR")
    if assets is not None:
        changes["assets_dir"] = Path(assets)
    output = env_value("OUTPUT")
    if output is not None:
        changes["output"] = parse_bool(output)
    posts = env_value("POSTS")
    if posts is not None:
        changes["posts_dir"] = Path(posts)
    out_dir = env_value("OUT_DIR")
    if out_dir is not None:
        changes["output_dir"] = Path(out_dir)
    return replace(settings, **changes)
