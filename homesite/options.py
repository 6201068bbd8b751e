from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Protocol

Attributes = dict[str, Any]


class Option(Protocol):
    def apply(self, attrs: Attributes) -> None: ...


@dataclass(frozen=True)
class OptionFunc:
    func: Callable[[Attributes], None]

    def apply(self, attrs: Attributes) -> None:
        self.func(attrs)


@dataclass
class Options:
    """Structured element options: an id, CSS classes and inline style entries.

    Style entries are copied into the attribute mapping as-is, so the values
    keep whatever type the caller gave them.
    """

    id: str = ""
    classes: list[str] = field(default_factory=list)
    style: dict[str, Any] = field(default_factory=dict)

    def apply(self, attrs: Attributes) -> None:
        if self.id:
            attrs["id"] = self.id
        if self.classes:
            attrs["class"] = merge_attr(get_attr(attrs, "class"), *self.classes)
        if self.style:
            attrs.update(self.style)


def get_attr(attrs: Attributes, name: str) -> str:
    value = attrs.get(name)
    if not isinstance(value, str):
        return ""
    return value


def with_attrs(*pairs: str) -> Option:
    if len(pairs) % 2 != 0:
        raise ValueError(f"odd attrs: expected name/value pairs, got {len(pairs)} values")
    items = list(zip(pairs[::2], pairs[1::2]))

    def apply(attrs: Attributes) -> None:
        for name, value in items:
            if name not in attrs:
                attrs[name] = value
            else:
                attrs[name] = merge_attr(get_attr(attrs, name), value)

    return OptionFunc(apply)


def css_class(*classes: str) -> Option:
    return with_attrs("class", " ".join(classes))


def new_attrs(opts: Iterable[Option] | None = None, *defaults: Option) -> Attributes:
    attrs: Attributes = {}
    for default in defaults:
        default.apply(attrs)
    for opt in opts or ():
        opt.apply(attrs)
    return attrs


def merge_attr(value: str, *new_values: str) -> str:
    tokens = set(value.split())
    for new_value in new_values:
        tokens.update(new_value.split())
    return " ".join(sorted(tokens))


def render_attrs(attrs: Attributes) -> str:
    parts = []
    for name in sorted(attrs):
        value = attrs[name]
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {html.escape(name)}")
            continue
        parts.append(f' {html.escape(name)}="{html.escape(str(value))}"')
    return "".join(parts)
