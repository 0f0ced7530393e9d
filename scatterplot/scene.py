from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any
import xml.etree.ElementTree as ET


SVG_NS = "http://www.w3.org/2000/svg"

_MISSING: Any = object()


class SceneNode:
    """Retained SVG element: attributes, inline style, text and children.

    Nodes carry an optional bound ``datum`` (the record a mark was drawn for)
    which never reaches the serialized markup.
    """

    def __init__(
        self,
        tag: str,
        attrs: Mapping[str, Any] | None = None,
        *,
        text: str | None = None,
    ) -> None:
        if not tag:
            raise ValueError("tag must be non-empty")
        self.tag = tag
        self.attrs: dict[str, Any] = dict(attrs or {})
        self.styles: dict[str, str] = {}
        self.text = text
        self.children: list[SceneNode] = []
        self.parent: SceneNode | None = None
        self.datum: Any = None

    def __repr__(self) -> str:
        cls = self.attrs.get("class")
        suffix = f".{cls.replace(' ', '.')}" if cls else ""
        return f"<SceneNode {self.tag}{suffix} children={len(self.children)}>"

    def append(self, tag: str, attrs: Mapping[str, Any] | None = None, *, text: str | None = None) -> "SceneNode":
        child = SceneNode(tag, attrs, text=text)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self) -> None:
        if self.parent is None:
            return
        self.parent.children.remove(self)
        self.parent = None

    def attr(self, name: str, value: Any = _MISSING) -> Any:
        if value is _MISSING:
            return self.attrs.get(name)
        if value is None:
            self.attrs.pop(name, None)
        else:
            self.attrs[name] = value
        return self

    def set_attrs(self, attrs: Mapping[str, Any]) -> "SceneNode":
        for name, value in attrs.items():
            self.attr(name, value)
        return self

    def style(self, name: str, value: Any = _MISSING) -> Any:
        if value is _MISSING:
            return self.styles.get(name)
        if value is None:
            self.styles.pop(name, None)
        else:
            self.styles[name] = str(value)
        return self

    @property
    def classes(self) -> tuple[str, ...]:
        raw = self.attrs.get("class")
        return tuple(str(raw).split()) if raw else ()

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def iter(self) -> Iterator["SceneNode"]:
        """Depth-first descendants, excluding ``self``."""
        for child in self.children:
            yield child
            yield from child.iter()

    def ancestors(self) -> Iterator["SceneNode"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def matches(self, selector: str) -> bool:
        parts = selector.split()
        if not parts or not _matches_simple(self, parts[-1]):
            return False
        remaining = parts[:-1]
        for ancestor in self.ancestors():
            if not remaining:
                break
            if _matches_simple(ancestor, remaining[-1]):
                remaining.pop()
        return not remaining

    def select(self, selector: str) -> "SceneNode | None":
        for node in self.iter():
            if node.matches(selector):
                return node
        return None

    def select_all(self, selector: str) -> list["SceneNode"]:
        return [node for node in self.iter() if node.matches(selector)]

    def find_by_id(self, element_id: str) -> "SceneNode | None":
        return self.select(f"#{element_id}")

    def to_element(self) -> ET.Element:
        elem = ET.Element(self.tag, {k: format_value(v) for k, v in self.attrs.items()})
        if self.styles:
            elem.set("style", "; ".join(f"{k}: {v}" for k, v in self.styles.items()))
        if self.text is not None:
            elem.text = str(self.text)
        for child in self.children:
            elem.append(child.to_element())
        return elem

    def to_markup(self) -> str:
        return ET.tostring(self.to_element(), encoding="unicode")


def container() -> SceneNode:
    """Fresh root node that charts can be appended into."""
    return SceneNode("div")


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value != value:
            return "NaN"
        if value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def number(value: Any, default: float = 0.0) -> float:
    """Parse a numeric attribute, accepting ``px`` suffixes."""
    if value is None:
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    text = str(value).strip()
    if text.endswith("px"):
        text = text[:-2]
    try:
        return float(text)
    except ValueError:
        return default


def _matches_simple(node: SceneNode, simple: str) -> bool:
    if simple.startswith("#"):
        return node.attrs.get("id") == simple[1:]
    tag, *classes = simple.split(".")
    if tag and tag != "*" and node.tag != tag:
        return False
    have = node.classes
    return all(c in have for c in classes if c)
