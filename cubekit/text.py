"""Formatted text in the JSON chat component format."""

from __future__ import annotations

import json
import string
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Union

_I32_MIN = -(1 << 31)
_I32_MAX = (1 << 31) - 1


@dataclass(frozen=True, order=True)
class Color:
    """An RGB text color."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if isinstance(channel, bool) or not isinstance(channel, int):
                raise TypeError("color channels must be integers")
            if not 0 <= channel <= 255:
                raise ValueError(f"color channel {channel} is out of range 0..255")

    @classmethod
    def from_str(cls, s: str) -> Color:
        """Parse ``#rrggbb`` or a named color; raise ValueError if invalid."""
        color = color_from_str(s)
        if color is None:
            raise ValueError(f"invalid hex color: {s!r}")
        return color

    def to_hex(self) -> str:
        """Return the color as ``#rrggbb`` in lower case."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


Color.AQUA = Color(85, 255, 255)
Color.BLACK = Color(0, 0, 0)
Color.BLUE = Color(85, 85, 255)
Color.DARK_AQUA = Color(0, 170, 170)
Color.DARK_BLUE = Color(0, 0, 170)
Color.DARK_GRAY = Color(85, 85, 85)
Color.DARK_GREEN = Color(0, 170, 0)
Color.DARK_PURPLE = Color(170, 0, 170)
Color.DARK_RED = Color(170, 0, 0)
Color.GOLD = Color(255, 170, 0)
Color.GRAY = Color(170, 170, 170)
Color.GREEN = Color(85, 255, 85)
Color.LIGHT_PURPLE = Color(255, 85, 255)
Color.RED = Color(255, 85, 85)
Color.WHITE = Color(255, 255, 255)
Color.YELLOW = Color(255, 255, 85)

_NAMED_COLORS = {
    "aqua": Color.AQUA,
    "black": Color.BLACK,
    "blue": Color.BLUE,
    "dark_aqua": Color.DARK_AQUA,
    "dark_blue": Color.DARK_BLUE,
    "dark_gray": Color.DARK_GRAY,
    "dark_green": Color.DARK_GREEN,
    "dark_purple": Color.DARK_PURPLE,
    "dark_red": Color.DARK_RED,
    "gold": Color.GOLD,
    "gray": Color.GRAY,
    "green": Color.GREEN,
    "light_purple": Color.LIGHT_PURPLE,
    "red": Color.RED,
    "white": Color.WHITE,
    "yellow": Color.YELLOW,
}


def color_from_str(s: str) -> Color | None:
    """Parse ``#rrggbb`` (any case) or a named color, or return None."""
    if len(s) == 7 and s[0] == "#" and all(c in string.hexdigits for c in s[1:]):
        return Color(int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))
    return _NAMED_COLORS.get(s)


_CLICK_ACTIONS = frozenset(
    {
        "open_url",
        "open_file",
        "run_command",
        "suggest_command",
        "change_page",
        "copy_to_clipboard",
    }
)


def _check_i32(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be an integer")
    if not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"{what} {value} is out of range for a 32-bit integer")
    return value


@dataclass(frozen=True)
class ClickEvent:
    """What happens when a piece of text is clicked.

    ``open_file`` is only usable by internal servers for security reasons.
    """

    action: str
    value: Union[str, int]

    def __post_init__(self) -> None:
        if self.action not in _CLICK_ACTIONS:
            raise ValueError(f"unknown click action {self.action!r}")
        if self.action == "change_page":
            _check_i32(self.value, "page")
        elif not isinstance(self.value, str):
            raise ValueError(f"value of {self.action} must be a string")

    def _to_dict(self) -> dict[str, Any]:
        return {"action": self.action, "value": self.value}

    @classmethod
    def _from_dict(cls, data: Any) -> ClickEvent:
        if not isinstance(data, Mapping) or "action" not in data or "value" not in data:
            raise ValueError("click event needs 'action' and 'value'")
        return cls(data["action"], data["value"])


@dataclass(frozen=True)
class HoverEvent:
    """What is shown when the cursor hovers over a piece of text.

    ``contents`` is a :class:`Text` for ``show_text``, a mapping with ``id``
    and ``count`` for ``show_item``, and a mapping with ``name`` (a Text) and
    ``type`` for ``show_entity``.
    """

    action: str
    contents: Any

    def __post_init__(self) -> None:
        if self.action == "show_text":
            if not isinstance(self.contents, Text):
                raise ValueError("show_text contents must be Text")
        elif self.action == "show_item":
            c = self.contents
            if not isinstance(c, Mapping) or not isinstance(c.get("id"), str):
                raise ValueError("show_item contents need a string 'id'")
            count = c.get("count")
            if count is not None:
                _check_i32(count, "item count")
            object.__setattr__(self, "contents", {"id": c["id"], "count": count})
        elif self.action == "show_entity":
            c = self.contents
            if (
                not isinstance(c, Mapping)
                or not isinstance(c.get("name"), Text)
                or not isinstance(c.get("type"), str)
            ):
                raise ValueError("show_entity contents need a Text 'name' and a string 'type'")
            object.__setattr__(self, "contents", {"name": c["name"], "type": c["type"]})
        else:
            raise ValueError(f"unknown hover action {self.action!r}")

    def _to_dict(self) -> dict[str, Any]:
        if self.action == "show_text":
            contents: Any = self.contents.to_dict()
        elif self.action == "show_item":
            contents = {"id": self.contents["id"], "count": self.contents["count"]}
        else:
            contents = {
                "name": self.contents["name"].to_dict(),
                "type": self.contents["type"],
            }
        return {"action": self.action, "contents": contents}

    @classmethod
    def _from_dict(cls, data: Any) -> HoverEvent:
        if not isinstance(data, Mapping) or "action" not in data or "contents" not in data:
            raise ValueError("hover event needs 'action' and 'contents'")
        action = data["action"]
        contents = data["contents"]
        if action == "show_text":
            return cls(action, Text.from_dict(contents))
        if action == "show_item":
            if not isinstance(contents, Mapping):
                raise ValueError("show_item contents must be an object")
            return cls(action, {"id": contents.get("id"), "count": contents.get("count")})
        if action == "show_entity":
            if not isinstance(contents, Mapping) or "name" not in contents:
                raise ValueError("show_entity contents need a 'name'")
            return cls(
                action,
                {"name": Text.from_dict(contents["name"]), "type": contents.get("type")},
            )
        raise ValueError(f"unknown hover action {action!r}")


@dataclass(frozen=True)
class _Style:
    color: Color | None = None
    font: str | None = None
    bold: bool | None = None
    italic: bool | None = None
    underlined: bool | None = None
    strikethrough: bool | None = None
    obfuscated: bool | None = None
    insertion: str | None = None
    click_event: ClickEvent | None = None
    hover_event: HoverEvent | None = None


_FLAGS = ("bold", "italic", "underlined", "strikethrough", "obfuscated")


@dataclass(frozen=True)
class Text:
    """Formatted text: plain or translated content, a style and child texts.

    Every formatting method returns a new Text and leaves this one unchanged.
    """

    content: str = ""
    translated: bool = False
    style: _Style = field(default_factory=_Style)
    extra: tuple[Text, ...] = ()

    @classmethod
    def plain(cls, plain: str) -> Text:
        """Plain, unformatted text."""
        return cls(content=plain)

    @classmethod
    def translate(cls, key: str) -> Text:
        """Text translated by the client from the given translation key."""
        return cls(content=key, translated=True)

    def _plain_parts(self):
        yield self.content
        for child in self.extra:
            yield from child._plain_parts()

    def to_plain(self) -> str:
        """Return the text without any formatting."""
        return "".join(self._plain_parts())

    def is_empty(self) -> bool:
        """Return True if the text contains no characters."""
        return not self.content and all(child.is_empty() for child in self.extra)

    def _styled(self, **changes: Any) -> Text:
        return replace(self, style=replace(self.style, **changes))

    def color(self, color: Color) -> Text:
        return self._styled(color=color)

    def clear_color(self) -> Text:
        return self._styled(color=None)

    def font(self, font: str) -> Text:
        return self._styled(font=font)

    def clear_font(self) -> Text:
        return self._styled(font=None)

    def bold(self) -> Text:
        return self._styled(bold=True)

    def not_bold(self) -> Text:
        return self._styled(bold=False)

    def clear_bold(self) -> Text:
        return self._styled(bold=None)

    def italic(self) -> Text:
        return self._styled(italic=True)

    def not_italic(self) -> Text:
        return self._styled(italic=False)

    def clear_italic(self) -> Text:
        return self._styled(italic=None)

    def underlined(self) -> Text:
        return self._styled(underlined=True)

    def not_underlined(self) -> Text:
        return self._styled(underlined=False)

    def clear_underlined(self) -> Text:
        return self._styled(underlined=None)

    def strikethrough(self) -> Text:
        return self._styled(strikethrough=True)

    def not_strikethrough(self) -> Text:
        return self._styled(strikethrough=False)

    def clear_strikethrough(self) -> Text:
        return self._styled(strikethrough=None)

    def obfuscated(self) -> Text:
        return self._styled(obfuscated=True)

    def not_obfuscated(self) -> Text:
        return self._styled(obfuscated=False)

    def clear_obfuscated(self) -> Text:
        return self._styled(obfuscated=None)

    def insertion(self, insertion: str) -> Text:
        return self._styled(insertion=insertion)

    def clear_insertion(self) -> Text:
        return self._styled(insertion=None)

    def on_click_open_url(self, url: str) -> Text:
        return self._styled(click_event=ClickEvent("open_url", url))

    def on_click_run_command(self, command: str) -> Text:
        return self._styled(click_event=ClickEvent("run_command", command))

    def on_click_suggest_command(self, command: str) -> Text:
        return self._styled(click_event=ClickEvent("suggest_command", command))

    def on_click_change_page(self, page: int) -> Text:
        return self._styled(click_event=ClickEvent("change_page", page))

    def on_click_copy_to_clipboard(self, text: str) -> Text:
        return self._styled(click_event=ClickEvent("copy_to_clipboard", text))

    def clear_click_event(self) -> Text:
        return self._styled(click_event=None)

    def on_hover_show_text(self, text: Text | str) -> Text:
        return self._styled(hover_event=HoverEvent("show_text", into_text(text)))

    def clear_hover_event(self) -> Text:
        return self._styled(hover_event=None)

    def add_child(self, text: Text | str) -> Text:
        """Return a copy with ``text`` appended to the children."""
        return replace(self, extra=self.extra + (into_text(text),))

    def __add__(self, other: Text | str) -> Text:
        if not isinstance(other, (Text, str)):
            return NotImplemented
        return self.add_child(other)

    def __radd__(self, other: str) -> Text:
        if not isinstance(other, str):
            return NotImplemented
        return into_text(other).add_child(self)

    def __iadd__(self, other: Text | str) -> Text:
        return self.__add__(other)

    def __str__(self) -> str:
        return self.to_plain()

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form of the text."""
        out: dict[str, Any] = {"translate" if self.translated else "text": self.content}
        s = self.style
        if s.color is not None:
            out["color"] = s.color.to_hex()
        if s.font is not None:
            out["font"] = s.font
        for flag in _FLAGS:
            value = getattr(s, flag)
            if value is not None:
                out[flag] = value
        if s.insertion is not None:
            out["insertion"] = s.insertion
        if s.click_event is not None:
            out["clickEvent"] = s.click_event._to_dict()
        if s.hover_event is not None:
            out["hoverEvent"] = s.hover_event._to_dict()
        if self.extra:
            out["extra"] = [child.to_dict() for child in self.extra]
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Text:
        """Build a Text from its JSON object form; raise ValueError if invalid."""
        if not isinstance(data, Mapping):
            raise ValueError("text component must be a JSON object")
        if isinstance(data.get("text"), str):
            content, translated = data["text"], False
        elif isinstance(data.get("translate"), str):
            content, translated = data["translate"], True
        else:
            raise ValueError("text component needs a string 'text' or 'translate'")

        style: dict[str, Any] = {}
        color = data.get("color")
        if color is not None:
            if not isinstance(color, str):
                raise ValueError("a hex color of the form #rrggbb was expected")
            parsed = color_from_str(color)
            if parsed is None:
                raise ValueError("invalid hex color")
            style["color"] = parsed
        for key in ("font", "insertion"):
            value = data.get(key)
            if value is not None:
                if not isinstance(value, str):
                    raise ValueError(f"'{key}' must be a string")
                style[key] = value
        for flag in _FLAGS:
            value = data.get(flag)
            if value is not None:
                if not isinstance(value, bool):
                    raise ValueError(f"'{flag}' must be a boolean")
                style[flag] = value
        if data.get("clickEvent") is not None:
            style["click_event"] = ClickEvent._from_dict(data["clickEvent"])
        if data.get("hoverEvent") is not None:
            style["hover_event"] = HoverEvent._from_dict(data["hoverEvent"])

        children = data.get("extra") or []
        if not isinstance(children, list):
            raise ValueError("'extra' must be a list")
        return cls(
            content=content,
            translated=translated,
            style=_Style(**style),
            extra=tuple(cls.from_dict(child) for child in children),
        )

    def to_json(self) -> str:
        """Serialize the text as compact JSON."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, s: str) -> Text:
        """Parse a text component from JSON; raise ValueError if invalid."""
        return cls.from_dict(json.loads(s))


def into_text(obj: Text | str) -> Text:
    """Return ``obj`` as a Text; strings become plain text."""
    if isinstance(obj, Text):
        return obj
    if isinstance(obj, str):
        return Text.plain(obj)
    raise TypeError(f"cannot convert {type(obj).__name__} to Text")