"""Twitch IRC line parsing and formatting."""

from __future__ import annotations

from dataclasses import dataclass, field

_TAG_ESCAPES = {
    ":": ";",
    "s": " ",
    "\\": "\\",
    "r": "\r",
    "n": "\n",
}

_ACTION_PREFIX = "\x01ACTION "


def unescape_tag_value(value: str) -> str:
    """Undo IRCv3 message-tag escaping (``\\s`` -> space, ``\\:`` -> ``;``)."""
    if "\\" not in value:
        return value

    out: list[str] = []
    chars = iter(value)
    for char in chars:
        if char != "\\":
            out.append(char)
            continue
        escaped = next(chars, "")
        out.append(_TAG_ESCAPES.get(escaped, escaped))
    return "".join(out)


def parse_tags(raw: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for item in raw.split(";"):
        if not item:
            continue
        key, _, value = item.partition("=")
        tags[key] = unescape_tag_value(value)
    return tags


@dataclass(slots=True)
class IRCMessage:
    """Parsed IRC line with IRCv3 tags."""

    raw: str
    command: str
    params: list[str] = field(default_factory=list)
    prefix: str | None = None
    tags: dict[str, str] = field(default_factory=dict)

    @property
    def nick(self) -> str | None:
        """Nickname part of ``nick!user@host``."""
        if not self.prefix:
            return None
        return self.prefix.split("!", 1)[0]

    @property
    def trailing(self) -> str:
        return self.params[-1] if self.params else ""

    def is_privmsg(self) -> bool:
        return self.command == "PRIVMSG"

    def is_action(self) -> bool:
        """True for ``/me`` messages sent as CTCP ACTION."""
        return self.trailing.startswith(_ACTION_PREFIX)


def parse_line(line: str) -> IRCMessage | None:
    """Parse one IRC line. Returns None for blank input."""
    raw = line.rstrip("\r\n")
    rest = raw
    if not rest.strip():
        return None

    tags: dict[str, str] = {}
    if rest.startswith("@"):
        tag_part, _, rest = rest[1:].partition(" ")
        tags = parse_tags(tag_part)
        rest = rest.lstrip(" ")

    prefix = None
    if rest.startswith(":"):
        prefix, _, rest = rest[1:].partition(" ")
        rest = rest.lstrip(" ")

    trailing = None
    if " :" in rest:
        rest, trailing = rest.split(" :", 1)
    elif rest.startswith(":"):
        rest, trailing = "", rest[1:]

    parts = rest.split()
    if not parts:
        return None

    params = parts[1:]
    if trailing is not None:
        params.append(trailing)

    return IRCMessage(
        raw=raw,
        command=parts[0].upper(),
        params=params,
        prefix=prefix,
        tags=tags,
    )


def normalize_channel(name: str) -> str:
    """Lowercase a channel name and make sure it carries the '#' marker."""
    name = name.strip().lower()
    return name if name.startswith("#") else f"#{name}"


def format_password(secret: str) -> str:
    return secret if secret.startswith("oauth:") else f"oauth:{secret}"
