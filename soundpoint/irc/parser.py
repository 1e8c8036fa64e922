"""IRCv3 tag parsing utilities."""

from __future__ import annotations

_TAG_ESCAPES = {
    ":": ";",
    "s": " ",
    "\\": "\\",
    "r": "\r",
    "n": "\n",
}


def _unescape_tag_value(value: str) -> str:
    if "\\" not in value:
        return value
    out: list[str] = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, None)
        if nxt is None:
            break
        out.append(_TAG_ESCAPES.get(nxt, nxt))
    return "".join(out)


def parse_tags(raw_tags: str) -> dict[str, str]:
    """Parse a ``key=value;key2=value2`` tag block (leading '@' optional)."""
    tags: dict[str, str] = {}
    raw_tags = raw_tags.strip()
    if raw_tags.startswith("@"):
        raw_tags = raw_tags[1:]
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        if "=" in tag:
            k, v = tag.split("=", 1)
        else:
            k, v = tag, ""
        tags[k] = _unescape_tag_value(v)
    return tags
