"""Repository-relative path globs with `**` support."""

import re
from functools import lru_cache
from typing import Pattern


def normalize_glob(pattern: str) -> str:
    """Drop surrounding whitespace, leading `./` and outer slashes."""
    pattern = pattern.strip()
    while pattern.startswith("./"):
        pattern = pattern[2:]
    return pattern.strip("/")


@lru_cache(maxsize=64)
def compile_glob(pattern: str) -> Pattern[str]:
    """Translate a path glob into an anchored regular expression.

    `**` as a whole segment matches zero or more directories; `*`, `?` and
    `[...]` never match a `/`.
    """
    segments = normalize_glob(pattern).split("/")
    parts = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            parts.append(".*" if last else "(?:[^/]+/)*")
            continue
        parts.append(_translate_segment(segment) + ("" if last else "/"))
    return re.compile("^" + "".join(parts) + "$")


def _translate_segment(segment: str) -> str:
    out = []
    i = 0
    n = len(segment)
    while i < n:
        char = segment[i]
        i += 1
        if char == "*":
            # Collapse runs of stars inside a segment
            while i < n and segment[i] == "*":
                i += 1
            out.append("[^/]*")
        elif char == "?":
            out.append("[^/]")
        elif char == "[":
            # A `]` right after `[` or `[!` is a member, not the terminator
            j = i
            if j < n and segment[j] in "!^":
                j += 1
            if j < n and segment[j] == "]":
                j += 1
            end = segment.find("]", j)
            if end == -1:
                out.append(re.escape(char))
                continue
            body = segment[i:end]
            i = end + 1
            negate = body[:1] in ("!", "^")
            if negate:
                body = body[1:]
            body = body.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
            out.append("[" + ("^/" if negate else "") + body + "]")
        else:
            out.append(re.escape(char))
    return "".join(out)


def matches_glob(path: str, pattern: str) -> bool:
    if path.startswith("./"):
        path = path[2:]
    return compile_glob(pattern).match(path) is not None
