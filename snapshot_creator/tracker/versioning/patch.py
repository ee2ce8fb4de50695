"""In-place string-field patching for JSON-like text.

Rewrites the value of a single ``"key": "value"`` pair without parsing and
re-serializing the document, so whitespace, key order and anything else the
user wrote survive byte-for-byte outside the replaced value.

Matching is local and regex-based:

- Without a section, the first occurrence of the key at top level (object
  depth 0 or 1, braces inside string literals ignored) is patched.
- With a section, the search is confined to the text between the first
  ``"section": {`` and the next ``}``.  This span is non-greedy, so a nested
  object inside the target section cuts it short at the nested object's
  closing brace.  Keys after that point are not found.

A key that is not found leaves the document unchanged.  Callers that need to
know whether a patch happened compare the output with the input.
"""

from __future__ import annotations

import re
from collections.abc import Generator

_FORBIDDEN_VALUE_CHARS = frozenset('"\\\n\r')


def _field_pattern(field_name: str) -> re.Pattern[str]:
    return re.compile(rf'("{re.escape(field_name)}"\s*:\s*")[^"]*(")')


def _section_pattern(section: str) -> re.Pattern[str]:
    return re.compile(rf'"{re.escape(section)}"\s*:\s*\{{(.*?)\}}', re.DOTALL)


def patch_string_field(document: str, field_name: str, new_value: str, section: str | None = None) -> str:
    """Replace the string value of ``field_name``; return the patched text.

    Raises ``ValueError`` if ``new_value`` contains characters that would need
    JSON escaping (quote, backslash, line break).
    """
    if _FORBIDDEN_VALUE_CHARS.intersection(new_value):
        msg = f"Cannot patch {field_name!r} with a value that needs escaping: {new_value!r}"
        raise ValueError(msg)

    pattern = _field_pattern(field_name)

    if section is None:
        match = _first_top_level(document, pattern)
    else:
        span = _section_pattern(section).search(document)
        if span is None:
            return document
        match = pattern.search(document, span.start(1), span.end(1))

    if match is None:
        return document
    return document[: match.end(1)] + new_value + document[match.start(2) :]


def update_manifest_version(document: str, version: str) -> str:
    """Patch the manifest's top-level ``version`` field."""
    return patch_string_field(document, "version", version)


# -- Helpers -------------------------------------------------------------------


def _first_top_level(document: str, pattern: re.Pattern[str]) -> re.Match[str] | None:
    scanner = _depth_scanner(document)
    next(scanner)
    for match in pattern.finditer(document):
        depth, in_string = scanner.send(match.start())
        if not in_string and depth <= 1:
            return match
    return None


def _depth_scanner(document: str) -> Generator[tuple[int, bool], int, None]:
    """Coroutine: send a position (non-decreasing), receive (depth, in_string) there."""
    depth = 0
    in_string = False
    escaped = False
    pos = 0
    target = yield (0, False)
    while True:
        while pos < target:
            char = document[pos]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            pos += 1
        target = yield (depth, in_string)
