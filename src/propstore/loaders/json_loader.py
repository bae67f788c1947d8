"""
JSON property loader.

JSON property files may carry comments, which plain JSON does not allow:

    {
        // Base URL of the API
        "api.base_url": "https://api.example.com",
        /* Seconds before a request is abandoned */
        "api.timeout": 30
    }

Comments are stripped before parsing with a quote-aware scan, so text that
only looks like a comment inside a string literal is left alone.
"""

from __future__ import annotations

import json as _json
import re as _re
import typing as _typing

import propstore.constants as constants
import propstore.loaders.base as base

# Alternatives, tried left to right at each position:
# 1. a single- or double-quoted string literal (kept verbatim); a backslash
#    always consumes the character after it, so \\" ends the literal
#    and \" does not
# 2. a // comment up to and including its line break
# 3. a /* ... */ or /** ... */ block comment
_COMMENT_RE = _re.compile(
    r"""(([\"'])(?:\\.|(?!\2).)*?\2)"""
    r"""|(//[^\n\r]*(?:[\n\r]+|$)"""
    r"""|(/\*(?:(?!\*/).|[\n\r])*\*/))""",
    _re.MULTILINE,
)


def _replace_comment(match: _re.Match[str]) -> str:
    text = match.group(0)
    if text[0] in "\"'":
        return text
    return ""


def strip_comments(text: str) -> str:
    """
    Remove ``//``, ``/* */`` and ``/** */`` comments from JSON text.

    String literals are never modified.

    Example:
        >>> strip_comments('{"a": "// kept", "b": 1 /* dropped */}')
        '{"a": "// kept", "b": 1 }'
    """
    return _COMMENT_RE.sub(_replace_comment, text)


class JsonPropertyLoader(base.ResourcePropertyLoader):
    """
    Loads properties from a JSON resource.

    The top level must be an object. Nested objects and arrays are kept as
    MappingValue / SequenceValue under their first-level key unless the
    loader is created with ``flatten=True``.
    """

    extension = constants.JSON_EXTENSION
    format_name = "JSON"

    def _parse(self, data: bytes) -> _typing.Any:
        text = self._decode(data)
        if self._settings.strip_json_comments:
            text = strip_comments(text)
        try:
            return _json.loads(text)
        except _json.JSONDecodeError as e:
            raise self._parse_failed(e) from e
