"""Delimiter escaping for two-pass templates.

A double percent after an opening bracket marks a delimiter that must
survive the first rendering pass:

    {%%= foo %}   →  __ESC_CURLY_EQ_DELIM__ foo %}   →  {%= foo %}
    <%%- foo %>   →  __ESC_ANGLE_DASH_DELIM__ foo %> →  <%- foo %>

The body placeholder ``{% body %}`` gets its own sentinel so layout
substitution sees it untouched. Stray fragments such as ``%>`` are never
matched.
"""

from __future__ import annotations

import re

SENTINEL_PREFIX = "__ESC_"
SENTINEL_SUFFIX = "_DELIM__"

BODY_TAG = "{% body %}"
BODY_SENTINEL = f"{SENTINEL_PREFIX}BODY{SENTINEL_SUFFIX}"

_BRACKETS = {"{": "CURLY", "<": "ANGLE"}
_SIGILS = {"=": "_EQ", "-": "_DASH", "": ""}

_BRACKET_CHARS = {v: k for k, v in _BRACKETS.items()}
_SIGIL_CHARS = {v: k for k, v in _SIGILS.items()}

_DELIM_RE = re.compile(r"([{<])%%([=-]?)")
_SENTINEL_RE = re.compile(
    re.escape(SENTINEL_PREFIX) + r"(CURLY|ANGLE)(_EQ|_DASH)?" + re.escape(SENTINEL_SUFFIX)
)


def _encode(match: re.Match) -> str:
    bracket, sigil = match.group(1), match.group(2)
    return f"{SENTINEL_PREFIX}{_BRACKETS[bracket]}{_SIGILS[sigil]}{SENTINEL_SUFFIX}"


def escape(content: str) -> str:
    """Replace every escaped delimiter with its sentinel."""
    content = content.replace(BODY_TAG, BODY_SENTINEL)
    return _DELIM_RE.sub(_encode, content)


def unescape(content: str, strip: bool = False) -> str:
    """Restore sentinels written by ``escape``.

    Args:
        content: Text that may contain sentinels.
        strip: Drop one level of escaping, so ``{%%=`` comes back as
            ``{%=``. The body placeholder is restored literally either way.

    Returns:
        The restored text; unchanged when it holds no sentinels.
    """
    if SENTINEL_PREFIX not in content:
        return content

    percent = "%" if strip else "%%"

    def _decode(match: re.Match) -> str:
        bracket = _BRACKET_CHARS[match.group(1)]
        sigil = _SIGIL_CHARS[match.group(2) or ""]
        return f"{bracket}{percent}{sigil}"

    content = _SENTINEL_RE.sub(_decode, content)
    return content.replace(BODY_SENTINEL, BODY_TAG)


def has_sentinels(content: str) -> bool:
    """Check whether text still carries escape sentinels."""
    return bool(_SENTINEL_RE.search(content)) or BODY_SENTINEL in content
