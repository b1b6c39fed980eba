"""YAML front-matter parsing.

Structure:
    ---
    title: Home
    ---
    body text
"""

from __future__ import annotations

import re
from typing import Any

import yaml

from common_middleware.errors import ParseError
from common_middleware.file import File

FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE)


def parse(text: str, path: str = "<string>") -> tuple[dict[str, Any], str]:
    """Split front-matter from the body.

    Args:
        text: File content.
        path: Used in error messages.

    Returns:
        (data, body) tuple. Text without a front-matter block gives
        ({}, text).

    Raises:
        ParseError: If the block is not valid YAML or not a mapping.
    """
    m = FRONTMATTER_RE.match(text)
    if m is None:
        return {}, text

    try:
        data = yaml.safe_load(m.group(1))
    except yaml.YAMLError as e:
        raise ParseError(path, f"invalid front-matter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError(path, "front-matter is not a YAML mapping")

    return data, text[m.end():]


def apply(file: File) -> None:
    """Move a file's front-matter into ``file.data``."""
    data, body = parse(file.content, file.path)
    file.data.update(data)
    file.content = body
