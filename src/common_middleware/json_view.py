"""Structured read/write access to JSON files.

``install`` runs at load time: it snapshots the file's text and attaches a
``JsonView`` that parses the text on first access. ``flush`` runs before
the file is written: it serializes the view back into ``file.content``
unless another stage already rewrote the text, in which case that edit
is kept.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from common_middleware.errors import ParseError
from common_middleware.file import File
from common_middleware.shared import SharedData

logger = logging.getLogger(__name__)

_UNSET = object()


def _reject_constant(name: str) -> Any:
    raise ValueError(f"'{name}' is not valid JSON")


class JsonView:
    """Lazily parsed JSON value of a file's content.

    The first ``get`` parses ``file.content`` and caches the result; later
    reads return the same object even if the content has changed since.
    ``set`` replaces the cached value without touching the text.
    """

    def __init__(self, file: File, on_parse: Callable[[Any], None] | None = None) -> None:
        self._file = file
        self._value: Any = _UNSET
        self._on_parse = on_parse

    @property
    def loaded(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> Any:
        if self._value is _UNSET:
            try:
                value = json.loads(self._file.content, parse_constant=_reject_constant)
            except ValueError as e:
                raise ParseError(self._file.path, f"invalid JSON: {e}") from e
            self._value = value
            logger.debug("Parsed JSON view for %s", self._file.path)
            if self._on_parse is not None:
                self._on_parse(value)
        return self._value

    def set(self, value: Any) -> None:
        self._value = value


def _config_merger(path: str, shared: SharedData, config_name: str) -> Callable[[Any], None]:
    """Build a parse callback that merges ``<config_name>.data`` into ``shared``."""

    def merge(value: Any) -> None:
        if not isinstance(value, dict):
            return
        section = value.get(config_name)
        if not isinstance(section, dict):
            return
        data = section.get("data")
        if isinstance(data, dict):
            shared.merge(data)
            logger.debug("Merged '%s.data' from %s into shared data", config_name, path)

    return merge


def install(
    file: File,
    shared: SharedData | None = None,
    config_name: str | None = None,
) -> JsonView:
    """Snapshot the file's content and attach a JSON view.

    Args:
        file: File to install the view on. Installing again (on re-load)
            replaces the snapshot and the view.
        shared: Shared data that config sections merge into.
        config_name: Top-level key whose ``data`` mapping is merged into
            ``shared`` on first parse. Merging is off when either is None.

    Returns:
        The installed view.
    """
    on_parse = None
    if shared is not None and config_name:
        on_parse = _config_merger(file.path, shared, config_name)

    file.original_content = file.content
    file.json_view = JsonView(file, on_parse)
    return file.json_view


def serialize(value: Any) -> str:
    """Pretty-print a JSON value the way files are written to disk."""
    return json.dumps(value, indent=2, ensure_ascii=False) + "\n"


def flush(file: File) -> bool:
    """Write the JSON view back into ``file.content``.

    Returns:
        True if the content was replaced. False when the file has no view
        or its text was changed directly since load.

    Raises:
        ParseError: If the view was never read and the content is not JSON.
    """
    if file.json_view is None:
        return False

    if file.content != file.original_content:
        logger.debug("Content of %s changed since load; keeping direct edit", file.path)
        return False

    file.content = serialize(file.json_view.get())
    return True
