"""Minimal in-memory host pipeline.

Runs handlers registered per phase against files whose path matches the
handler's pattern. Enough to drive the middleware from the CLI and in
tests; it does not render templates itself.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable

from common_middleware.errors import ParseError
from common_middleware.file import File

logger = logging.getLogger(__name__)

PHASES = ("onLoad", "postRender", "preWrite", "postWrite")

Engine = Callable[[str, dict], str]


def _as_pattern(pattern: str | re.Pattern) -> re.Pattern:
    return pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)


class Pipeline:
    """Per-phase handler registry with load, render and write steps."""

    def __init__(self) -> None:
        self.handlers: dict[str, list[tuple[re.Pattern, Callable]]] = {p: [] for p in PHASES}

    # ── Registration ─────────────────────────────────────────────────

    def _add(self, phase: str, pattern: str | re.Pattern, handler: Callable) -> Pipeline:
        self.handlers[phase].append((_as_pattern(pattern), handler))
        return self

    def on_load(self, pattern, handler) -> Pipeline:
        return self._add("onLoad", pattern, handler)

    def post_render(self, pattern, handler) -> Pipeline:
        return self._add("postRender", pattern, handler)

    def pre_write(self, pattern, handler) -> Pipeline:
        return self._add("preWrite", pattern, handler)

    def post_write(self, pattern, handler) -> Pipeline:
        return self._add("postWrite", pattern, handler)

    def use(self, plugin: Callable[[Pipeline], Any]) -> Pipeline:
        plugin(self)
        return self

    # ── Execution ────────────────────────────────────────────────────

    def handle(self, phase: str, file: File) -> File:
        """Run every handler for ``phase`` whose pattern matches the file.

        Raises:
            KeyError: If ``phase`` is unknown.
            Exception: Whatever a handler raises or passes to ``done``.
        """
        ran = False
        for pattern, handler in self.handlers[phase]:
            if not pattern.search(file.path):
                continue
            errors: list[BaseException] = []

            def done(err: BaseException | None = None) -> None:
                if err is not None:
                    errors.append(err)

            handler(file, done)
            ran = True
            if errors:
                raise errors[0]

        if ran:
            file.handled.append(phase)
            logger.debug("Ran %s handlers on %s", phase, file.path)
        return file

    def load(self, path: Path | str, content: str | None = None, data: dict | None = None) -> File:
        """Create a file (reading it from disk when no content is given) and run onLoad.

        Raises:
            ParseError: If the file on disk is not valid UTF-8.
        """
        if content is None:
            try:
                content = Path(path).read_text(encoding="utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(str(path), f"not valid UTF-8: {e}") from e
        file = File(path=str(path), content=content, data=dict(data or {}))
        return self.handle("onLoad", file)

    def render(self, file: File, context: dict | None = None, engine: Engine | None = None) -> File:
        """Render the file's content with ``engine`` and run postRender."""
        if engine is not None:
            file.content = engine(file.content, {**file.data, **(context or {})})
        return self.handle("postRender", file)

    def write(self, file: File, dest: Path | str | None = None, dry_run: bool = False) -> File:
        """Run preWrite, write the content to ``dest``, then run postWrite."""
        self.handle("preWrite", file)
        if dest is not None and not dry_run:
            dest_path = Path(dest)
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            dest_path.write_text(file.content, encoding="utf-8")
        return self.handle("postWrite", file)
