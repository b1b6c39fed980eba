"""The file object handed to every hook."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from common_middleware.json_view import JsonView


@dataclass
class File:
    """A file moving through the pipeline.

    Attributes:
        path: Source path; hook patterns are matched against it.
        content: Current text. Any stage may rewrite it.
        data: Front-matter and other template context.
        handled: Phases the host has run on this file, in order.
        original_content: Snapshot of ``content`` taken when the JSON view
            was installed. None for files without a view.
        json_view: Accessor for the parsed JSON value, when installed.
    """

    path: str
    content: str = ""
    data: dict[str, Any] = field(default_factory=dict)
    handled: list[str] = field(default_factory=list)
    original_content: str | None = field(default=None, repr=False)
    json_view: JsonView | None = field(default=None, repr=False)

    @property
    def json(self) -> Any:
        """Parsed JSON value of ``content``, cached after the first read."""
        if self.json_view is None:
            raise AttributeError(f"{self.path} has no JSON view installed")
        return self.json_view.get()

    @json.setter
    def json(self, value: Any) -> None:
        if self.json_view is None:
            raise AttributeError(f"{self.path} has no JSON view installed")
        self.json_view.set(value)
