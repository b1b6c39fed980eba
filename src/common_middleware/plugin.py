"""Hook registration against a host pipeline.

The host must provide ``on_load``, ``post_render`` and ``pre_write``, each
taking a path pattern and a ``handler(file, done)`` callable. Handlers
finish their work synchronously and then call ``done()``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol, runtime_checkable

from common_middleware import frontmatter
from common_middleware.config import MiddlewareOptions, options_from_mapping
from common_middleware.errors import ConfigError, RegistrationError
from common_middleware.escape import escape, unescape
from common_middleware.file import File
from common_middleware.json_view import flush, install
from common_middleware.shared import SharedData

logger = logging.getLogger(__name__)

Done = Callable[..., None]
Handler = Callable[[File, Done], None]

REQUIRED_HOOKS = ("on_load", "post_render", "pre_write")


@runtime_checkable
class HookRegistry(Protocol):
    def on_load(self, pattern: Any, handler: Handler) -> Any: ...

    def post_render(self, pattern: Any, handler: Handler) -> Any: ...

    def pre_write(self, pattern: Any, handler: Handler) -> Any: ...


def _check_app(app: Any) -> None:
    missing = [name for name in REQUIRED_HOOKS if not callable(getattr(app, name, None))]
    if missing:
        raise RegistrationError(
            f"{type(app).__name__} cannot host the middleware: "
            f"missing {', '.join(missing)}"
        )


def register(
    app: HookRegistry,
    options: MiddlewareOptions | dict | None = None,
    shared: SharedData | None = None,
) -> MiddlewareOptions:
    """Register all middleware handlers on ``app``.

    Args:
        app: Host implementing the hook registry.
        options: Options object or mapping. Defaults apply when omitted.
        shared: Shared data that config JSON files merge into.

    Returns:
        The resolved options.

    Raises:
        RegistrationError: If ``app`` lacks one of the required hooks.
        ConfigError: If ``options`` is a mapping with bad values, or
            ``config_name`` is set without a ``shared`` cache to merge into.
    """
    _check_app(app)
    opts = options if isinstance(options, MiddlewareOptions) else options_from_mapping(options)
    if opts.config_name and shared is None:
        raise ConfigError(
            f"'config_name' is set to '{opts.config_name}' but no shared data was given"
        )

    def parse_front_matter(file: File, done: Done) -> None:
        frontmatter.apply(file)
        done()

    def escape_delims(file: File, done: Done) -> None:
        file.content = escape(file.content)
        done()

    def unescape_delims(file: File, done: Done) -> None:
        file.content = unescape(file.content, strip=True)
        done()

    def install_json(file: File, done: Done) -> None:
        install(file, shared, opts.config_name)
        done()

    def flush_json(file: File, done: Done) -> None:
        if flush(file):
            logger.debug("Wrote JSON view into %s", file.path)
        done()

    if opts.front_matter:
        app.on_load(opts.ext_pattern, parse_front_matter)
    app.on_load(opts.escape_pattern, escape_delims)
    if opts.unescape_phase == "preWrite":
        app.pre_write(opts.escape_pattern, unescape_delims)
    else:
        app.post_render(opts.escape_pattern, unescape_delims)
    app.on_load(opts.json_pattern, install_json)
    app.pre_write(opts.json_pattern, flush_json)

    logger.debug("Registered middleware on %s (%s)", type(app).__name__, opts)
    return opts


def middleware(
    options: MiddlewareOptions | dict | None = None,
    shared: SharedData | None = None,
) -> Callable[[HookRegistry], MiddlewareOptions]:
    """Return a plugin that registers the middleware on the app it's given."""

    def plugin(app: HookRegistry) -> MiddlewareOptions:
        return register(app, options, shared)

    return plugin
