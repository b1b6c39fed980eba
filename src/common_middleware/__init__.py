"""common-middleware — front-matter, delimiter escaping, and JSON views
for file-processing pipelines.

Registers handlers against a host's lifecycle hooks:

    on_load      parse front-matter, escape ``{%%=``/``<%%=`` delimiters,
                 install the ``file.json`` view
    post_render  remove one level of delimiter escaping
    pre_write    write the ``file.json`` value back into ``file.content``

Usage:
    app = Pipeline()
    shared = SharedData()
    app.use(middleware({"configName": "site"}, shared))
"""

from common_middleware.errors import (
    ConfigError,
    MiddlewareError,
    ParseError,
    RegistrationError,
)
from common_middleware.config import MiddlewareOptions, load_options, options_from_mapping
from common_middleware.escape import escape, unescape
from common_middleware.file import File
from common_middleware.json_view import JsonView, flush, install
from common_middleware.pipeline import Pipeline
from common_middleware.plugin import HookRegistry, middleware, register
from common_middleware.shared import SharedData

__all__ = [
    "ConfigError",
    "File",
    "HookRegistry",
    "JsonView",
    "MiddlewareError",
    "MiddlewareOptions",
    "ParseError",
    "Pipeline",
    "RegistrationError",
    "SharedData",
    "escape",
    "flush",
    "install",
    "load_options",
    "middleware",
    "options_from_mapping",
    "register",
    "unescape",
]
