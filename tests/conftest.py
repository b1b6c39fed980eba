"""Shared test fixtures for common-middleware."""

import re

import pytest

from common_middleware.pipeline import Pipeline
from common_middleware.plugin import middleware
from common_middleware.shared import SharedData


def make_engine(open_delim: str, close_delim: str):
    """Build a tiny ``<open>= name <close>`` interpolation engine."""
    pattern = re.compile(re.escape(open_delim) + r"=\s*(\w+)\s*" + re.escape(close_delim))

    def render(content: str, context: dict) -> str:
        return pattern.sub(lambda m: str(context.get(m.group(1), "")), content)

    return render


@pytest.fixture
def curly_engine():
    return make_engine("{%", "%}")


@pytest.fixture
def angle_engine():
    return make_engine("<%", "%>")


@pytest.fixture
def shared():
    return SharedData()


@pytest.fixture
def app(shared):
    return Pipeline().use(middleware({"escapeRegex": r"\.(md|tmpl|foo)$"}, shared))
