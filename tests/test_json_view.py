"""Tests for the JSON view installed on JSON files."""

import pytest

from common_middleware.errors import ParseError
from common_middleware.file import File
from common_middleware.json_view import JsonView, flush, install, serialize
from common_middleware.shared import SharedData


def _file(content: str, path: str = "data.json") -> File:
    return File(path=path, content=content)


class TestJsonView:
    def test_lazy_parse(self):
        file = _file('{"name": "Halle"}')
        view = install(file)
        assert not view.loaded
        assert file.json["name"] == "Halle"
        assert view.loaded

    def test_cached_value_is_stable(self):
        file = _file('{"name": "Halle"}')
        install(file)
        first = file.json
        file.content = '{"name": "Someone else"}'
        second = file.json
        assert first is second
        assert second["name"] == "Halle"

    def test_set_replaces_cache_without_serializing(self):
        file = _file('{"a": 1}')
        install(file)
        file.json = {"b": 2}
        assert file.json == {"b": 2}
        assert file.content == '{"a": 1}'

    def test_set_before_read_skips_parse(self):
        file = _file("not json")
        view = install(file)
        view.set([1, 2])
        assert view.get() == [1, 2]

    def test_invalid_json_raises(self):
        file = _file("{nope", path="broken.json")
        install(file)
        with pytest.raises(ParseError, match="broken.json"):
            file.json

    @pytest.mark.parametrize("content", ["NaN", "Infinity", '{"a": -Infinity}'])
    def test_non_standard_constants_rejected(self, content):
        file = _file(content)
        install(file)
        with pytest.raises(ParseError, match="not valid JSON"):
            file.json

    def test_invalid_json_is_not_cached(self):
        file = _file("{nope")
        view = install(file)
        with pytest.raises(ParseError):
            view.get()
        assert not view.loaded

    def test_scalars_and_arrays(self):
        file = _file("[1, 2, 3]")
        install(file)
        assert file.json == [1, 2, 3]

    def test_no_view_installed(self):
        file = File(path="notes.txt", content="hi")
        with pytest.raises(AttributeError):
            file.json
        with pytest.raises(AttributeError):
            file.json = {}

    def test_on_parse_runs_once(self):
        calls = []
        file = _file('{"a": 1}')
        file.json_view = JsonView(file, calls.append)
        file.json_view.get()
        file.json_view.get()
        assert calls == [{"a": 1}]


class TestInstall:
    def test_snapshots_content(self):
        file = _file('{"a": 1}')
        install(file)
        assert file.original_content == '{"a": 1}'

    def test_reinstall_resets_snapshot_and_cache(self):
        file = _file('{"a": 1}')
        install(file)
        file.json["a"] = 5
        file.content = '{"a": 2}'
        install(file)
        assert file.original_content == '{"a": 2}'
        assert file.json == {"a": 2}


class TestConfigMerge:
    def test_merges_config_data_on_first_read(self):
        shared = SharedData()
        file = _file('{"fake": {"data": {"foo": "bar"}}}')
        install(file, shared, "fake")
        assert "foo" not in shared
        file.json
        assert shared.get("foo") == "bar"

    def test_later_reads_do_not_merge_again(self):
        shared = SharedData()
        file = _file('{"fake": {"data": {"foo": "bar"}}}')
        install(file, shared, "fake")
        file.json
        shared.merge({"foo": "changed"})
        file.json
        assert shared.get("foo") == "changed"

    def test_nested_values_merge(self):
        shared = SharedData({"site": {"lang": "en"}})
        file = _file('{"cfg": {"data": {"site": {"title": "Home"}}}}')
        install(file, shared, "cfg")
        file.json
        assert shared.get("site") == {"lang": "en", "title": "Home"}

    @pytest.mark.parametrize("content", [
        '{"other": {"data": {"foo": "bar"}}}',
        '{"fake": {"data": ["foo"]}}',
        '{"fake": "plain"}',
        '["fake"]',
    ])
    def test_ignores_non_matching_shapes(self, content):
        shared = SharedData()
        file = _file(content)
        install(file, shared, "fake")
        file.json
        assert len(shared) == 0

    def test_later_view_edits_do_not_reach_shared(self):
        shared = SharedData()
        file = _file('{"fake": {"data": {"tags": ["a"]}}}')
        install(file, shared, "fake")
        file.json["fake"]["data"]["tags"].append("edited")
        assert shared.get("tags") == ["a"]

    def test_disabled_without_config_name(self):
        shared = SharedData()
        file = _file('{"fake": {"data": {"foo": "bar"}}}')
        install(file, shared)
        file.json
        assert len(shared) == 0

    def test_assigned_value_skips_merge(self):
        shared = SharedData()
        file = _file('{"fake": {"data": {"foo": "bar"}}}')
        install(file, shared, "fake")
        file.json = {"fake": {"data": {"foo": "assigned"}}}
        file.json
        assert len(shared) == 0


class TestFlush:
    def test_writes_mutated_value(self):
        file = _file('{"name":"Halle"}')
        install(file)
        assert file.json["name"] == "Halle"
        file.json["description"] = "2 yr old"
        assert flush(file) is True
        assert file.content == '{\n  "name": "Halle",\n  "description": "2 yr old"\n}\n'

    def test_direct_edit_wins(self):
        file = _file('{"name":"Halle"}')
        install(file)
        file.json["description"] = "2 yr old"
        file.content = "edited by hand"
        assert flush(file) is False
        assert file.content == "edited by hand"

    def test_unread_view_is_reformatted(self):
        file = _file('{"a":1,"b":[1,2]}')
        install(file)
        assert flush(file) is True
        assert file.content == '{\n  "a": 1,\n  "b": [\n    1,\n    2\n  ]\n}\n'

    def test_unread_invalid_json_raises(self):
        file = _file("{nope")
        install(file)
        with pytest.raises(ParseError):
            flush(file)

    def test_no_view_is_noop(self):
        file = File(path="notes.txt", content="hi")
        assert flush(file) is False
        assert file.content == "hi"

    def test_serialize_keeps_unicode(self):
        assert serialize({"name": "Zoë"}) == '{\n  "name": "Zoë"\n}\n'
