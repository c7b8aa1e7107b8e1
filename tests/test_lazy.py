"""Tests for lazy schemas and the once-only cell behind them."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from klaw_schema import InvalidSchemaError, IssueCode, Ok, array, integer, lazy, object_, string
from klaw_schema._sync import CellState, OnceCell


class TestOnceCell:
    """Tests for OnceCell."""

    def test_initializes_once(self) -> None:
        """The first initializer wins."""
        cell = OnceCell()
        assert cell.get() is None
        assert cell.get_or_init(lambda: 42) == 42
        assert cell.get_or_init(lambda: 100) == 42
        assert cell.is_set()

    def test_failed_init_resets(self) -> None:
        """A raising initializer leaves the cell unresolved."""
        cell = OnceCell()

        def boom():
            raise RuntimeError('boom')

        with pytest.raises(RuntimeError):
            cell.get_or_init(boom)
        assert cell.state is CellState.UNRESOLVED
        assert cell.get_or_init(lambda: 1) == 1

    def test_state_during_init(self) -> None:
        """The cell reports RESOLVING while the initializer runs."""
        cell = OnceCell()
        seen = []

        def init():
            seen.append(cell.state)
            return 'v'

        cell.get_or_init(init)
        assert seen == [CellState.RESOLVING]
        assert cell.state is CellState.RESOLVED


class TestLazySchema:
    """Tests for lazily built, recursive schemas."""

    def test_recursive_structure(self) -> None:
        """A schema can refer to itself through lazy."""
        calls = []

        def build():
            calls.append(1)
            return object_({'value': integer(), 'children': array(node)})

        node = lazy(build)
        tree = {'value': 1, 'children': [{'value': 2, 'children': []}, {'value': 3, 'children': []}]}
        assert node.parse(tree) == Ok(tree)
        assert node.parse(tree) == Ok(tree)
        assert calls == [1]

    def test_nested_issue_paths(self) -> None:
        """Issues deep in the recursion carry the full path."""
        node = lazy(lambda: object_({'value': integer(), 'children': array(node)}))
        result = node.parse({'value': 1, 'children': [{'value': 'x', 'children': []}]})
        [issue] = result.error.issues
        assert issue.path == ('children', 0, 'value')

    def test_optional_recursion(self) -> None:
        """Optional self references end the recursion with None."""
        node = lazy(lambda: object_({'value': integer(), 'next': node.optional()}))
        data = {'value': 1, 'next': {'value': 2, 'next': None}}
        assert node.parse(data) == Ok(data)
        assert node.parse({'value': 1}) == Ok({'value': 1})

    def test_recursion_bottoming_out_on_nil(self) -> None:
        """A nil reaching the same lazy schema is accepted as the end of the structure."""
        node = lazy(lambda: object_({'next': node}))
        assert node.parse({'next': None}) == Ok({'next': None})

    def test_nil_at_top_level(self) -> None:
        """Nil given to a lazy schema directly is invalid_type with expected lazy."""
        [issue] = lazy(lambda: string()).parse(None).error.issues
        assert issue.code is IssueCode.INVALID_TYPE
        assert issue.expected == 'lazy'

    def test_state_transitions(self) -> None:
        """The schema is unresolved until first use."""
        schema = lazy(lambda: string())
        assert schema.state is CellState.UNRESOLVED
        schema.parse('a')
        assert schema.state is CellState.RESOLVED

    def test_clones_share_resolution(self) -> None:
        """Modifier clones reuse the resolved schema."""
        calls = []

        def build():
            calls.append(1)
            return string()

        schema = lazy(build)
        clone = schema.optional()
        schema.parse('a')
        clone.parse('b')
        assert calls == [1]
        assert clone.unwrap() is schema.inner

    def test_factory_must_return_schema(self) -> None:
        """A factory returning a non-schema raises InvalidSchemaError."""
        schema = lazy(lambda: 'not a schema')
        with pytest.raises(InvalidSchemaError):
            schema.parse('a')
        assert schema.state is CellState.UNRESOLVED

    def test_concurrent_first_parse_resolves_once(self) -> None:
        """Concurrent first parses run the factory exactly once."""
        calls = []
        lock = threading.Lock()

        def build():
            with lock:
                calls.append(1)
            time.sleep(0.05)
            return integer()

        schema = lazy(build)
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(schema.parse, range(32)))
        assert calls == [1]
        assert [result.unwrap() for result in results] == list(range(32))
