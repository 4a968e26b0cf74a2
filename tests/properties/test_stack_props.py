"""Property-based tests for the navigation stack using Hypothesis.

These tests verify the history invariants:
- pushes followed by pops come back in LIFO order
- ids are strictly increasing in push order
- pop-until with an unknown id is all-or-nothing
- any prefix of well-formed records survives a torn final write
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from jumpdir.core.result import NotFoundError
from jumpdir.navigation.stack import NavigationStack, encode_entry

# Autouse conftest fixtures are function scoped; each example uses its own temp dir.
SETTINGS_SUPPRESS = [HealthCheck.function_scoped_fixture]

# === Strategies ===

path_component_strategy = st.text(
    alphabet=st.characters(whitelist_categories=("L", "N"), whitelist_characters="_-."),
    min_size=1,
    max_size=20,
).filter(lambda s: s not in (".", ".."))

absolute_path_strategy = st.lists(path_component_strategy, min_size=1, max_size=4).map(
    lambda parts: "/" + "/".join(parts)
)

paths_strategy = st.lists(absolute_path_strategy, min_size=1, max_size=12)


def _fresh_stack(tmp: str) -> NavigationStack:
    return NavigationStack(Path(tmp) / "stack.jsonl")


# === Property Tests ===


@given(paths=paths_strategy)
@settings(max_examples=50, deadline=None, suppress_health_check=SETTINGS_SUPPRESS)
def test_lifo_law(paths: list[str]) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        stack = _fresh_stack(tmp)
        for path in paths:
            stack.push(path)

        top = stack.peek()
        assert top is not None and top.path == paths[-1]

        popped = [stack.pop() for _ in paths]
        assert [entry.path for entry in popped if entry] == list(reversed(paths))
        assert stack.pop() is None


@given(paths=paths_strategy)
@settings(max_examples=50, deadline=None, suppress_health_check=SETTINGS_SUPPRESS)
def test_ids_strictly_increase(paths: list[str]) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        stack = _fresh_stack(tmp)
        ids = [stack.push(path).id for path in paths]
        assert ids == list(range(1, len(paths) + 1))


@given(paths=paths_strategy, offset=st.integers(min_value=1, max_value=1000))
@settings(max_examples=50, deadline=None, suppress_health_check=SETTINGS_SUPPRESS)
def test_pop_until_unknown_id_is_atomic(paths: list[str], offset: int) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        stack = _fresh_stack(tmp)
        for path in paths:
            stack.push(path)
        before = stack.path.read_bytes()

        missing = len(paths) + offset
        try:
            stack.pop_until(missing)
        except NotFoundError:
            pass
        else:  # pragma: no cover - property failure
            raise AssertionError("pop_until accepted an id that is not in the stack")
        assert stack.path.read_bytes() == before


@given(paths=paths_strategy, data=st.data())
@settings(max_examples=50, deadline=None, suppress_health_check=SETTINGS_SUPPRESS)
def test_pop_until_returns_suffix_most_recent_first(paths: list[str], data: st.DataObject) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        stack = _fresh_stack(tmp)
        pushed = [stack.push(path) for path in paths]
        target = data.draw(st.sampled_from(pushed))

        popped = stack.pop_until(target.id)

        expected = list(reversed(pushed[target.id - 1 :]))
        assert [entry.same_target(exp) for entry, exp in zip(popped, expected)] == [True] * len(
            expected
        )
        assert len(popped) == len(expected)
        assert [entry.id for entry in stack.load()] == list(range(1, target.id))


@given(paths=paths_strategy, cut=st.integers(min_value=1, max_value=200))
@settings(max_examples=50, deadline=None, suppress_health_check=SETTINGS_SUPPRESS)
def test_torn_final_record_keeps_prefix(paths: list[str], cut: int) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        stack = _fresh_stack(tmp)
        for path in paths:
            stack.push(path)
        intact = stack.load()

        stack.push("/torn/record")
        text = stack.path.read_text(encoding="utf-8")
        last = encode_entry(stack.load()[-1])
        keep = max(len(last) - 1 - cut, 1)
        stack.path.write_text(text[: len(text) - len(last)] + last[:keep], encoding="utf-8")

        assert [entry.same_target(orig) for entry, orig in zip(stack.load(), intact)] == [
            True
        ] * len(intact)
        assert len(stack.load()) == len(intact)
