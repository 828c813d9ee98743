from __future__ import annotations

from ssbgp.core.path import Path, empty_path, path_of


def test_append_does_not_mutate_receiver() -> None:
    original = path_of(1, 2)
    extended = original.append(3)

    assert original.size == 2
    assert list(original) == [1, 2]
    assert extended.size == 3
    assert list(extended) == [1, 2, 3]


def test_empty_path_has_no_nodes() -> None:
    p = empty_path()
    assert p.size == 0
    assert not p.contains(1)
    assert p.append(1) == path_of(1)
    assert p.size == 0


def test_append_allows_repeated_nodes() -> None:
    p = path_of(1, 2).append(1)
    assert p.size == 3
    assert p.contains(1)
    assert 2 in p
    assert not p.contains(7)


def test_sub_path_before_stops_at_first_occurrence() -> None:
    p = path_of(9, 4, 5, 4, 6)
    assert p.sub_path_before(4) == path_of(9)
    assert p.sub_path_before(9) == empty_path()
    assert p.sub_path_before(42) == p


def test_paths_with_same_nodes_are_equal_and_hashable() -> None:
    a = Path([1, 2, 3])
    b = path_of(1, 2, 3)
    assert a == b
    assert len({a, b}) == 1
    assert a is not b
