from dataclasses import dataclass

import pytest

from ofcatalog.drift import detect


@dataclass
class Item:
    id: str
    value: str


def from_state_to_config(state, conf):
    state.id = conf.id


def is_equal(a, b):
    return a.value == b.value


def items(**kwargs):
    return {k: Item(k, v) for k, v in kwargs.items()}


@pytest.mark.parametrize(
    "state, config, created, updated, deleted, unchanged",
    [
        (
            {"1": Item("1", "a"), "2": Item("2", "b")},
            {"1": Item("1", "a"), "2": Item("2", "b")},
            {},
            {},
            {},
            {"1": Item("1", "a"), "2": Item("2", "b")},
        ),
        (
            {"1": Item("1", "a"), "2": Item("2", "b")},
            {"1": Item("1", "a"), "2": Item("2", "c"), "3": Item("3", "d")},
            {"3": Item("3", "d")},
            {"2": Item("2", "c")},
            {},
            {"1": Item("1", "a")},
        ),
        (
            {},
            {"1": Item("1", "a"), "2": Item("2", "b")},
            {"1": Item("1", "a"), "2": Item("2", "b")},
            {},
            {},
            {},
        ),
        (
            {"1": Item("1", "a"), "2": Item("2", "b")},
            {},
            {},
            {},
            {"1": Item("1", "a"), "2": Item("2", "b")},
            {},
        ),
    ],
)
def test_detect(state, config, created, updated, deleted, unchanged):
    result = detect(state, config, from_state_to_config, is_equal)
    assert result.created == created
    assert result.updated == updated
    assert result.deleted == deleted
    assert result.unchanged == unchanged


def test_detect_copies_state_fields():
    state = {"k": Item("old", "a")}
    config = {"k": Item("new", "a")}
    detect(state, config, from_state_to_config, is_equal)
    assert state["k"].id == "new"