import pytest

from ofcatalog.listutils import contains


@pytest.mark.parametrize(
    "items, element, expected",
    [
        (["apple", "banana", "cherry"], "banana", True),
        (["apple", "banana", "cherry"], "grape", False),
        ([], "apple", False),
        (["apple"], "apple", True),
        (["banana"], "apple", False),
    ],
)
def test_contains(items, element, expected):
    assert contains(items, element) is expected