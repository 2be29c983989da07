import pytest

from ofcatalog.expression import ExpressionError, evaluate


@pytest.mark.parametrize(
    "expr, expected",
    [
        ("5 >3", True),
        ("2< 4", True),
        ("7 >= 7", True),
        ("8 <= 10", True),
        ("5 == 5", True),
        ("6 != 7", True),
        ("5 > 5", False),
        ("3<2", False),
        ("7 >= 8", False),
        ("10 <= 9", False),
        ("5 == 6", False),
        ("7 != 7", False),
    ],
)
def test_evaluate(expr, expected):
    assert evaluate(expr) is expected


@pytest.mark.parametrize("expr", ["invalid expression", "5 > ", " > 5", "5 >> 3"])
def test_evaluate_errors(expr):
    with pytest.raises(ExpressionError):
        evaluate(expr)


def test_error_is_value_error():
    with pytest.raises(ValueError, match="no valid operator"):
        evaluate("5 3")