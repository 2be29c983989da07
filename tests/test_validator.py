import pytest

from ofcatalog.factsystem.task import Task
from ofcatalog.factsystem.validator import ValidationError, Validator


def _task(result=None, **kwargs):
    task = Task(**kwargs)
    task.result = result
    return task


def _validate_task(rule, pattern=""):
    return _task(id="check", type="validate", rule=rule, pattern=pattern)


def test_non_validate_task_is_left_alone():
    task = _task(id="agg", type="aggregate", rule="regex_match", pattern="x")
    Validator().check(task, [_task(id="d", result="x")])
    assert task.result is None


def test_no_dependencies_is_an_error():
    with pytest.raises(ValidationError, match="too few dependencies"):
        Validator().check(_validate_task("regex_match", "x"), None)


def test_missing_dependency_result_is_an_error():
    with pytest.raises(ValidationError, match="dependency result not provided"):
        Validator().check(_validate_task("regex_match", "x"), [_task(id="d")])


def test_regex_on_scalar():
    task = _validate_task("regex_match", r"^v\d+$")
    Validator().check(task, [_task(id="d", result="v12")])
    assert task.result is True


def test_regex_on_bool_uses_lower_case_rendering():
    task = _validate_task("regex_match", "^true$")
    Validator().check(task, [_task(id="d", result=True)])
    assert task.result is True


@pytest.mark.parametrize("pattern, expected", [("> 3", True), ("< 3", False), ("== 5", True)])
def test_formula_on_number(pattern, expected):
    task = _validate_task("formula", pattern)
    Validator().check(task, [_task(id="d", result=5.0)])
    assert task.result is expected


def test_each_item_of_a_list_is_validated():
    task = _validate_task("regex_match", "a")
    Validator().check(task, [_task(id="d", result=["apple", "berry", "banana"])])
    assert task.result == [True, False, True]


@pytest.mark.parametrize("values, expected", [([1, 2, 3], True), ([1, 2, 1], False)])
def test_unique_rule(values, expected):
    task = _validate_task("unique")
    Validator().check(task, [_task(id="d", result=values)])
    assert task.result is expected


def test_unknown_rule_is_an_error():
    with pytest.raises(ValidationError, match="unknown validation rule"):
        Validator().check(_validate_task("nonsense"), [_task(id="d", result="x")])


def test_invalid_regex_is_an_error():
    with pytest.raises(ValidationError):
        Validator().check(_validate_task("regex_match", "("), [_task(id="d", result="x")])


def test_invalid_formula_is_an_error():
    with pytest.raises(ValidationError):
        Validator().check(_validate_task("formula", "> abc"), [_task(id="d", result=1.0)])


def test_deps_match_with_different_types_is_false():
    task = _validate_task("deps_match")
    Validator().check(task, [_task(id="a", result="x"), _task(id="b", result=1.0)])
    assert task.result is False


def test_deps_match_compares_against_the_first_result():
    task = _validate_task("deps_match")
    Validator().check(task, [_task(id="a", result="x"), _task(id="b", result="x")])
    assert task.result is False


def test_deps_match_on_lists_is_not_supported():
    task = _validate_task("deps_match")
    with pytest.raises(ValidationError, match="slice comparison not implemented"):
        Validator().check(task, [_task(id="a", result=["x"]), _task(id="b", result=["x"])])


def test_other_rules_ignore_several_dependencies():
    task = _validate_task("regex_match", "x")
    Validator().check(task, [_task(id="a", result="x"), _task(id="b", result="x")])
    assert task.result is None