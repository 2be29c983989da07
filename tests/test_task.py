from ofcatalog.factsystem.task import Task, TaskAuth, TaskType


def make(**kwargs):
    base = dict(id="t", name="n", type=TaskType.EXTRACT, depends_on=["a", "b"])
    base.update(kwargs)
    return Task(**base)


def test_equal_tasks():
    assert make().is_equal(make()) is True


def test_none_is_not_equal():
    assert make().is_equal(None) is False


def test_field_difference():
    assert make().is_equal(make(rule="unique")) is False


def test_result_difference():
    assert make(result=True).is_equal(make(result=False)) is False


def test_auth_compared_by_value():
    auth = dict(header="Authorization", token_var="TOKEN_VAR")
    assert make(auth=TaskAuth(**auth)).is_equal(make(auth=TaskAuth(**auth))) is True


def test_depends_on_order_matters():
    task = make()
    assert task.is_depends_on_equal(["a", "b"]) is True
    assert task.is_depends_on_equal(["b", "a"]) is False
    assert task.is_depends_on_equal(["a"]) is False


def test_dependencies_ignored():
    assert make(dependencies=[make()]).is_equal(make()) is True


def test_task_type_value():
    assert TaskType("aggregate") is TaskType.AGGREGATE