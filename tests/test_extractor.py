import pytest

from ofcatalog.factsystem.extractor import ExtractionError, Extractor
from ofcatalog.factsystem.task import Task, TaskAuth
from ofcatalog.github import GitHubNotFoundError


class FakeConfig:
    def __init__(self, values=None):
        self.values = values or {}

    def get(self, env_var):
        return self.values.get(env_var, "")


class FakeJSON:
    def __init__(self, body):
        self.body = body
        self.calls = []

    def get(self, url, headers=None):
        self.calls.append((url, dict(headers or {})))
        return self.body


class FakeGitHub:
    def __init__(self, files=None, search_results=None):
        self.files = files or {}
        self.search_results = search_results or []
        self.searches = []

    def get_file_content(self, repo, path):
        if path not in self.files:
            raise GitHubNotFoundError(f"failed to fetch file: {path}")
        return self.files[path]

    def search(self, repo, query):
        self.searches.append((repo, query))
        return self.search_results


class FakePrometheus:
    def __init__(self, value):
        self.value = value
        self.queries = []

    def instant_query(self, query):
        self.queries.append(query)
        return self.value


def _extractor(github=None, json_service=None, prometheus=None, config=None):
    return Extractor(
        config or FakeConfig(),
        json_service or FakeJSON(b"{}"),
        github or FakeGitHub(),
        prometheus or FakePrometheus(0.0),
    )


def _task(result=None, **kwargs):
    task = Task(**kwargs)
    task.result = result
    return task


def test_too_many_dependencies():
    task = _task(id="t", type="extract", source="github")
    with pytest.raises(ExtractionError, match="too many dependencies"):
        _extractor().extract(task, [_task(id="a", result="x"), _task(id="b", result="y")])


def test_github_json_file_with_json_path():
    github = FakeGitHub(files={"package.json": '{"name": "svc"}'})
    task = _task(id="t", type="extract", source="github", repo="repo",
                 file_path="package.json", rule="jsonpath", json_path=".name")
    _extractor(github=github).extract(task, [])
    assert task.result == ["svc"]


def test_github_toml_file_with_json_path():
    github = FakeGitHub(files={"pyproject.toml": 'name = "svc"'})
    task = _task(id="t", type="extract", source="github", repo="repo",
                 file_path="pyproject.toml", rule="jsonpath", json_path=".name")
    _extractor(github=github).extract(task, [])
    assert task.result == ["svc"]


def test_github_unsupported_extension_with_json_path():
    github = FakeGitHub(files={"README.md": "# title"})
    task = _task(id="t", type="extract", source="github", repo="repo",
                 file_path="README.md", rule="jsonpath", json_path=".")
    with pytest.raises(ExtractionError, match="unsupported file extension: .md"):
        _extractor(github=github).extract(task, [])


def test_missing_file_is_empty_for_notempty_rule():
    task = _task(id="t", type="extract", source="github", repo="repo",
                 file_path="Dockerfile", rule="notempty")
    _extractor().extract(task, [])
    assert task.result is False


def test_present_file_is_not_empty():
    github = FakeGitHub(files={"Dockerfile": "FROM scratch"})
    task = _task(id="t", type="extract", source="github", repo="repo",
                 file_path="Dockerfile", rule="notempty")
    _extractor(github=github).extract(task, [])
    assert task.result is True


def test_github_without_rule_returns_raw_content():
    github = FakeGitHub(files={"Dockerfile": "FROM scratch"})
    task = _task(id="t", type="extract", source="github", repo="repo", file_path="Dockerfile")
    _extractor(github=github).extract(task, [])
    assert task.result == b"FROM scratch"


@pytest.mark.parametrize("paths, expected", [(["a.py"], True), ([], False)])
def test_search_rule(paths, expected):
    github = FakeGitHub(search_results=paths)
    task = _task(id="t", type="extract", source="github", repo="repo",
                 rule="search", search_string="import os")
    _extractor(github=github).extract(task, [])
    assert task.result is expected
    assert github.searches == [("repo", "import os")]


def test_json_api_with_placeholder_and_auth():
    json_service = FakeJSON(b'{"id": 7}')
    config = FakeConfig({"API_TOKEN": "token"})
    task = _task(id="t", type="extract", source="jsonapi",
                 uri="https://api.example.com/items/:item", rule="jsonpath", json_path=".id",
                 auth=TaskAuth(header="Authorization", token_var="API_TOKEN"))
    _extractor(json_service=json_service, config=config).extract(
        task, [_task(id="d", result='"42"')]
    )
    assert task.result == [7]
    assert json_service.calls == [
        ("https://api.example.com/items/42", {"Authorization": "token"})
    ]


def test_multiple_dependency_values():
    github = FakeGitHub(files={
        "services/a/package.json": '{"version": "1.0"}',
        "services/b/package.json": '{"version": "2.0"}',
    })
    task = _task(id="t", type="extract", source="github", repo="repo",
                 file_path="services/:name/package.json", rule="jsonpath", json_path=".version")
    _extractor(github=github).extract(task, [_task(id="d", result=["a", "b"])])
    assert task.result == ["1.0", "2.0"]


def test_prometheus_query_with_placeholder():
    prometheus = FakePrometheus(3.0)
    task = _task(id="t", type="extract", source="prometheus",
                 prometheus_query="up{job=\":job\"}", rule="jsonpath", json_path=".")
    _extractor(prometheus=prometheus).extract(task, [_task(id="d", result="api")])
    assert task.result == [3]
    assert prometheus.queries == ['up{job="api"}']


def test_unknown_source():
    task = _task(id="t", type="extract", source="ftp")
    with pytest.raises(ExtractionError, match="unknown source ftp"):
        _extractor().extract(task, [])


def test_empty_list_dependency():
    task = _task(id="t", type="extract", source="github")
    with pytest.raises(ExtractionError, match="dependency result not provided"):
        _extractor().extract(task, [_task(id="d", result=[])])


def test_missing_dependency_result():
    task = _task(id="t", type="extract", source="github")
    with pytest.raises(ExtractionError, match="dependency result not provided"):
        _extractor().extract(task, [_task(id="d")])