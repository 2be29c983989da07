import pytest

from ofcatalog.jsonservice import JSONService


class FakeResponse:
    def __init__(self, content):
        self.content = content


class FakeSession:
    def __init__(self, content=b"", error=None):
        self.content = content
        self.error = error
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.content)


def test_get_returns_body():
    session = FakeSession(b'{"a": 1}')
    service = JSONService(session=session)
    assert service.get("https://api.example.com/items") == b'{"a": 1}'
    assert session.calls[0][0] == "https://api.example.com/items"


def test_get_sets_json_headers_and_keeps_others():
    session = FakeSession(b"{}")
    JSONService(session=session).get("https://api.example.com", {"Authorization": "Bearer token"})
    headers = session.calls[0][1]
    assert headers["Accept"] == "application/json"
    assert headers["Content-Type"] == "application/json"
    assert headers["Authorization"] == "Bearer token"


def test_json_headers_override_caller():
    session = FakeSession(b"{}")
    JSONService(session=session).get("https://api.example.com", {"Accept": "text/plain"})
    assert session.calls[0][1]["Accept"] == "application/json"


def test_errors_propagate():
    session = FakeSession(error=OSError("down"))
    with pytest.raises(OSError, match="down"):
        JSONService(session=session).get("https://api.example.com")