import pytest

from ofcatalog.documents import Document, DocumentService, NavItem
from ofcatalog.github import GitHubError, GitHubNotFoundError

REPO = "svc"
REPO_URL = "https://github.com/motain/svc"

MKDOCS = """
site_name: Service
nav:
  - Home: index.md
  - Guide:
      - Setup: setup.md
      - Usage: usage.md
"""


class FakeGitHub:
    def __init__(self, files, branch="main", fail_properties=False):
        self.files = files
        self.branch = branch
        self.fail_properties = fail_properties

    def repo_url(self, repo):
        return f"https://github.com/motain/{repo}"

    def get_repo_properties(self, repo):
        if self.fail_properties:
            raise GitHubError("unavailable")
        return {"DefaultBranch": self.branch}

    def get_file_content(self, repo, path):
        try:
            return self.files[path]
        except KeyError:
            raise GitHubNotFoundError("404 Not Found") from None


def test_navigation_from_root_mkdocs():
    links = DocumentService(FakeGitHub({"mkdocs.yaml": MKDOCS})).get_documents(REPO)
    assert set(links) == {"Home", "Guide/Setup", "Guide/Usage"}
    assert links["Home"] == f"{REPO_URL}/blob/main/docs/index.md"
    assert links["Guide/Usage"].endswith("/usage.md")


def test_navigation_from_docs_folder_uses_folder_in_path():
    service = DocumentService(FakeGitHub({"docs/mkdocs.yaml": MKDOCS}, branch="trunk"))
    links = service.get_documents(REPO)
    assert links["Home"] == f"{REPO_URL}/blob/trunk/docs/docs/index.md"


def test_root_mkdocs_wins_over_other_locations():
    files = {"mkdocs.yaml": "nav:\n  - Root: root.md\n", ".of/mkdocs.yaml": MKDOCS}
    links = DocumentService(FakeGitHub(files)).get_documents(REPO)
    assert set(links) == {"Root"}


def test_readme_only():
    links = DocumentService(FakeGitHub({"README.md": "# svc"})).get_documents(REPO)
    assert links == {"README": f"{REPO_URL}/blob/main/README.md"}


def test_readme_last_match_wins():
    files = {"README.md": "a", "docs/index.md": "b"}
    links = DocumentService(FakeGitHub(files)).get_documents(REPO)
    assert list(links) == ["README"]
    assert links["README"].endswith("/docs/index.md")


def test_mkdocs_and_readme_combined():
    files = {"mkdocs.yaml": MKDOCS, "README.md": "# svc"}
    links = DocumentService(FakeGitHub(files)).get_documents(REPO)
    assert set(links) == {"Home", "Guide/Setup", "Guide/Usage", "README"}


def test_nothing_found_returns_empty():
    assert DocumentService(FakeGitHub({})).get_documents(REPO) == {}


def test_properties_failure_returns_empty():
    files = {"mkdocs.yaml": MKDOCS, "README.md": "# svc"}
    service = DocumentService(FakeGitHub(files, fail_properties=True))
    assert service.get_documents(REPO) == {}


def test_invalid_mkdocs_is_ignored():
    files = {"mkdocs.yaml": "nav: [unclosed", "README.md": "# svc"}
    links = DocumentService(FakeGitHub(files)).get_documents(REPO)
    assert set(links) == {"README"}


def test_unknown_yaml_tags_are_tolerated():
    content = "markdown_extensions: !!python/name:some.module\nnav:\n  - Home: index.md\n"
    links = DocumentService(FakeGitHub({"mkdocs.yaml": content})).get_documents(REPO)
    assert set(links) == {"Home"}


def test_nav_item_from_yaml_nested():
    item = NavItem.from_yaml({"Guide": [{"Setup": "setup.md"}, {"More": [{"Deep": "deep.md"}]}]})
    assert item.title == "Guide"
    assert item.file == ""
    assert [child.title for child in item.children] == ["Setup", "More"]
    assert item.children[0].file == "setup.md"
    assert item.children[1].children[0].file == "deep.md"


def test_nav_item_from_non_mapping_is_empty():
    assert NavItem.from_yaml("index.md") == NavItem()


def test_nav_item_rejects_non_mapping_children():
    with pytest.raises(ValueError):
        NavItem.from_yaml({"Guide": ["setup.md"]})


def test_document_from_yaml():
    document = Document.from_yaml(
        {"site_name": "Service", "nav": [{"Home": "index.md"}], "plugins": ["search"]}
    )
    assert document.site_name == "Service"
    assert document.nav == [NavItem(title="Home", file="index.md")]
    assert document.plugins == ["search"]


def test_document_rejects_mapping_plugins():
    with pytest.raises(ValueError):
        Document.from_yaml({"plugins": [{"search": {"lang": "en"}}]})