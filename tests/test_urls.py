import pytest

from gitok.core.urls import parse_git_url


def test_parse_basic_github_url():
    ref = parse_git_url("https://github.com/owner/repo")
    assert ref.platform == "github"
    assert ref.host == "github.com"
    assert ref.owner == "owner"
    assert ref.repo == "repo"
    assert ref.branch is None
    assert ref.subpath == ""
    assert ref.git_url == "https://github.com/owner/repo.git"
    assert ref.repo_name == "repo"


def test_parse_github_tree_url():
    ref = parse_git_url("https://github.com/sindresorhus/awesome/tree/main/media")
    assert (ref.owner, ref.repo, ref.branch, ref.subpath) == ("sindresorhus", "awesome", "main", "media")
    assert ref.git_url == "https://github.com/sindresorhus/awesome.git"


def test_parse_github_nested_subpath_and_trailing_slash():
    ref = parse_git_url("  https://github.com/o/r/tree/v2.0/src/lib/utils/  ")
    assert ref.branch == "v2.0"
    assert ref.subpath == "src/lib/utils"


def test_parse_strips_git_suffix():
    ref = parse_git_url("https://github.com/owner/repo.git")
    assert ref.repo == "repo"
    assert ref.git_url == "https://github.com/owner/repo.git"


def test_parse_gitlab_urls():
    basic = parse_git_url("https://gitlab.com/group/project.git")
    assert basic.platform == "gitlab"
    assert basic.git_url == "https://gitlab.com/group/project.git"
    assert basic.branch is None

    tree = parse_git_url("https://gitlab.com/group/project/-/tree/master/path/to/subdir")
    assert tree.platform == "gitlab"
    assert tree.branch == "master"
    assert tree.subpath == "path/to/subdir"


@pytest.mark.parametrize("url", [
    "https://github.com/owner",
    "https://bitbucket.org/owner/repo",
    "http://github.com/owner/repo",
    "https://github.com/owner/repo/tree/main",
    "https://gitlab.com/group/project/tree/main/dir",
    "not-a-url",
    "",
    None,
])
def test_parse_rejects_unsupported_shapes(url):
    with pytest.raises(ValueError, match="Invalid Git URL format"):
        parse_git_url(url)


@pytest.mark.parametrize("url", [
    "https://github.com/owner/repo?tab=readme",
    "https://github.com/owner/repo#readme",
])
def test_parse_rejects_query_and_fragment(url):
    with pytest.raises(ValueError, match="query parameters or fragments"):
        parse_git_url(url)


def test_with_branch_overrides_only_when_given():
    ref = parse_git_url("https://github.com/o/r/tree/main/docs")
    assert ref.with_branch(None) is ref
    pinned = ref.with_branch("dev")
    assert pinned.branch == "dev"
    assert pinned.subpath == "docs"
