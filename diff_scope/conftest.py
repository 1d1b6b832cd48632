from pathlib import Path

import pytest
from git import Repo

ORIGINAL_LINES = [f"line {number}" for number in range(1, 13)]


def write_lines(lines):
    return "\n".join(lines) + "\n"


def commit_files(repo, message, files=None, remove=()):
    """Write ``files`` into the work tree, stage them with ``remove`` and commit"""
    root = Path(repo.working_tree_dir)
    files = files or {}
    for name, text in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    if files:
        repo.index.add(list(files))
    if remove:
        repo.index.remove(list(remove), working_tree=True)
    return repo.index.commit(message)


@pytest.fixture
def upstream_repo(tmp_path):
    """Repository playing the role of ``origin``

    ``main`` holds the starting files; ``feature`` removes line 4 of
    src/a.ts, adds a line after line 10, adds src/new.ts and deletes
    src/removed.ts.
    """
    repo = Repo.init(tmp_path / "upstream")
    commit_files(
        repo,
        "Initial commit",
        {
            "README.md": "# sample\n",
            "src/a.ts": write_lines(ORIGINAL_LINES),
            "src/removed.ts": write_lines(["gone 1", "gone 2"]),
        },
    )
    repo.git.branch("-M", "main")

    repo.create_head("feature")
    repo.heads.feature.checkout()
    changed = ORIGINAL_LINES[:3] + ORIGINAL_LINES[4:10] + ["added line"] + ORIGINAL_LINES[10:]
    commit_files(
        repo,
        "Feature work",
        {
            "src/a.ts": write_lines(changed),
            "src/new.ts": write_lines([f"new {number}" for number in range(1, 6)]),
        },
        remove=["src/removed.ts"],
    )
    repo.heads.main.checkout()
    return repo


@pytest.fixture
def work_repo(tmp_path, upstream_repo):
    """Clone of the upstream repository, checked out on ``main``"""
    return Repo.clone_from(upstream_repo.working_tree_dir, tmp_path / "work")


@pytest.fixture
def fork_repo(tmp_path, upstream_repo):
    """A fork with a ``fork-feature`` branch touching README.md"""
    repo = Repo.clone_from(upstream_repo.working_tree_dir, tmp_path / "fork")
    repo.create_head("fork-feature")
    repo.heads["fork-feature"].checkout()
    commit_files(repo, "Fork work", {"README.md": "# sample\n\nFrom a fork.\n"})
    return repo
