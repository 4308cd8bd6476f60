from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..core.domain.models import BlameRecord, VcsFacts
from ..core.ports import LoggerPort, NullLogger


_HEADER_RE = re.compile(r"^([0-9a-f]{40}) (\d+) (\d+)(?: \d+)?$")


def parse_line_porcelain(text: str) -> list[BlameRecord]:
    """Parse ``git blame --line-porcelain`` output into one record per line.

    Every line block starts with ``<sha> <orig-line> <final-line>``, carries
    ``key value`` headers and ends with the tab-prefixed line content.
    """
    records: list[BlameRecord] = []
    sha: Optional[str] = None
    line_no = 0
    author = ""
    for raw in text.splitlines():
        if raw.startswith("\t"):
            if sha is not None:
                records.append(
                    BlameRecord(author=author, commit_hash=sha, line_number=line_no, line_text=raw[1:])
                )
            sha = None
            author = ""
            continue
        m = _HEADER_RE.match(raw)
        if m and sha is None:
            sha = m.group(1)
            line_no = int(m.group(3))
            continue
        if raw.startswith("author "):
            author = raw[len("author "):]
    return records


class GitVcs:
    """VCS accessor backed by GitPython."""

    def __init__(self, *, logger: LoggerPort | None = None) -> None:
        self._logger = logger or NullLogger()

    def facts(self, root: Path, manifest_name: str) -> VcsFacts:
        try:
            repo = Repo(root, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            # .git entry present but unusable (empty dir, dangling worktree link)
            self._logger.warning("vcs_unavailable", type="vcs_unavailable", root=str(root), detail=str(e))
            return VcsFacts(commit_hash=None, project_name=None)
        try:
            work_tree = Path(repo.working_tree_dir or root)
            return VcsFacts(
                commit_hash=self._head_hash(repo),
                project_name=work_tree.name,
                blame=tuple(self._blame(repo, work_tree, root / manifest_name)),
                remote_url=self._remote_url(repo),
            )
        finally:
            repo.close()

    @staticmethod
    def _head_hash(repo: Repo) -> Optional[str]:
        try:
            return repo.head.commit.hexsha
        except ValueError:
            # unborn HEAD: repository without commits
            return None

    @staticmethod
    def _remote_url(repo: Repo) -> Optional[str]:
        remotes = list(repo.remotes)
        if not remotes:
            return None
        preferred = next((r for r in remotes if r.name == "origin"), remotes[0])
        return preferred.url

    def _blame(self, repo: Repo, work_tree: Path, manifest: Path) -> list[BlameRecord]:
        rel = manifest.resolve().relative_to(work_tree.resolve()).as_posix()
        try:
            # no revision: blame the working tree so local edits show up
            out = repo.git.blame("--line-porcelain", "--", rel)
        except GitCommandError as e:
            self._logger.warning("blame_unavailable", type="blame_unavailable", path=rel, detail=str(e).strip())
            return []
        return parse_line_porcelain(out)
