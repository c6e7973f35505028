from __future__ import annotations
from typing import List, Optional, Sequence
from pathlib import Path
import logging
import os

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from vaultdiff.base import VaultDiffError
from vaultdiff.model import ChangedFile
from vaultdiff.provider import DiffProvider

logger = logging.getLogger(__name__)

# Enough context for any hunk to span the whole file
FULL_CONTEXT_LINES = 100_000_000


def open_repository(path: Path) -> Repo:
    try:
        repo = Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        raise VaultDiffError(f"{path} is not inside a git repository")
    if repo.bare:
        repo.close()
        raise VaultDiffError(f"{path} is a bare git repository, there is no working tree to diff")
    return repo


def _colorbool(value: object, is_tty: bool) -> bool:
    # GitPython already turns 'true'/'false' into bools
    if isinstance(value, bool):
        return value
    value = str(value).strip().lower()
    if value == 'auto':
        return is_tty
    return value in ('always', 'true', 'yes', 'on', '1')


class GitDiffProvider(DiffProvider):
    def __init__(self, repo: Repo) -> None:
        self.repo = repo

    def _diff(self, *args: str) -> str:
        try:
            return self.repo.git.diff(*args, strip_newline_in_stdout=False)
        except GitCommandError as e:
            raise VaultDiffError(f"git diff failed: {str(e.stderr).strip() or e}")

    def _scope_pathspec(self, path_scope: Optional[str]) -> List[str]:
        # git runs from the top of the work tree, the scope is given relative to cwd
        if not path_scope:
            return []
        top = self.repo.working_tree_dir
        assert top is not None
        return [Path(os.path.relpath(os.path.abspath(path_scope), top)).as_posix()]

    def changed_files(self, revisions: Sequence[str], path_scope: Optional[str] = None) -> List[ChangedFile]:
        output = self._diff('--name-only', '-z', *revisions, '--', *self._scope_pathspec(path_scope))
        files = [ChangedFile(name) for name in output.split('\0') if name.strip('\n')]
        logger.debug(f"{len(files)} changed file(s)")
        return files

    def file_diff(
        self,
        revisions: Sequence[str],
        file: ChangedFile,
        color: bool = False,
        full_context: bool = False,
        context: int = 3,
    ) -> str:
        args = ['--no-ext-diff', '--color=always' if color else '--no-color']
        if full_context:
            # the ciphertext itself is needed, not whatever a textconv filter makes of it
            args += ['--no-textconv', f'--unified={FULL_CONTEXT_LINES}']
        else:
            args += [f'--unified={context}']
        # a path like 'a[1].txt' is a glob as a plain pathspec
        output = self._diff(*args, *revisions, '--', f':(literal){file.path}')
        if output and not output.endswith('\n'):
            output += '\n'
        return output

    def color_default(self, is_tty: bool) -> bool:
        with self.repo.config_reader() as reader:
            value = reader.get_value('color', 'diff', '')
            if value == '':
                value = reader.get_value('color', 'ui', '')
        if value == '':
            # git defaults to color.ui=auto
            return is_tty
        return _colorbool(value, is_tty)
