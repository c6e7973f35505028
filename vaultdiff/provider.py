from typing import List, Optional, Sequence
import abc

from vaultdiff.model import ChangedFile


class DiffProvider(abc.ABC):
    """Where the changed files and their raw per-file diffs come from."""

    @abc.abstractmethod
    def changed_files(self, revisions: Sequence[str], path_scope: Optional[str] = None) -> List[ChangedFile]:
        """Changed paths, in the order the version control system lists them."""
        raise NotImplementedError()

    @abc.abstractmethod
    def file_diff(
        self,
        revisions: Sequence[str],
        file: ChangedFile,
        color: bool = False,
        full_context: bool = False,
        context: int = 3,
    ) -> str:
        """
        The unified diff of one file. With full_context every hunk spans the whole
        file, which is what reconstruction needs.
        """
        raise NotImplementedError()

    @abc.abstractmethod
    def color_default(self, is_tty: bool) -> bool:
        raise NotImplementedError()
