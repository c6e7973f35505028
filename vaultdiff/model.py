from dataclasses import dataclass, field
from typing import List
from enum import Enum, auto


# --- Enums and Dataclasses ---

@dataclass(frozen=True, order=True)
class ChangedFile:
    """A path that differs between the two sides of the revision range."""
    path: str

    def __str__(self) -> str:
        return self.path


class LineKind(Enum):
    ADDED = auto()
    REMOVED = auto()
    CONTEXT = auto()
    MARKER = auto() # '@@' hunk headers and '\ No newline at end of file'


@dataclass(frozen=True)
class DiffHunkLine:
    kind: LineKind
    raw: str

    @property
    def content(self) -> str:
        """The line without its leading diff prefix."""
        return self.raw[1:] if self.raw else self.raw


@dataclass(frozen=True)
class SyntheticDocument:
    """
    One side (old or new) of a file, rebuilt from diff hunk lines only.
    Lines keep their line terminators.
    """
    lines: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return ''.join(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass
class RenderedDiff:
    """The text emitted for one file, plus any warning raised while producing it."""
    file: ChangedFile
    header: str = ''
    body: str = ''
    warning: str | None = None

    @property
    def text(self) -> str:
        return self.header + self.body
