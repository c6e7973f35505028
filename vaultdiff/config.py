from dataclasses import dataclass
from typing import Optional, Tuple
import shlex

from vaultdiff.credentials import Credential

DEFAULT_CONTEXT_LINES = 3


@dataclass(frozen=True)
class RunConfig:
    """Options resolved once at startup and threaded through the whole run."""
    credential: Credential
    revisions: Tuple[str, ...] = ()
    path_scope: Optional[str] = None
    vault_only: bool = False
    color: bool = False
    context: int = DEFAULT_CONTEXT_LINES
    verbose: bool = False


def parse_revisions(text: Optional[str]) -> Tuple[str, ...]:
    """
    '-r' accepts anything `git diff` takes before the pathspec:
    'HEAD~3', 'main..feature', '--cached', 'HEAD~1 HEAD'.
    """
    if not text:
        return ()
    return tuple(shlex.split(text))
