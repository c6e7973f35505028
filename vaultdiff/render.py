from typing import List, Optional, Sequence
from difflib import unified_diff
import logging

from vaultdiff.base import VaultDiffError
from vaultdiff.messages import warning
from vaultdiff.process import CommandRunner
from vaultdiff.reconstruct import split_lines

logger = logging.getLogger(__name__)


class Colorizer:
    """ANSI-highlights unified diff text by piping it through an external filter (colordiff)."""

    def __init__(self, runner: CommandRunner, command: Sequence[str] = ('colordiff',)) -> None:
        self.runner = runner
        self.command = tuple(command)

    def available(self) -> bool:
        return self.runner.which(self.command[0]) is not None

    def colorize(self, text: str) -> str:
        if not text:
            return text
        result = self.runner.run(self.command, input=text)
        if not result.ok:
            logger.warning(f"{self.command[0]} failed, showing uncolored diff: {result.stderr.strip()}")
            return text
        return result.stdout


def resolve_color(explicit: Optional[bool], vcs_default: bool, colorizer: Colorizer) -> bool:
    """
    An explicit --color/--no-color wins over git's configured default. Forcing color
    without a colorizer is fatal; a default that asks for color is downgraded instead.
    """
    if explicit is not None:
        if explicit and not colorizer.available():
            raise VaultDiffError(f"--color requested but {colorizer.command[0]} is not installed")
        return explicit

    if vcs_default and not colorizer.available():
        warning(f"{colorizer.command[0]} is not installed, showing uncolored output")
        return False
    return vcs_default


def _terminated(lines: List[str]) -> List[str]:
    if lines and not lines[-1].endswith('\n'):
        return lines[:-1] + [lines[-1] + '\n']
    return lines


def render(
    old: str,
    new: str,
    color: bool = False,
    colorizer: Optional[Colorizer] = None,
    context: int = 3,
) -> str:
    """
    Unified line diff of two plaintexts, without the ---/+++ file header lines:
    the real header comes from git's own diff.
    """
    diff = list(unified_diff(
        _terminated(split_lines(old)),
        _terminated(split_lines(new)),
        n=context,
    ))
    # drop the ---/+++ pair difflib always starts with
    text = ''.join(diff[2:])

    if color and colorizer is not None:
        return colorizer.colorize(text)
    return text
