from __future__ import annotations
from typing import Sequence, Optional
from dataclasses import dataclass
from pathlib import Path
import abc
import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    args: Sequence[str]
    returncode: int
    stdout: str = ''
    stderr: str = ''

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(abc.ABC):
    """
    Runs an external command with optional stdin and returns its output or failure.
    Collaborators (ansible-vault, colordiff) only talk to the outside through this.
    """
    @abc.abstractmethod
    def run(self, args: Sequence[str], input: Optional[str] = None) -> CommandResult:
        raise NotImplementedError()

    @abc.abstractmethod
    def which(self, executable: str) -> Optional[str]:
        raise NotImplementedError()


class SubprocessRunner(CommandRunner):
    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = cwd

    def run(self, args: Sequence[str], input: Optional[str] = None) -> CommandResult:
        logger.debug(f"Running {' '.join(args)}")
        try:
            completed = subprocess.run(
                list(args),
                input=input,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                cwd=self.cwd,
            )
        except FileNotFoundError:
            return CommandResult(args, 127, '', f"{args[0]}: command not found")
        except PermissionError as e:
            return CommandResult(args, 126, '', f"{args[0]}: {e}")

        if completed.returncode != 0:
            logger.debug(f"{args[0]} exited with status {completed.returncode}")
        return CommandResult(args, completed.returncode, completed.stdout, completed.stderr)

    def which(self, executable: str) -> Optional[str]:
        return shutil.which(executable)
