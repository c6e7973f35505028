from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from vaultdiff.provider import DiffProvider
from vaultdiff.model import ChangedFile
from vaultdiff.process import CommandResult, CommandRunner
from vaultdiff.reconstruct import split_lines

# --- Fakes ---

ANSI_BOLD = '\x1b[1m'
ANSI_RESET = '\x1b[m'


def fake_color(text: str) -> str:
    lines = [line.rstrip('\n') for line in split_lines(text)]
    return ''.join(ANSI_BOLD + line + ANSI_RESET + '\n' for line in lines)


class FakeRunner(CommandRunner):
    """
    Scripted stand-in for ansible-vault and colordiff. Decryption looks the
    ciphertext up in `secrets`; unknown ciphertext fails like a wrong password.
    """
    def __init__(self) -> None:
        self.executables = {'git', 'ansible-vault'}
        self.version_output = 'ansible-vault [core 2.15.1]\n  config file = None\n'
        self.secrets: Dict[str, str] = {}
        self.calls: List[Tuple[Tuple[str, ...], Optional[str]]] = []

    def which(self, executable: str) -> Optional[str]:
        return f"/usr/bin/{executable}" if executable in self.executables else None

    def run(self, args: Sequence[str], input: Optional[str] = None) -> CommandResult:
        self.calls.append((tuple(args), input))
        name = args[0]
        if name not in self.executables:
            return CommandResult(args, 127, '', f"{name}: command not found")
        if name == 'ansible-vault' and args[1] == '--version':
            return CommandResult(args, 0, self.version_output)
        if name == 'ansible-vault' and args[1] == 'decrypt':
            plaintext = self.secrets.get(input or '')
            if plaintext is None:
                return CommandResult(args, 1, '', 'ERROR! Decryption failed (no vault secrets were found that could decrypt)')
            return CommandResult(args, 0, plaintext, 'Decryption successful\n')
        if name == 'colordiff':
            return CommandResult(args, 0, fake_color(input or ''))
        return CommandResult(args, 1, '', f"unexpected command {args}")

    def decrypt_calls(self) -> List[Optional[str]]:
        return [input for args, input in self.calls if args[:2] == ('ansible-vault', 'decrypt')]


class FakeProvider(DiffProvider):
    """Serves canned per-file diffs. `full` diffs default to the display diff."""
    def __init__(self) -> None:
        self.files: List[ChangedFile] = []
        self.display: Dict[str, str] = {}
        self.full: Dict[str, str] = {}
        self.default_color = False

    def add(self, path: str, display: str, full: Optional[str] = None) -> None:
        self.files.append(ChangedFile(path))
        self.display[path] = display
        self.full[path] = full if full is not None else display

    def changed_files(self, revisions, path_scope=None) -> List[ChangedFile]:
        if path_scope:
            return [f for f in self.files if f.path.startswith(path_scope)]
        return list(self.files)

    def file_diff(self, revisions, file, color=False, full_context=False, context=3) -> str:
        text = self.full[file.path] if full_context else self.display[file.path]
        return fake_color(text) if color else text

    def color_default(self, is_tty: bool) -> bool:
        return self.default_color


# --- Fixtures ---

@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()
