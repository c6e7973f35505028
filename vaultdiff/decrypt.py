from typing import Optional
import logging
import re

from packaging.version import Version, InvalidVersion

from vaultdiff.base import VaultDiffError
from vaultdiff.credentials import Credential
from vaultdiff.model import SyntheticDocument
from vaultdiff.process import CommandRunner

logger = logging.getLogger(__name__)

# First release where `decrypt --output -` reliably reads stdin and writes stdout
MIN_ANSIBLE_VAULT_VERSION = Version('2.4')

# "ansible-vault 2.9.27" or "ansible-vault [core 2.15.1]"
VERSION_REGEX = re.compile(r'ansible-vault\s+(?:\[core\s+)?([0-9][^\s\]]*)')


class DecryptError(Exception):
    """Recoverable: one side of one file could not be decrypted."""


class EmptyDocumentError(DecryptError):
    """The side does not exist (file added or deleted), so there is nothing to decrypt."""


def parse_ansible_vault_version(output: str) -> Optional[Version]:
    match = VERSION_REGEX.search(output)
    if not match:
        return None
    try:
        return Version(match.group(1))
    except InvalidVersion:
        return None


class AnsibleVault:
    """The decryption oracle: shells out to `ansible-vault`."""

    def __init__(self, runner: CommandRunner, executable: str = 'ansible-vault') -> None:
        self.runner = runner
        self.executable = executable

    def check(self) -> Version:
        if self.runner.which(self.executable) is None:
            raise VaultDiffError(f"{self.executable} not found. Make sure ansible is installed.")

        result = self.runner.run([self.executable, '--version'])
        if not result.ok:
            raise VaultDiffError(f"Could not run {self.executable} --version: {result.stderr.strip()}")

        version = parse_ansible_vault_version(result.stdout)
        if version is None:
            raise VaultDiffError(f"Could not determine {self.executable} version from: {result.stdout.strip()}")
        if version < MIN_ANSIBLE_VAULT_VERSION:
            raise VaultDiffError(
                f"{self.executable} {version} is too old, at least {MIN_ANSIBLE_VAULT_VERSION} is required")

        logger.debug(f"Using {self.executable} {version}")
        return version

    def decrypt(self, document: SyntheticDocument, credential: Credential) -> str:
        if document.is_empty:
            raise EmptyDocumentError("Nothing to decrypt")

        result = self.runner.run(
            [self.executable, 'decrypt', '--vault-password-file', str(credential.path), '--output', '-'],
            input=document.text,
        )
        if not result.ok:
            message = result.stderr.strip() or f"{self.executable} exited with status {result.returncode}"
            raise DecryptError(message)
        return result.stdout
