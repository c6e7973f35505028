from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional
import getpass
import logging
import os
import tempfile

from vaultdiff.base import Scope, VaultDiffError

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD_FILE = Path('.vault_password')
PASSWORD_FILE_ENV = 'ANSIBLE_VAULT_PASSWORD_FILE'


@dataclass(frozen=True)
class Credential:
    path: Path
    temporary: bool = False


def _discard(path: Path) -> None:
    if path.exists():
        logger.debug(f"Removing temporary password file {path}")
        path.unlink()


def acquire_credential(
    scope: Scope,
    explicit: Optional[Path] = None,
    prompt: Callable[[str], str] = getpass.getpass,
) -> Credential:
    """
    Resolves the vault password file: explicit path, then $ANSIBLE_VAULT_PASSWORD_FILE,
    then ./.vault_password, then an interactive prompt.

    A prompted password is written to a private temporary file whose removal is
    registered with the scope before anything is written to it.
    """
    if explicit is not None:
        if not explicit.is_file():
            raise VaultDiffError(f"Vault password file {explicit} not found")
        return Credential(explicit)

    from_env = os.environ.get(PASSWORD_FILE_ENV)
    if from_env:
        if Path(from_env).is_file():
            logger.debug(f"Using vault password file from {PASSWORD_FILE_ENV}: {from_env}")
            return Credential(Path(from_env))
        logger.debug(f"{PASSWORD_FILE_ENV} points to missing file {from_env}, ignoring")

    if DEFAULT_PASSWORD_FILE.is_file():
        return Credential(DEFAULT_PASSWORD_FILE)

    secret = prompt("Vault password: ")
    if not secret:
        raise VaultDiffError("A vault password is required")

    # mkstemp creates the file with mode 0600
    fd, name = tempfile.mkstemp(prefix='vault-diff-', suffix='.pass')
    path = Path(name)
    scope.defer(lambda: _discard(path))
    with os.fdopen(fd, 'wt', encoding='utf-8') as f:
        f.write(secret)
    return Credential(path, temporary=True)
