from typing import Union

from vaultdiff.model import SyntheticDocument

# Every ansible-vault payload starts with e.g. "$ANSIBLE_VAULT;1.1;AES256"
VAULT_MARKER = "$ANSIBLE_VAULT;"


def is_vault(document: Union[str, SyntheticDocument]) -> bool:
    """
    Classifies a document as vault-encrypted by looking at its first line only.

    This is a structural check, not format validation: a document whose first
    line is anything other than the marker is treated as plain text.
    """
    if isinstance(document, SyntheticDocument):
        document = document.text
    first_line = document.split('\n', 1)[0]
    return first_line.startswith(VAULT_MARKER)
