"""
Walks the changed files in git order and turns each one into output text:
plain files pass through as git printed them, vault files get their git header
followed by a diff of the decrypted contents.
"""

from typing import List, Optional, TextIO
import logging

from vaultdiff.config import RunConfig
from vaultdiff.decrypt import AnsibleVault, DecryptError, EmptyDocumentError
from vaultdiff.provider import DiffProvider
from vaultdiff.messages import warning
from vaultdiff.model import ChangedFile, RenderedDiff
from vaultdiff.reconstruct import first_content_line, reconstruct, split_diff, split_lines
from vaultdiff.render import Colorizer, render
from vaultdiff.vault import is_vault

logger = logging.getLogger(__name__)


def render_file(
    config: RunConfig,
    provider: DiffProvider,
    oracle: AnsibleVault,
    colorizer: Optional[Colorizer],
    file: ChangedFile,
) -> Optional[RenderedDiff]:
    """Returns None when the file produces no output at all."""
    full = provider.file_diff(config.revisions, file, full_context=True)

    if not is_vault(first_content_line(full)):
        if config.vault_only:
            logger.debug(f"Skipping non-vault file {file}")
            return None
        display = provider.file_diff(config.revisions, file, color=config.color, context=config.context)
        return RenderedDiff(file, body=display)

    logger.debug(f"{file} is a vault file")

    # Same number of header lines, taken from the (possibly colored) display diff
    header_lines, _ = split_diff(full)
    if config.color:
        display = provider.file_diff(config.revisions, file, color=True, context=config.context)
        header = ''.join(split_lines(display)[:len(header_lines)])
    else:
        header = ''.join(header_lines)

    old, new = reconstruct(full)
    try:
        old_plain = oracle.decrypt(old, config.credential)
        new_plain = oracle.decrypt(new, config.credential)
    except EmptyDocumentError:
        change = 'added' if old.is_empty else 'deleted'
        return RenderedDiff(file, header=header,
                            warning=f"Vault file {file} was {change}, there is no other side to compare")
    except DecryptError as e:
        return RenderedDiff(file, header=header, warning=f"Could not decrypt {file}: {e}")

    body = render(old_plain, new_plain, color=config.color, colorizer=colorizer, context=config.context)
    return RenderedDiff(file, header=header, body=body)


def run(
    config: RunConfig,
    provider: DiffProvider,
    oracle: AnsibleVault,
    colorizer: Optional[Colorizer],
    out: TextIO,
    files: Optional[List[ChangedFile]] = None,
) -> int:
    if files is None:
        files = provider.changed_files(config.revisions, config.path_scope)
    for file in files:
        rendered = render_file(config, provider, oracle, colorizer, file)
        if rendered is None:
            continue
        out.write(rendered.text)
        out.flush()
        if rendered.warning is not None:
            warning(rendered.warning)
    return 0
