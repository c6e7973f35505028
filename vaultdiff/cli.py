from typing import Callable, List, Optional, TextIO
import argparse
import getpass
import io
import logging
import signal
import sys
from pathlib import Path

from vaultdiff.base import Scope, VaultDiffError
from vaultdiff.config import DEFAULT_CONTEXT_LINES, RunConfig, parse_revisions
from vaultdiff.credentials import acquire_credential
from vaultdiff.decrypt import AnsibleVault
from vaultdiff.messages import error
from vaultdiff.process import CommandRunner, SubprocessRunner
from vaultdiff.render import Colorizer, resolve_color

VERSION = '0.1.0'

##################################################################################################
# Arguments
##################################################################################################

class ArgumentParser(argparse.ArgumentParser):
    # Usage errors are startup failures like any other: exit status 1, not argparse's 2
    def error(self, message: str) -> None: # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value}")
    return number


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='vault-diff',
        description='git diff that shows decrypted changes of ansible-vault encrypted files.')
    parser.add_argument('-r', '--revision', type=str, default=None,
                        help="Revision range passed to git diff, e.g. 'HEAD~1' or 'main..feature'. "
                             "Defaults to the working tree against the index.")
    parser.add_argument('-p', '--path', type=str, default=None,
                        help='Restrict the diff to this file or directory.')
    parser.add_argument('--vault-password-file', type=Path, default=None,
                        help='File containing the vault password. Prompted for when not found.')
    parser.add_argument('--vault-only', action='store_true',
                        help='Only show vault encrypted files.')
    color = parser.add_mutually_exclusive_group()
    color.add_argument('--color', dest='color', action='store_const', const=True, default=None,
                       help='Always colorize the output.')
    color.add_argument('--no-color', dest='color', action='store_const', const=False,
                       help='Never colorize the output.')
    parser.add_argument('-U', '--unified', type=non_negative_int, default=DEFAULT_CONTEXT_LINES,
                        help='Lines of context around changes.')
    parser.add_argument('--verbose', action='store_true', help='Log what is being run.')
    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {VERSION}')
    return parser

##################################################################################################
# Main
##################################################################################################

def _run(
    args: argparse.Namespace,
    scope: Scope,
    runner: CommandRunner,
    prompt: Callable[[str], str],
    out: TextIO,
) -> int:
    # Dependency and repository checks come before anything touches the password
    if runner.which('git') is None:
        raise VaultDiffError("git not found. Make sure git is installed.")

    oracle = AnsibleVault(runner)
    oracle.check()

    # GitPython refuses to import without a git executable, so only now
    from vaultdiff.git_provider import GitDiffProvider, open_repository
    from vaultdiff import pipeline

    repo = open_repository(Path.cwd())
    scope.defer(lambda: repo.close())
    provider = GitDiffProvider(repo)

    colorizer = Colorizer(runner)
    color = resolve_color(args.color, provider.color_default(out.isatty()), colorizer)

    # Listing the files validates the revision range before the password is asked for
    revisions = parse_revisions(args.revision)
    files = provider.changed_files(revisions, args.path)

    credential = acquire_credential(scope, args.vault_password_file, prompt)

    config = RunConfig(
        credential=credential,
        revisions=revisions,
        path_scope=args.path,
        vault_only=args.vault_only,
        color=color,
        context=args.unified,
        verbose=args.verbose,
    )
    return pipeline.run(config, provider, oracle, colorizer, out, files)


def main(
    argv: Optional[List[str]] = None,
    runner: Optional[CommandRunner] = None,
    prompt: Callable[[str], str] = getpass.getpass,
    out: Optional[TextIO] = None,
) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(message)s', stream=sys.stderr)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    out = out or sys.stdout
    # git output that is not UTF-8 arrives surrogate-escaped, write those bytes back unchanged
    if isinstance(out, io.TextIOWrapper):
        out.reconfigure(errors='surrogateescape')

    try:
        with Scope() as scope:
            return _run(args, scope, runner or SubprocessRunner(), prompt, out)
    except VaultDiffError as e:
        error(str(e))
        return 1
    except KeyboardInterrupt:
        error("Interrupted")
        return 1


def _terminate(signum, frame) -> None:
    # Unwinds through the Scope so the temporary password file is removed
    raise SystemExit(1)


def console_main() -> None:
    if sys.platform.lower() == "win32":
        sys.stdout.reconfigure(encoding='utf-8') # type: ignore
        sys.stderr.reconfigure(encoding='utf-8') # type: ignore

    signal.signal(signal.SIGTERM, _terminate)
    sys.exit(main())


if __name__ == '__main__':
    console_main()
