"""
Secure key file acquisition and rotation.

Key files are opened exactly once and the open handle is handed to the
caller, so the path is never resolved twice. New files are created under an
owner-only umask with mode 0600.

Whether the user is asked for a file name is decided once, by
select_strategy(), from whether stdin and stdout are terminals. Tests and
scripted callers pass a strategy explicitly.

SECURITY: superseded private keys are disabled in place by rewriting their
armor headers from ``RSA`` to ``OLD``; the key bytes themselves are left
where they are and new material is appended after them.
"""

import io
import logging
import os
import sys
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import BinaryIO, Optional, TextIO

from ..config.errors import KeyFileError
from ..constants import KeyMarkers, Permissions
from ..utils.error_handling import ErrorCategory, handle_error

logger = logging.getLogger(__name__)


# =============================================================================
# FILE NAME STRATEGIES
# =============================================================================

class AcquisitionStrategy(ABC):
    """Decides which file name to use for a key file."""

    @abstractmethod
    def choose(self, filename: str, what: str) -> str:
        """Return the file name to open for the given purpose."""


class DefaultPath(AcquisitionStrategy):
    """Use the default name without asking. Selected when not on a terminal."""

    def choose(self, filename: str, what: str) -> str:
        return filename


class InteractivePrompt(AcquisitionStrategy):
    """Ask on stdout and read the answer from stdin."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def choose(self, filename: str, what: str) -> str:
        self.stdout.write(f"Please enter a file to save {what} to [{filename}]: ")
        self.stdout.flush()

        try:
            line = self.stdin.readline()
        except OSError as e:
            raise KeyFileError(f"Error while reading stdin: {e.strerror or e}") from e

        answer = line.rstrip('\n').rstrip('\r')
        if not answer:
            # User just pressed enter, or stdin hit end of file
            return filename
        return answer


def _isatty(stream) -> bool:
    try:
        return stream is not None and stream.isatty()
    except (AttributeError, ValueError):
        return False


def select_strategy(stdin=None, stdout=None) -> AcquisitionStrategy:
    """Prompt only when both stdin and stdout are attached to a terminal."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    if _isatty(stdin) and _isatty(stdout):
        return InteractivePrompt(stdin, stdout)
    return DefaultPath()


# =============================================================================
# OPENING
# =============================================================================

@contextmanager
def restricted_umask(mask: int = Permissions.SECURE_UMASK):
    """Temporarily disallow every group and other permission bit."""
    previous = os.umask(mask)
    try:
        yield
    finally:
        os.umask(previous)


def _secure_opener(path: str, flags: int) -> int:
    return os.open(path, flags, Permissions.SECURE_FILE)


def resolve_path(filename: str) -> str:
    """Make filename absolute against the current working directory."""
    if os.path.isabs(filename):
        return filename
    return os.path.join(os.getcwd(), filename)


def ask_and_open(
    filename: str,
    what: str,
    strategy: Optional[AcquisitionStrategy] = None,
) -> BinaryIO:
    """
    Pick a key file name and open it for update.

    Args:
        filename: Default file name
        what: Description used in the prompt, e.g. "private RSA key"
        strategy: How to pick the name; chosen from the terminal state if None

    Returns:
        Binary file object positioned at the start of the file. Existing
        contents are kept; a missing file is created with mode 0600.

    Raises:
        KeyFileError: reading the answer or opening the file failed
    """
    if strategy is None:
        strategy = select_strategy()

    try:
        fn = resolve_path(strategy.choose(filename, what))
    except KeyFileError as e:
        handle_error(e, "ask_and_open", ErrorCategory.SECURITY, log=logger)
        raise

    try:
        with restricted_umask():
            try:
                return open(fn, 'r+b')
            except FileNotFoundError:
                pass

            try:
                return open(fn, 'x+b', opener=_secure_opener)
            except FileExistsError:
                # Created concurrently; reopen without truncating
                logger.debug(f"{fn} appeared while opening, reopening for update")

            return open(fn, 'r+b')
    except OSError as e:
        error = KeyFileError(f"Error opening file `{fn}': {e.strerror or e}", file=fn)
        handle_error(error, "ask_and_open", ErrorCategory.FILESYSTEM,
                     additional_context={'file': fn}, log=logger)
        raise error from e


# =============================================================================
# KEY ROTATION
# =============================================================================

def patch_bytes(handle: BinaryIO, offset: int, original: bytes, replacement: bytes) -> None:
    """
    Overwrite original with replacement at offset.

    replacement must be exactly as long as original so that nothing after
    offset moves. The bytes on disk must currently equal original.
    """
    if len(original) != len(replacement):
        raise ValueError(
            f"replacement {replacement!r} is not the same length as {original!r}"
        )

    handle.seek(offset)
    current = handle.read(len(original))
    if current != original:
        raise ValueError(f"expected {original!r} at offset {offset}, found {current!r}")

    handle.seek(offset)
    handle.write(replacement)


def disable_old_keys(handle: BinaryIO) -> bool:
    """
    Mark every RSA key block in handle as obsolete.

    ``-----BEGIN RSA ...`` and ``-----END RSA ...`` lines are rewritten in
    place to ``-----BEGIN OLD ...`` / ``-----END OLD ...``. The handle is left
    at end of file so new keys can be appended.

    Returns:
        True if any line was rewritten
    """
    handle.seek(0)
    data = handle.read()

    disabled = False
    pos = 0
    try:
        for line in io.BytesIO(data):
            if line.startswith(KeyMarkers.RSA_BEGIN):
                patch_bytes(handle, pos + KeyMarkers.RSA_BEGIN_OFFSET,
                            KeyMarkers.ACTIVE, KeyMarkers.OBSOLETE)
                disabled = True
            elif line.startswith(KeyMarkers.RSA_END):
                patch_bytes(handle, pos + KeyMarkers.RSA_END_OFFSET,
                            KeyMarkers.ACTIVE, KeyMarkers.OBSOLETE)
                disabled = True
            pos += len(line)

        handle.flush()
    except OSError as e:
        name = getattr(handle, 'name', '<key file>')
        raise KeyFileError(f"Error rewriting `{name}': {e.strerror or e}", file=str(name)) from e

    handle.seek(0, os.SEEK_END)
    return disabled


__all__ = [
    'AcquisitionStrategy',
    'DefaultPath',
    'InteractivePrompt',
    'select_strategy',
    'restricted_umask',
    'resolve_path',
    'ask_and_open',
    'patch_bytes',
    'disable_old_keys',
]
