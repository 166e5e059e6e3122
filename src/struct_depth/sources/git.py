"""Retrieve remote repositories via the git CLI."""

import shutil
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from urllib.parse import urlparse

from ..exceptions import RepositoryError
from ..logging_config import get_logger

logger = get_logger(__name__)

_REMOTE_SCHEMES = ("http", "https", "ssh", "git", "file")

# Clone timeout in seconds
CLONE_TIMEOUT = 300


def is_remote(source: str) -> bool:
    """True if ``source`` looks like a git URL rather than a local path."""
    if source.startswith("git@"):
        return True
    return urlparse(source).scheme in _REMOTE_SCHEMES


@contextmanager
def clone_repository(url: str, depth: int = 1) -> Iterator[Path]:
    """Shallow-clone ``url`` into a temporary directory for the duration of the block.

    Args:
        url: Repository URL (https, ssh, git@host:path or file)
        depth: History depth passed to ``git clone --depth``; 0 clones everything

    Yields:
        Path to the working tree

    Raises:
        RepositoryError: If git is missing, times out or the clone fails
    """
    if shutil.which("git") is None:
        raise RepositoryError(url, "git executable not found")

    with tempfile.TemporaryDirectory(prefix="struct-depth-") as tmp:
        target = Path(tmp) / "repo"
        cmd = ["git", "clone", "--quiet"]
        if depth > 0:
            cmd += ["--depth", str(depth)]
        cmd += [url, str(target)]

        logger.info(f"Cloning {url}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=CLONE_TIMEOUT)
        except subprocess.TimeoutExpired:
            raise RepositoryError(url, f"git clone timed out after {CLONE_TIMEOUT}s")
        except FileNotFoundError:
            raise RepositoryError(url, "git executable not found")

        if result.returncode != 0:
            raise RepositoryError(url, f"git clone exited with {result.returncode}", result.stderr)

        yield target
