"""I/O helpers."""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Optional

import yaml

LOG = logging.getLogger(__name__)

GIT_TIMEOUT_SECONDS = 10
_SCP_REMOTE_RE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")


def load_yaml(path: Path) -> dict:
    """Load a YAML file into a dictionary."""
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def read_text(path: Path) -> str:
    """Read a UTF-8 text file."""
    if not path.exists():
        raise FileNotFoundError(f"Changelog file does not exist: {path}")
    return path.read_text(encoding="utf-8")


def write_text(path: Path, text: str) -> Path:
    """Write ``text`` to ``path``, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def normalize_remote_url(remote: str) -> str:
    """Turn a git remote (SSH, scp-like or HTTPS) into the repository web URL.

    ``git@github.com:acme/widgets.git`` and
    ``https://github.com/acme/widgets.git`` both become
    ``https://github.com/acme/widgets``.
    """
    url = remote.strip()
    if url.endswith(".git"):
        url = url[: -len(".git")]
    if not url:
        return ""

    if "://" in url:
        scheme, _, rest = url.partition("://")
        host, _, path = rest.partition("/")
        host = host.rsplit("@", 1)[-1]
        if scheme not in {"http", "https"}:
            host = host.split(":", 1)[0]
            scheme = "https"
        return f"{scheme}://{host}/{path}".rstrip("/")

    match = _SCP_REMOTE_RE.match(url)
    if match:
        return f"https://{match.group('host')}/{match.group('path')}".rstrip("/")
    return url.rstrip("/")


def default_git_url(cwd: Optional[Path] = None) -> str:
    """Return the web URL of the ``origin`` remote, or an empty string."""
    command = ["git", "remote", "get-url", "origin"]
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            check=True,
            timeout=GIT_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        LOG.debug("Unable to resolve git remote URL: %s", exc)
        return ""
    url = normalize_remote_url(completed.stdout)
    LOG.debug("Resolved git remote URL: %s", url)
    return url


__all__ = [
    "default_git_url",
    "load_yaml",
    "normalize_remote_url",
    "read_text",
    "write_text",
]
