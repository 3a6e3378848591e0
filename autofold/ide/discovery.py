"""Find running IDE extensions through their lock files.

Each extension writes ``~/.autofold/ide/<port>.lock`` containing JSON::

    {"pid": 4242, "workspaceFolders": ["/home/me/project"],
     "ideName": "VS Code", "transport": "ws", "authToken": "..."}

Lock files whose process is gone are removed during discovery.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from autofold.core.constants import get_lock_dir

logger = logging.getLogger(__name__)


class LockFile(BaseModel):
    """Contents of an extension's lock file."""

    model_config = ConfigDict(populate_by_name=True)

    pid: int = 0
    workspace_folders: list[str] = Field(default_factory=list, alias="workspaceFolders")
    ide_name: str = Field(default="Unknown", alias="ideName")
    transport: str = "ws"
    auth_token: str = Field(default="", alias="authToken")


@dataclass
class IDEInfo:
    pid: int
    workspace_folders: list[str]
    ide_name: str
    transport: str
    auth_token: str
    port: int
    lock_path: Path
    host: str = "127.0.0.1"


def discover_ides(cwd: Path, lock_dir: Path | None = None) -> list[IDEInfo]:
    """IDEs whose workspace contains ``cwd``, most specific workspace first.

    Returns [] when the lock directory is missing or nothing matches.
    """
    directory = lock_dir or get_lock_dir()
    if not directory.is_dir():
        return []

    target = cwd.resolve()
    ranked: list[tuple[int, IDEInfo]] = []
    for path in sorted(directory.glob("*.lock")):
        found = _load_lock(path)
        if found is None:
            continue
        lock, port = found
        depth = _workspace_depth(lock.workspace_folders, target)
        if depth < 0:
            continue
        ranked.append((depth, IDEInfo(
            pid=lock.pid,
            workspace_folders=lock.workspace_folders,
            ide_name=lock.ide_name,
            transport=lock.transport,
            auth_token=lock.auth_token,
            port=port,
            lock_path=path,
        )))

    ranked.sort(key=lambda entry: entry[0], reverse=True)
    return [info for _, info in ranked]


def _workspace_depth(folders: list[str], target: Path) -> int:
    """Length of the longest folder containing ``target``; -1 if none does."""
    best = -1
    for folder in folders:
        root = Path(folder).resolve()
        if target.is_relative_to(root):
            best = max(best, len(str(root)))
    return best


def _load_lock(path: Path) -> tuple[LockFile, int] | None:
    """Parse one lock file, deleting it if its owner process has exited."""
    if not path.stem.isdigit():
        return None
    try:
        lock = LockFile.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, ValueError, ValidationError):
        logger.debug("Unreadable lock file: %s", path)
        return None

    if not _is_pid_alive(lock.pid):
        logger.debug("Removing stale lock file: %s", path)
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.debug("Cannot remove stale lock file: %s", path)
        return None
    return lock, int(path.stem)


def _is_pid_alive(pid: int) -> bool:
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True  # Exists but different user
    except OSError:
        return False
    return True
