"""
Configuration file discovery.

Locates the configuration to use when no explicit path is given: first the
KREUZBERG_CONFIG_PATH environment variable, then a walk from the start
directory up to the filesystem root probing fixed candidate file names.
"""

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Mapping, Optional, Tuple, Union

from ..exceptions import ConfigIOError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

CONFIG_PATH_ENV_VAR = "KREUZBERG_CONFIG_PATH"

# Probe order at each directory level; the first existing file wins.
CANDIDATE_FILENAMES: Tuple[str, ...] = (
    "kreuzberg.toml",
    "kreuzberg.yaml",
    "kreuzberg.yml",
    "kreuzberg.json",
)


@dataclass(frozen=True)
class DiscoveryContext:
    """
    Inputs to discovery, kept explicit so callers can control them.

    Attributes:
        start_dir: Directory the upward walk starts from
        environ: Snapshot of the environment variables to consult
        root_dir: Optional ceiling; the walk never goes above this directory
    """

    start_dir: Path
    environ: Mapping[str, str] = field(default_factory=dict)
    root_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_dir", Path(self.start_dir).absolute())
        if self.root_dir is not None:
            object.__setattr__(self, "root_dir", Path(self.root_dir).absolute())

    @classmethod
    def from_process(cls) -> "DiscoveryContext":
        """Build a context from the current working directory and os.environ."""
        return cls(start_dir=Path.cwd(), environ=dict(os.environ))

    def env_config_path(self) -> Optional[Path]:
        """Path named by the environment override, resolved against start_dir."""
        value = self.environ.get(CONFIG_PATH_ENV_VAR, "").strip()
        if not value:
            return None
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.start_dir / path
        return path

    def search_dirs(self) -> Iterator[Path]:
        """Directories probed by the walk, nearest first."""
        for directory in (self.start_dir, *self.start_dir.parents):
            yield directory
            if self.root_dir is not None and directory == self.root_dir:
                return


def _is_regular_file(path: Path) -> bool:
    try:
        return stat.S_ISREG(path.stat().st_mode)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as e:
        raise ConfigIOError(f"Cannot access configuration candidate {path}: {e.strerror or e}", path) from e


def probe_directory(directory: Path) -> Optional[Path]:
    """
    Return the highest-precedence candidate file in ``directory``, if any.

    Raises:
        ConfigIOError: If a candidate cannot be inspected, e.g. the directory
            is not searchable
    """
    for name in CANDIDATE_FILENAMES:
        candidate = directory / name
        if _is_regular_file(candidate):
            return candidate
    return None


def find_config_file(context: Optional[DiscoveryContext] = None) -> Optional[Path]:
    """
    Locate the configuration file to load.

    The environment override is returned as-is, even when the file does not
    exist, so that loading it reports the problem instead of silently
    falling back to the walk.

    Args:
        context: Discovery inputs; defaults to the current process state

    Returns:
        Path of the configuration file, or None if nothing was found

    Raises:
        ConfigIOError: If a directory on the walk cannot be searched
    """
    if context is None:
        context = DiscoveryContext.from_process()

    env_path = context.env_config_path()
    if env_path is not None:
        logger.debug(f"Using configuration path from {CONFIG_PATH_ENV_VAR}: {env_path}")
        return env_path

    for directory in context.search_dirs():
        candidate = probe_directory(directory)
        if candidate is not None:
            logger.debug(f"Discovered configuration file: {candidate}")
            return candidate
        logger.debug(f"No configuration file in {directory}")

    return None
