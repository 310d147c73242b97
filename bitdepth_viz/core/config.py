"""Configuration from environment variables, with .env loading.

Load order (first wins):
  1. Existing OS environment variables, never overwritten.
  2. .env file at --env-file path (if explicitly provided).
  3. .env file walking up from cwd, stopping at .git (file or dir).

Recognised variables:
  BITDEPTH_DEFAULT_DEPTH    bit depth used when -b is not given
  BITDEPTH_ORIGINAL_DEPTH   original bit depth (upper bound, default 8)
  BITDEPTH_OUT_DIR          fallback output directory for artefacts
"""

import os
from dataclasses import dataclass
from pathlib import Path

from bitdepth_viz.core.types import InvalidParameter


def _find_dotenv(start: Path) -> Path | None:
    """Walk up from start, return first .env found, stop at .git boundary."""
    current = start.resolve()
    while True:
        candidate = current / '.env'
        if candidate.is_file():
            return candidate
        # .git can be a dir (normal clone) or file (worktree)
        if (current / '.git').exists():
            return None
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _parse_dotenv(path: Path) -> dict[str, str]:
    """Parse KEY=value lines; quotes around the value are stripped."""
    result: dict[str, str] = {}
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        if line.startswith('export '):
            line = line[len('export ') :]
        key, _, raw_value = line.partition('=')
        key = key.strip()
        if key:
            result[key] = raw_value.strip().strip('"').strip("'")
    return result


def load_env(env_file: str | None = None) -> Path | None:
    """Load .env into os.environ for keys not already set.

    Returns the path that was loaded, or None if no .env was found/used.
    """
    if env_file:
        path = Path(env_file)
        if not path.is_file():
            return None
    else:
        path = _find_dotenv(Path.cwd())
        if path is None:
            return None

    for key, value in _parse_dotenv(path).items():
        if key not in os.environ:
            os.environ[key] = value
    return path


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidParameter(f'{name} must be an integer, got {raw!r}') from exc


@dataclass(frozen=True)
class Settings:
    default_bit_depth: int | None = None
    original_bit_depth: int = 8
    out_dir: str | None = None

    @classmethod
    def from_env(cls) -> 'Settings':
        original = _env_int('BITDEPTH_ORIGINAL_DEPTH')
        return cls(
            default_bit_depth=_env_int('BITDEPTH_DEFAULT_DEPTH'),
            original_bit_depth=8 if original is None else original,
            out_dir=os.environ.get('BITDEPTH_OUT_DIR') or None,
        )
