"""Centralized credential loader: reads from env vars or ~/.helios-env"""
import os

_HELIOS_ENV_PATH = os.path.expanduser("~/.helios-env")
_cache = {}


def _parse_env_file(path=None):
    """Parse an env file (format: export VAR=value or VAR=value)."""
    path = path or _HELIOS_ENV_PATH
    if _cache.get(path) is not None:
        return _cache[path]
    values = {}
    if os.path.exists(path):
        with open(path) as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if line.startswith("export "):
                    line = line[7:]
                if "=" not in line:
                    continue
                key, _, value = line.partition("=")
                values[key.strip()] = value.strip().strip('"').strip("'")
    _cache[path] = values
    return values


def get_key(name, required=True, default=None, path=None):
    """Return a setting from the environment or the helios env file.

    Args:
        name: Environment variable name.
        required: If True (default), raises RuntimeError when missing.
                  If False, returns `default` when missing.
        path: Alternate env file, mostly for tests.
    """
    value = os.environ.get(name)
    if value:
        return value
    value = _parse_env_file(path).get(name)
    if value:
        return value
    if required:
        raise RuntimeError(
            f"Missing setting: {name}. "
            f"Set it as an env var or add it to {path or _HELIOS_ENV_PATH}"
        )
    return default
