from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from novelsource.infra.paths import DEFAULT_CONFIG_FILE, SETTING_PATH

logger = logging.getLogger(__name__)

LOCAL_SETTING_FILES = ("settings.toml", "settings.json")


def _resolve_file_path(
    user_path: str | Path | None,
    local_filenames: Iterable[str],
    fallback_path: Path,
) -> Path | None:
    """
    Pick the settings file to read.

    Lookup order:
        1. ``user_path`` when given and present
        2. the first of ``local_filenames`` present in the working directory
        3. ``fallback_path`` when present

    Args:
        user_path: Optional path supplied by the caller.
        local_filenames: Candidate file names in the working directory.
        fallback_path: Per-user settings file.

    Returns:
        The resolved path, or None when nothing matches.
    """
    if user_path:
        path = Path(user_path).expanduser().resolve()
        if path.is_file():
            return path
        logger.warning("Specified settings file not found: %s", path)

    cwd = Path.cwd()
    for name in local_filenames:
        candidate = (cwd / name).resolve()
        if candidate.is_file():
            logger.debug("Using local settings file: %s", candidate)
            return candidate

    return fallback_path.resolve() if fallback_path.is_file() else None


def _load_by_extension(path: Path) -> dict[str, Any]:
    """
    Parse a ``.toml`` or ``.json`` settings file.

    Args:
        path: Settings file.

    Returns:
        The decoded mapping.

    Raises:
        ValueError: If the extension is unsupported, parsing fails, or the
            document root is not a table/object.
    """
    ext = path.suffix.lower()

    try:
        if ext == ".toml":
            with path.open("rb") as f:
                data = tomllib.load(f)
        elif ext == ".json":
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise ValueError(f"Unsupported settings file extension: {ext}")
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, OSError) as e:
        raise ValueError(f"Invalid {ext.lstrip('.').upper()} in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Settings root must be a dict, got {type(data)} in {path}")

    return data


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load the settings mapping.

    Args:
        config_path: Optional explicit settings file path.

    Returns:
        Parsed settings.

    Raises:
        FileNotFoundError: If no settings file can be found.
        ValueError: If the file cannot be parsed.
    """
    path = _resolve_file_path(config_path, LOCAL_SETTING_FILES, SETTING_PATH)
    if path is None:
        raise FileNotFoundError("No valid settings file found.")

    logger.debug("Loading settings from: %s", path)
    return _load_by_extension(path)


def copy_default_config(target: Path) -> None:
    """
    Write the packaged sample settings to ``target``.

    Args:
        target: Destination file.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(DEFAULT_CONFIG_FILE.read_bytes())


def save_config(
    config: dict[str, Any],
    output_path: str | Path = SETTING_PATH,
) -> None:
    """
    Persist a settings mapping as JSON.

    Args:
        config: Settings mapping.
        output_path: Destination JSON file.

    Raises:
        OSError: If writing fails.
    """
    output = Path(output_path).expanduser().resolve()
    output.parent.mkdir(parents=True, exist_ok=True)

    try:
        output.write_text(
            json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8"
        )
    except OSError as e:
        logger.error("Failed to write settings JSON '%s': %s", output, e)
        raise

    logger.info("Settings saved to JSON: %s", output)
