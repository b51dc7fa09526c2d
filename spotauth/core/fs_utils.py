import json
import os
from pathlib import Path
import tempfile
from typing import Any, Callable, Optional


def ensure_parent_dir(path: Path | str) -> None:
    """
    Ensure the parent directory of a file path exists.
    Example:
      ensure_parent_dir("~/.cache/spotauth/token.json")
    """
    directory = os.path.dirname(os.fspath(path))
    if directory:
        os.makedirs(directory, exist_ok=True)


def write_json(path: str | Path, data: Any, *, mode: Optional[int] = None) -> None:
    """
    Write JSON data to a file using an atomic replace.

    The content goes to a temporary file next to the target, is flushed and
    fsynced, then moved over the target with os.replace. Readers see either
    the previous document or the new one, never a truncated file.

    When `mode` is given the temporary file is chmod'ed before the replace,
    so the target never exists with looser permissions (token files use
    0o600).
    """
    target_path = Path(path)
    ensure_parent_dir(target_path)

    fd, tmp_path_str = tempfile.mkstemp(
        dir=str(target_path.parent),
        prefix=target_path.name,
        suffix=".tmp",
    )
    tmp_path = Path(tmp_path_str)

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())

        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, target_path)
    except Exception:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise


def read_json(
    path: str | Path,
    default: Any = None,
    *,
    on_error: Optional[Callable[[Exception], None]] = None,
) -> Any:
    """
    Read a JSON file safely.

    - returns `default` if the file does not exist
    - returns `default` if the JSON is invalid, not UTF-8 or the path cannot
      be read (optionally calling on_error)
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return default
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        if on_error:
            on_error(e)
        return default


def remove_file(path: str | Path) -> bool:
    """Delete a file if present. Returns True when something was removed."""
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    return True
