from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from spotauth.core.fs_utils import read_json, remove_file, write_json
from spotauth.core.logging_utils import log_warning
from spotauth.core.models import TokenSet

TOKEN_FILE_MODE = 0o600


@dataclass(frozen=True)
class CachedTokens:
    tokens: TokenSet
    issued_at: float  # epoch seconds


class TokenCache:
    """
    JSON file holding the last TokenSet and when it was issued.

    Layout:
      {"issued_at": 1739822592.4, "tokens": {"access_token": "...", ...}}

    The file is written atomically with owner-only permissions. A missing,
    corrupted or incomplete file loads as None.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[CachedTokens]:
        def _on_error(e: Exception) -> None:
            log_warning(f"Token cache {self.path} is unreadable or corrupted ({e}); ignoring it.")

        data = read_json(self.path, default=None, on_error=_on_error)
        if data is None:
            return None
        if not isinstance(data, dict) or not isinstance(data.get("tokens"), dict):
            log_warning(f"Token cache {self.path} has an invalid structure; ignoring it.")
            return None

        try:
            tokens = TokenSet.model_validate(data["tokens"])
            issued_at = float(data.get("issued_at", 0.0))
        except (ValidationError, TypeError, ValueError):
            log_warning(f"Token cache {self.path} has invalid token data; ignoring it.")
            return None
        return CachedTokens(tokens=tokens, issued_at=issued_at)

    def save(self, tokens: TokenSet, issued_at: float) -> None:
        payload = {"issued_at": issued_at, "tokens": tokens.model_dump()}
        write_json(self.path, payload, mode=TOKEN_FILE_MODE)

    def clear(self) -> bool:
        return remove_file(self.path)
