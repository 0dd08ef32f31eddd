"""Token files kept in the home folder."""

from __future__ import annotations

from pathlib import Path

from ..config import StorageConfig, get_home_folder
from ..core.errors import AuthorizationError, StorageError


class TokenHandler:
    """Reads and writes the OAuth request token and the access token.

    Each token is stored alone in a plain text file.
    """

    def __init__(self, oauth_token_path: Path, access_token_path: Path):
        self.oauth_token_path = oauth_token_path
        self.access_token_path = access_token_path

    @classmethod
    def from_config(cls, cfg: StorageConfig) -> "TokenHandler":
        home = get_home_folder(cfg)
        return cls(home / cfg.oauth_token_file, home / cfg.access_token_file)

    def read_oauth_token(self) -> str:
        return self._read(self.oauth_token_path, "Run 'pickpocket oauth' first.")

    def read_access_token(self) -> str:
        return self._read(self.access_token_path, "Run 'pickpocket oauth' and 'pickpocket authorize' first.")

    def save_oauth_token(self, token: str) -> None:
        self._write(self.oauth_token_path, token)

    def save_access_token(self, token: str) -> None:
        self._write(self.access_token_path, token)

    @staticmethod
    def _read(path: Path, hint: str) -> str:
        try:
            token = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            token = ""
        except OSError as exc:
            raise StorageError(f"Could not read token file {path}: {exc}") from exc
        if not token:
            raise AuthorizationError(f"No token found at {path}. {hint}")
        return token

    @staticmethod
    def _write(path: Path, token: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(token, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not write token file {path}: {exc}") from exc
