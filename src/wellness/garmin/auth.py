"""
Garmin Connect token persistence.

garminconnect (via garth) logs in once with email + password and produces
OAuth tokens that are dumped as JSON files into a directory:

    <tokens_dir>/oauth1_token.json
    <tokens_dir>/oauth2_token.json

The password is never stored. On later starts the tokens are restored from
disk; when Garmin rejects them we raise SessionExpiredError and ask the user
to run `python -m wellness setup` again.
"""
import os
import stat
from pathlib import Path

import garminconnect

# ── Constants ─────────────────────────────────────────────────────────────────

TOKENS_DIR_DEFAULT = Path.home() / ".wellness" / "garmin_tokens"
TOKEN_FILE_NAMES = ("oauth1_token.json", "oauth2_token.json")


# ── Exceptions ────────────────────────────────────────────────────────────────

class NoSessionError(RuntimeError):
    """Raised when no saved tokens exist."""


class SessionExpiredError(RuntimeError):
    """Raised when saved tokens are rejected by Garmin's servers."""


# ── Main class ────────────────────────────────────────────────────────────────

class GarminAuth:
    """
    Manages Garmin Connect token persistence.

    Usage:
        auth = GarminAuth()
        if not auth.has_session():
            auth.authenticate_and_save(email, password)
        api = auth.build_client()   # → garminconnect.Garmin instance
    """

    def __init__(self, tokens_dir: Path = TOKENS_DIR_DEFAULT):
        self._tokens_dir = Path(tokens_dir).expanduser()

    @property
    def tokens_dir(self) -> Path:
        return self._tokens_dir

    # ── Persistence ───────────────────────────────────────────────────────────

    def has_session(self) -> bool:
        """Return True if every token file exists on disk."""
        return all((self._tokens_dir / name).exists() for name in TOKEN_FILE_NAMES)

    def secure(self) -> None:
        """
        Restrict the token directory to its owner.

        Directory: 0700 (rwx------)
        Files:     0600 (rw-------)
        """
        self._tokens_dir.mkdir(parents=True, exist_ok=True)
        os.chmod(self._tokens_dir, stat.S_IRWXU)
        for name in TOKEN_FILE_NAMES:
            path = self._tokens_dir / name
            if path.exists():
                os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)

    def clear(self) -> None:
        """Delete the token files (does not raise if already absent)."""
        for name in TOKEN_FILE_NAMES:
            (self._tokens_dir / name).unlink(missing_ok=True)

    # ── Auth ──────────────────────────────────────────────────────────────────

    def authenticate_and_save(self, email: str, password: str) -> garminconnect.Garmin:
        """
        Log in with email + password and dump the resulting tokens to disk.

        Raises:
            Any exception from garminconnect on auth failure.
        """
        api = garminconnect.Garmin(email, password)
        api.login()  # raises on bad credentials

        self._tokens_dir.mkdir(parents=True, exist_ok=True)
        api.garth.dump(str(self._tokens_dir))
        self.secure()
        return api

    def build_client(self) -> garminconnect.Garmin:
        """
        Build an authenticated Garmin client from the saved tokens.

        Raises:
            NoSessionError: if no tokens are saved.
            SessionExpiredError: if the saved tokens are no longer valid.
        """
        if not self.has_session():
            raise NoSessionError(
                f"No Garmin tokens found in {self._tokens_dir}. "
                "Run `python -m wellness setup` to authenticate."
            )

        api = garminconnect.Garmin()
        try:
            api.login(str(self._tokens_dir))
        except Exception as exc:
            raise SessionExpiredError(
                "Garmin session has expired. "
                "Run `python -m wellness setup` to re-authenticate."
            ) from exc

        return api
