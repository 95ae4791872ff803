"""Session configuration for the MiniMax plugins."""

from dataclasses import dataclass

from .env import DEFAULT_MINIMAX_API_HOST


@dataclass
class MiniMaxConfig:
    """Credentials for one session.

    One instance is created by the extension and shared by reference with the
    configure command and both tool plugins. It is never written to disk.

    Invariant: ``configured`` implies a non-empty ``api_key``.
    """
    api_key: str = ""
    api_host: str = DEFAULT_MINIMAX_API_HOST
    configured: bool = False

    def set_key(self, api_key: str) -> None:
        """Store a new key and mark the session configured."""
        self.api_key = api_key
        self.configured = bool(api_key)

    def clear(self) -> None:
        """Forget the key for the rest of the session."""
        self.api_key = ""
        self.configured = False

    def mark_unauthorized(self) -> None:
        """Downgrade after the API rejected the key (401/403)."""
        self.configured = False

    @property
    def masked_key(self) -> str:
        return mask_key(self.api_key)


def mask_key(api_key: str) -> str:
    """Render a key as its first 8 and last 4 characters for display.

    Keys too short to hide anything are rendered as ``***``.
    """
    if not api_key:
        return ""
    if len(api_key) > 12:
        return api_key[:8] + "..." + api_key[-4:]
    return "***"
