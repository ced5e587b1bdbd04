"""Per-session holder for the Anthropic API key."""

from __future__ import annotations

from .config import is_usable_credential


class CredentialStore:
    """Keep the session's API key and whether it must be re-entered.

    The generation pipeline reads the key through :meth:`get` on every call,
    so a key changed between calls is honored by the next call.
    """

    def __init__(self, credential: str | None = None) -> None:
        self._credential: str | None = None
        self._needs_reentry = False
        if credential:
            self.set(credential)

    def get(self) -> str | None:
        return self._credential

    def set(self, credential: str) -> None:
        self._credential = credential.strip()
        self._needs_reentry = False

    def clear(self) -> None:
        self._credential = None

    def request_reentry(self) -> None:
        """Flag the key as rejected by the model endpoint."""

        self._needs_reentry = True

    @property
    def has_credential(self) -> bool:
        return is_usable_credential(self._credential)

    @property
    def needs_reentry(self) -> bool:
        return self._needs_reentry or not self.has_credential
