"""Backend selection: credential validation and Supabase reachability probe."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from taskboard.backends.base import RemoteGateway
from taskboard.models.status import BackendStatus

logger = logging.getLogger(__name__)


def has_valid_credentials(url: str | None, key: str | None) -> bool:
    """Return True when both Supabase settings are present and well-formed.

    The URL must be http(s) on a ``supabase.co`` host and the anon key must
    look like a JWT (``eyJ`` prefix).
    """
    if not url or not key:
        return False
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return False
    return "supabase.co" in parsed.hostname and key.strip().startswith("eyJ")


class BackendSelector:
    """Decides whether the remote backend may be used this session.

    ``remote_configured`` is fixed at construction. ``remote_usable`` starts
    False, becomes True only after a successful probe and drops back to False
    on any failed remote operation.
    """

    def __init__(self, gateway: RemoteGateway | None, remote_configured: bool) -> None:
        self.gateway = gateway
        self.remote_configured = remote_configured and gateway is not None
        self.remote_usable = False

    async def probe(self) -> bool:
        """Check remote reachability. Never raises."""
        if not self.remote_configured or self.gateway is None:
            self.remote_usable = False
            return False

        try:
            await self.gateway.probe()
        except Exception as e:
            logger.warning(f"[Selector] Supabase connection test failed: {e}")
            self.remote_usable = False
            return False

        if not self.remote_usable:
            logger.info("[Selector] Supabase reachable, using remote backend")
        self.remote_usable = True
        return True

    def mark_unusable(self, reason: str) -> None:
        """Disable the remote backend until the next probe."""
        if self.remote_usable:
            logger.warning(f"[Selector] Remote backend disabled: {reason}")
        self.remote_usable = False

    @property
    def status(self) -> BackendStatus:
        return BackendStatus(
            remote_configured=self.remote_configured,
            remote_usable=self.remote_usable,
        )
