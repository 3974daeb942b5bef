"""
aiohttp session management: pooled sessions per named profile, and one-off sessions.
"""

import logging
from pathlib import Path

import aiohttp

from ..exceptions import ConfigurationError
from ..types import DEFAULT_TIMEOUT
from ..types import ClientCertificate
from ..types import ClientProfile

logger = logging.getLogger(__name__)


def create_session(
    timeout: float | None = None,
    certificate: ClientCertificate | None = None,
    limit: int = 100,
) -> aiohttp.ClientSession:
    """
    Create a standalone session.

    Args:
        timeout: Total request timeout in seconds (default: 60)
        certificate: Optional client certificate presented to the server
        limit: Connection pool size

    Returns:
        A new session; the caller owns it and must close it
    """
    ssl_context = certificate.create_ssl_context() if certificate else True
    connector = aiohttp.TCPConnector(limit=limit, ssl=ssl_context)
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout or DEFAULT_TIMEOUT),
        cookie_jar=aiohttp.DummyCookieJar(),
    )


class ClientFactory:
    """
    Hands out pooled aiohttp sessions keyed by profile name.

    Sessions are created lazily on first use and reused afterwards. The
    factory owns them: close it (or use it as an async context manager)
    when done.

    Example:
        factory = ClientFactory([ClientProfile(name="billing", base_url="https://billing.local/")])
        async with factory:
            transport = Transport(TransportOptions(uri="invoices", client_name="billing"), factory)
            await transport.execute()
    """

    def __init__(self, profiles: list[ClientProfile] | None = None):
        """
        Initialize the factory.

        Args:
            profiles: Profiles to register. An unnamed default profile is
                      always available unless one is supplied.
        """
        self._profiles: dict[str, ClientProfile] = {"": ClientProfile()}
        self._sessions: dict[str, aiohttp.ClientSession] = {}
        for profile in profiles or []:
            self.register(profile)

    @classmethod
    def from_file(cls, path: Path | str) -> "ClientFactory":
        """Create a factory from a JSON profiles file (see config.load_profiles)."""
        from ..config import load_profiles

        return cls(list(load_profiles(path).values()))

    def register(self, profile: ClientProfile) -> None:
        """Register or replace a profile. Replacing does not affect open sessions."""
        self._profiles[profile.name] = profile
        logger.debug(f"Registered client profile '{profile.name}'")

    def get_profile(self, name: str | None = None) -> ClientProfile:
        """
        Look up a profile.

        Raises:
            ConfigurationError: If no profile has this name
        """
        key = name or ""
        try:
            return self._profiles[key]
        except KeyError:
            raise ConfigurationError(f"Unknown client profile: '{key}'") from None

    @property
    def profiles(self) -> list[str]:
        return list(self._profiles)

    async def get_session(self, name: str | None = None) -> aiohttp.ClientSession:
        """Get or create the session for a profile."""
        profile = self.get_profile(name)
        session = self._sessions.get(profile.name)
        if session is None or session.closed:
            ssl_context = profile.certificate.create_ssl_context() if profile.certificate else True
            connector = aiohttp.TCPConnector(limit=profile.limit, ssl=ssl_context)
            # response cookies are captured per call, never replayed by the session
            jar = aiohttp.DummyCookieJar()
            if profile.timeout:
                session = aiohttp.ClientSession(
                    connector=connector,
                    timeout=aiohttp.ClientTimeout(total=profile.timeout),
                    cookie_jar=jar,
                )
            else:
                # aiohttp's own default timeouts apply
                session = aiohttp.ClientSession(connector=connector, cookie_jar=jar)
            self._sessions[profile.name] = session
            logger.debug(f"Created session for client profile '{profile.name}'")
        return session

    async def close(self) -> None:
        """Close every session."""
        for session in self._sessions.values():
            if not session.closed:
                await session.close()
        self._sessions.clear()

    async def __aenter__(self) -> "ClientFactory":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
