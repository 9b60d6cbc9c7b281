"""Spotify Web API provider for artist genre lookups.

Implements IMusicMetadataProvider with the client-credentials OAuth flow.
The bearer token is cached and renewed only when it is missing or its
expiry (the reported lifetime minus a safety margin) has been reached.
Token reads and renewals share one ``asyncio.Lock`` so concurrent searches
never fetch two tokens or read a half-written one.
"""

from __future__ import annotations

import asyncio
import datetime
from typing import Callable

import httpx
from pydantic import ValidationError as PydanticValidationError

from event_enricher.config.settings import Settings
from event_enricher.interfaces.music_metadata_provider import (
    ArtistCandidate,
    IMusicMetadataProvider,
)
from event_enricher.models.authority import SpotifySearchResponse, SpotifyToken
from event_enricher.utils.errors import ConfigurationError, ExternalServiceError
from event_enricher.utils.logging import get_logger


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class SpotifyProvider(IMusicMetadataProvider):
    """Music metadata provider backed by the Spotify Web API.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``.
    settings:
        Supplies credentials, endpoints, timeout and token safety margin.
    clock:
        Returns the current UTC time; injectable for tests.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: Settings,
        clock: Callable[[], datetime.datetime] = _utcnow,
    ) -> None:
        self._http = http_client
        self._client_id = settings.spotify_client_id
        self._client_secret = settings.spotify_client_secret
        self._token_url = settings.spotify_token_url
        self._search_url = settings.spotify_api_url.rstrip("/") + "/search"
        self._margin = datetime.timedelta(seconds=settings.spotify_token_margin_seconds)
        self._timeout = httpx.Timeout(settings.http_timeout_seconds)
        self._clock = clock
        self._token = ""
        self._token_expiry = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)
        self._token_lock = asyncio.Lock()
        self._logger = get_logger(__name__)

    # -- Token handling --------------------------------------------------------

    def _token_valid(self) -> bool:
        return bool(self._token) and self._clock() < self._token_expiry

    async def _get_token(self) -> str:
        """Return a valid bearer token, renewing it at or after expiry."""
        async with self._token_lock:
            if not self._token_valid():
                await self._renew_token()
            return self._token

    async def _renew_token(self) -> None:
        if not self.is_available():
            raise ConfigurationError(
                message="SPOTIFY_CLIENT_ID and/or SPOTIFY_CLIENT_SECRET are empty",
                provider_name=self.get_provider_name(),
            )

        form = {
            "grant_type": "client_credentials",
            "client_id": self._client_id,
            "client_secret": self._client_secret,
        }
        try:
            response = await self._http.post(self._token_url, data=form, timeout=self._timeout)
        except httpx.HTTPError as exc:
            self._logger.warning("spotify_token_request_failed", error=str(exc))
            raise ExternalServiceError(
                message=f"token request failed: {exc!r}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code != 200:
            raise ExternalServiceError(
                message=f"token endpoint returned status {response.status_code}",
                provider_name=self.get_provider_name(),
            )

        try:
            token = SpotifyToken.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            raise ExternalServiceError(
                message=f"malformed token response: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        self._token = token.access_token
        self._token_expiry = (
            self._clock() + datetime.timedelta(seconds=token.expires_in) - self._margin
        )
        self._logger.info("spotify_token_renewed", expires_at=self._token_expiry.isoformat())

    async def _invalidate_token(self) -> None:
        async with self._token_lock:
            self._token = ""

    # -- IMusicMetadataProvider implementation ---------------------------------

    async def search_artists(self, name: str) -> list[ArtistCandidate]:
        """Search Spotify for artists named *name* (query lowercased)."""
        token = await self._get_token()
        params = {"q": name.lower(), "type": "artist"}
        headers = {"Authorization": f"Bearer {token}"}
        try:
            response = await self._http.get(
                self._search_url, params=params, headers=headers, timeout=self._timeout
            )
        except httpx.HTTPError as exc:
            self._logger.warning("spotify_search_failed", artist=name, error=str(exc))
            raise ExternalServiceError(
                message=f"artist search failed for '{name}': {exc!r}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code == 401:
            # Revoked or expired early; the next call fetches a fresh token.
            await self._invalidate_token()
        if response.status_code != 200:
            self._logger.warning(
                "spotify_http_error", artist=name, status=response.status_code
            )
            raise ExternalServiceError(
                message=f"artist search for '{name}' returned status {response.status_code}",
                provider_name=self.get_provider_name(),
            )

        try:
            payload = SpotifySearchResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            raise ExternalServiceError(
                message=f"malformed artist search response: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        candidates = [
            ArtistCandidate(name=item.name, genres=tuple(item.genres))
            for item in payload.artists.items
        ]
        self._logger.debug("spotify_search_complete", artist=name, results=len(candidates))
        return candidates

    def get_provider_name(self) -> str:
        return "spotify"

    def is_available(self) -> bool:
        return bool(self._client_id and self._client_secret)
