import base64
import logging
from urllib.parse import quote, urlencode

import httpx
from pydantic import ValidationError

from gamedev_hub.schemas.discord import DiscordGuild, DiscordProfile, TokenPair

logger = logging.getLogger(__name__)

SCOPES = ("identify", "email", "connections", "guilds")


class ProviderError(Exception):
    """Any failed or unusable response from the Discord API."""


class TokenExchangeError(ProviderError):
    """The authorization code could not be turned into tokens."""


class DiscordOAuthClient:
    def __init__(
        self,
        http: httpx.AsyncClient,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        api_base: str = "https://discord.com/api",
        auth_style: str = "form",
    ):
        self.http = http
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.api_base = api_base.rstrip("/")
        self.auth_style = auth_style

    @property
    def scope(self) -> str:
        return " ".join(SCOPES)

    def build_authorize_url(self) -> str:
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "response_type": "code",
                "scope": self.scope,
            },
            quote_via=quote,
        )
        return f"{self.api_base}/oauth2/authorize?{query}"

    async def exchange_code(self, code: str) -> TokenPair:
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
        }
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

        if self.auth_style == "basic":
            basic_auth = base64.b64encode(f"{self.client_id}:{self.client_secret}".encode()).decode()
            headers["Authorization"] = f"Basic {basic_auth}"
        else:
            data["client_id"] = self.client_id
            data["client_secret"] = self.client_secret

        try:
            res = await self.http.post(f"{self.api_base}/oauth2/token", data=data, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Token exchange transport error: %s", e.__class__.__name__)
            raise TokenExchangeError("token exchange failed") from e

        if not res.is_success:
            logger.warning("Token exchange rejected: %s", res.status_code)
            raise TokenExchangeError("token exchange failed")

        try:
            return TokenPair.model_validate(res.json())
        except (ValueError, ValidationError) as e:
            logger.warning("Token exchange returned an unusable body")
            raise TokenExchangeError("token exchange failed") from e

    async def _get(self, path: str, access_token: str):
        try:
            res = await self.http.get(
                f"{self.api_base}{path}",
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            logger.warning("GET %s transport error: %s", path, e.__class__.__name__)
            raise ProviderError(f"GET {path} failed") from e

        if not res.is_success:
            logger.warning("GET %s failed: %s", path, res.status_code)
            raise ProviderError(f"GET {path} failed with {res.status_code}")

        try:
            return res.json()
        except ValueError as e:
            raise ProviderError(f"GET {path} returned invalid JSON") from e

    async def get_profile(self, access_token: str) -> DiscordProfile:
        data = await self._get("/users/@me", access_token)
        try:
            return DiscordProfile.model_validate(data)
        except ValidationError as e:
            raise ProviderError("unexpected profile payload") from e

    async def get_guilds(self, access_token: str) -> list[DiscordGuild]:
        data = await self._get("/users/@me/guilds", access_token)
        if not isinstance(data, list):
            raise ProviderError("unexpected guild list payload")
        try:
            return [DiscordGuild.model_validate(g) for g in data]
        except ValidationError as e:
            raise ProviderError("unexpected guild list payload") from e
