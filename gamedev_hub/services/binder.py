import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gamedev_hub.auth.session import SessionData, SessionStore
from gamedev_hub.schemas.discord import DiscordProfile
from gamedev_hub.services.discord_oauth import DiscordOAuthClient, ProviderError
from gamedev_hub.services.repository import Repository

logger = logging.getLogger(__name__)

CDN_BASE = "https://cdn.discordapp.com"


class BindStatus(str, Enum):
    BOUND = "bound"
    NOT_VERIFIED = "not_verified"
    NOT_MEMBER = "not_member"
    PROVIDER_ERROR = "provider_error"


@dataclass
class BindResult:
    status: BindStatus
    session: Optional[SessionData] = None


def avatar_url(profile: DiscordProfile, cdn_base: str = CDN_BASE) -> str:
    if profile.avatar:
        return f"{cdn_base}/avatars/{profile.id}/{profile.avatar}.png"
    try:
        index = int(profile.discriminator or 0) % 5
    except ValueError:
        index = 0
    return f"{cdn_base}/embed/avatars/{index}.png"


class SessionBinder:
    """Turns a provider access token into a bound session and a local user."""

    def __init__(
        self,
        oauth: DiscordOAuthClient,
        repository: Repository,
        sessions: SessionStore,
        guild_id: str,
        default_bio: str = "No bio provided.",
        cdn_base: str = CDN_BASE,
    ):
        self.oauth = oauth
        self.repository = repository
        self.sessions = sessions
        self.guild_id = guild_id
        self.default_bio = default_bio
        self.cdn_base = cdn_base

    async def bind(
        self,
        session: Optional[SessionData],
        access_token: str,
        refresh_token: str,
    ) -> BindResult:
        try:
            profile = await self.oauth.get_profile(access_token)
            guilds = await self.oauth.get_guilds(access_token)
        except ProviderError as e:
            logger.warning("Binding aborted, provider error: %s", e)
            return BindResult(BindStatus.PROVIDER_ERROR, session)

        if not profile.verified:
            logger.info("Binding refused for %s: email not verified", profile.id)
            return BindResult(BindStatus.NOT_VERIFIED, session)

        if not any(g.id == self.guild_id for g in guilds):
            logger.info("Binding refused for %s: not in guild %s", profile.id, self.guild_id)
            return BindResult(BindStatus.NOT_MEMBER, session)

        if session is None:
            session = self.sessions.create()

        if session.user_id != profile.id:
            session.user_id = profile.id
            session.username = profile.username
            session.avatar = avatar_url(profile, self.cdn_base)
            self.sessions.save(session)

            if not self.repository.has_user(profile.id):
                self.repository.add_user(
                    profile.id,
                    profile.username,
                    session.avatar,
                    access_token,
                    refresh_token,
                    self.default_bio,
                )

        return BindResult(BindStatus.BOUND, session)
