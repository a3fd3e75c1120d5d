import logging
from typing import Optional

from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from gamedev_hub.database import Store
from gamedev_hub.models.post import Post
from gamedev_hub.models.user import User
from gamedev_hub.schemas.post_schema import PostOut
from gamedev_hub.schemas.result import Lookup
from gamedev_hub.schemas.user_schema import UserRecord, UserSummary
from gamedev_hub.services.validation import is_valid_bio, is_valid_post, sanitize_title

logger = logging.getLogger(__name__)


class Repository:
    """
    Validated accessors over the users and posts tables.

    Each call runs one statement in its own session. Storage errors are
    logged here and reported to callers as False, an empty list, or a
    Lookup with ERROR status.
    """

    def __init__(self, store: Store):
        self.store = store

    # ---------- Users ----------

    def has_user(self, discord_id: str) -> bool:
        try:
            with self.store.session() as db:
                return db.query(User.id).filter(User.discord_id == discord_id).first() is not None
        except SQLAlchemyError:
            logger.exception("has_user failed for discord_id=%s", discord_id)
            return False

    def add_user(
        self,
        discord_id: str,
        username: str,
        avatar: str,
        access_token: Optional[str],
        refresh_token: Optional[str],
        bio: str,
    ) -> bool:
        if self.has_user(discord_id):
            return True

        try:
            with self.store.session() as db:
                db.add(User(
                    discord_id=discord_id,
                    username=username,
                    avatar=avatar,
                    access_token=access_token,
                    refresh_token=refresh_token,
                    bio=bio,
                ))
                db.commit()
        except IntegrityError:
            # lost a race with a concurrent login for the same account
            logger.info("add_user: discord_id=%s already inserted", discord_id)
            return self.has_user(discord_id)
        except SQLAlchemyError:
            logger.exception("add_user failed for discord_id=%s", discord_id)
            return False

        logger.info("Created user discord_id=%s", discord_id)
        return True

    def update_user_bio(self, discord_id: str, bio: str) -> bool:
        bio = bio.strip()
        if not is_valid_bio(bio) or not self.has_user(discord_id):
            return False

        try:
            with self.store.session() as db:
                changed = (
                    db.query(User)
                    .filter(User.discord_id == discord_id)
                    .update({User.bio: bio}, synchronize_session=False)
                )
                db.commit()
        except SQLAlchemyError:
            logger.exception("update_user_bio failed for discord_id=%s", discord_id)
            return False

        return changed == 1

    def get_user_bio(self, discord_id: str) -> str:
        try:
            with self.store.session() as db:
                row = db.query(User.bio).filter(User.discord_id == discord_id).first()
        except SQLAlchemyError:
            logger.exception("get_user_bio failed for discord_id=%s", discord_id)
            return ""
        return row.bio if row else ""

    def get_user_id(self, discord_id: str) -> Lookup[int]:
        try:
            with self.store.session() as db:
                row = db.query(User.id).filter(User.discord_id == discord_id).first()
        except SQLAlchemyError:
            logger.exception("get_user_id failed for discord_id=%s", discord_id)
            return Lookup.error()
        return Lookup.found(row.id) if row else Lookup.not_found()

    def get_all_users(self) -> list[UserSummary]:
        try:
            with self.store.session() as db:
                users = db.query(User).order_by(desc(User.id)).all()
                return [UserSummary.model_validate(u) for u in users]
        except SQLAlchemyError:
            logger.exception("get_all_users failed")
            return []

    def get_user_by_uid(self, user_id: int) -> Lookup[UserRecord]:
        try:
            with self.store.session() as db:
                user = db.query(User).filter(User.id == user_id).first()
                if user is None:
                    return Lookup.not_found()
                return Lookup.found(UserRecord.model_validate(user))
        except SQLAlchemyError:
            logger.exception("get_user_by_uid failed for id=%s", user_id)
            return Lookup.error()

    # ---------- Posts ----------

    def add_post(self, title: str, description: str, user_id: int, link: str) -> bool:
        title = title.strip()
        description = description.strip()
        link = link.strip()
        if not is_valid_post(title, description, link):
            return False
        if not self.get_user_by_uid(user_id).is_found:
            return False

        try:
            with self.store.session() as db:
                db.add(Post(
                    associated_user=user_id,
                    title=sanitize_title(title),
                    description=description,
                    link=link,
                ))
                db.commit()
        except SQLAlchemyError:
            logger.exception("add_post failed for user_id=%s", user_id)
            return False

        return True

    def get_all_posts(self) -> list[PostOut]:
        try:
            with self.store.session() as db:
                posts = db.query(Post).order_by(desc(Post.id)).all()
                return [PostOut.model_validate(p) for p in posts]
        except SQLAlchemyError:
            logger.exception("get_all_posts failed")
            return []

    def get_post(self, post_id: int) -> Lookup[PostOut]:
        try:
            with self.store.session() as db:
                post = db.query(Post).filter(Post.id == post_id).first()
                if post is None:
                    return Lookup.not_found()
                return Lookup.found(PostOut.model_validate(post))
        except SQLAlchemyError:
            logger.exception("get_post failed for id=%s", post_id)
            return Lookup.error()
