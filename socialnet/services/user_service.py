from typing import List, Optional

from socialnet.config import Settings
from socialnet.repositories.user_repository import UserRepository
from socialnet.schemas.user import FollowResult, ProfileUpdate, UserPublic
from socialnet.utils.errors import PermissionDenied, UserNotFound, ValidationError
from socialnet.utils.security import hash_password, verify_password


MIN_PASSWORD_LENGTH = 6


def to_public(user: dict) -> UserPublic:
    return UserPublic(
        id=user["_id"],
        full_name=user.get("full_name"),
        profile_photo=user.get("profile_photo"),
        bio=user.get("bio"),
        followers=user.get("followers", []),
        following=user.get("following", []),
    )


class UserService:
    """Accounts, public profiles and the follow graph."""

    def __init__(self, user_repository: UserRepository, settings: Settings):
        self.user_repository = user_repository
        self.settings = settings

    async def register_user(self, full_name: str, email: str, password: str, confirm_password: str) -> UserPublic:
        """
        Create an account.

        Emails are stored lower-cased; a duplicate email, a confirmation that
        does not match or a short password is a ``ValidationError``.
        """
        email = email.lower()
        existing = await self.user_repository.get_user_by_email(email)
        if existing:
            raise ValidationError("Email already exists")
        if password != confirm_password:
            raise ValidationError("Password does not match")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")

        new_id = await self.user_repository.create_user(
            full_name=full_name,
            email=email,
            hashed_password=hash_password(password),
            profile_photo=self.settings.DEFAULT_PROFILE_PHOTO,
            bio=self.settings.DEFAULT_BIO,
        )
        return UserPublic(id=new_id, full_name=full_name, profile_photo=self.settings.DEFAULT_PROFILE_PHOTO, bio=self.settings.DEFAULT_BIO)

    async def authenticate_user(self, email: str, password: str) -> Optional[dict]:
        user = await self.user_repository.get_user_by_email(email.lower())
        if not user:
            return None
        if not verify_password(password, user.get("hashed_password", "")):
            return None
        return user

    async def get_profile(self, user_id: str) -> UserPublic:
        user = await self.user_repository.get_user_by_id(user_id)
        if not user:
            raise UserNotFound()
        return to_public(user)

    async def list_profiles(self, exclude_id: Optional[str] = None) -> List[UserPublic]:
        users = await self.user_repository.list_users(exclude_ids=[exclude_id] if exclude_id else ())
        return [to_public(u) for u in users]

    async def edit_profile(self, current_user_id: str, user_id: str, changes: ProfileUpdate) -> UserPublic:
        if current_user_id != user_id:
            raise PermissionDenied("You can only edit your own profile")
        fields = changes.model_dump(exclude_none=True)
        user = await self.user_repository.update_profile(user_id, fields)
        if not user:
            raise UserNotFound()
        return to_public(user)

    async def toggle_follow(self, current_user_id: str, target_id: str) -> FollowResult:
        """Follow ``target_id``, or unfollow when already following."""
        if current_user_id == target_id:
            raise ValidationError("You can't follow/unfollow yourself")
        target = await self.user_repository.get_user_by_id(target_id)
        if not target:
            raise UserNotFound()

        if current_user_id in target.get("followers", []):
            await self.user_repository.unfollow(current_user_id, target_id)
            followed = False
        else:
            await self.user_repository.follow(current_user_id, target_id)
            followed = True

        me = await self.user_repository.get_user_by_id(current_user_id)
        return FollowResult(followed=followed, following=me.get("following", []) if me else [])
