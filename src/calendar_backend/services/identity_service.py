"""
Identity Service

Turns a verified Google sign-in into a local User and runs the one-time
migration that hands ownerless records to the legacy owner account.
"""

from typing import Optional
from sqlalchemy.orm import Session

from calendar_backend.integrations.google_oauth import GoogleProfile
from calendar_backend.models.user import User
from calendar_backend.repositories.category_repository import CategoryRepository
from calendar_backend.repositories.event_metadata_repository import EventMetadataRepository
from calendar_backend.repositories.user_repository import UserRepository
from calendar_backend.services.base_service import BaseService


class IdentityService(BaseService):
    """Login bookkeeping for Google-authenticated users."""

    def __init__(self, db: Session, legacy_owner_email: Optional[str] = None):
        super().__init__(db)
        self.legacy_owner_email = legacy_owner_email
        self.users = UserRepository(db)

    def login(self, profile: GoogleProfile) -> User:
        """
        Find or create the user for a Google profile.

        An existing user's refresh token is replaced only when Google issued
        a new one (it is not sent on every consent).

        Returns:
            The signed-in user
        """
        user = self.users.get_by_google_id(profile.google_id)

        if user is not None:
            if profile.refresh_token:
                user = self.users.set_refresh_token(user, profile.refresh_token)
            self.logger.info(f"User {user.id} signed in")
        else:
            user = self.users.create_user({
                "google_id": profile.google_id,
                "email": profile.email,
                "display_name": profile.display_name,
                "avatar": profile.avatar,
                "refresh_token": profile.refresh_token,
            })
            self.logger.info(f"Created user {user.id} for {user.email}")

        if self.is_legacy_owner(user):
            self.migrate_ownerless_records(user)

        return user

    def is_legacy_owner(self, user: User) -> bool:
        if not self.legacy_owner_email or not user.email:
            return False
        return user.email.strip().lower() == self.legacy_owner_email.strip().lower()

    def migrate_ownerless_records(self, user: User) -> dict:
        """
        Assign every category and metadata record without an owner to ``user``.

        Idempotent: once assigned, records are no longer ownerless.

        Returns:
            Counts of reassigned records per kind
        """
        categories = CategoryRepository(self.db).assign_ownerless(user.id)
        metadata = EventMetadataRepository(self.db).assign_ownerless(user.id)

        if categories or metadata:
            self.logger.info(
                f"Migrated ownerless data to {user.email}: "
                f"{categories} categories, {metadata} event metadata records"
            )
        return {"categories": categories, "event_metadata": metadata}
