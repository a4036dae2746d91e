from sqlalchemy.orm import Session
from app.database import storage_call, transaction
from app.models.user import User


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    @storage_call
    def get_or_create_by_auth_id(self, auth_user_id: str) -> User:
        """
        Get user by auth_user_id or create if doesn't exist.

        This is called automatically when a user makes their first API
        request with a valid JWT.

        Args:
            auth_user_id: User ID from JWT 'sub' claim

        Returns:
            User object (either existing or newly created)
        """
        user = self.db.query(User).filter(User.auth_user_id == auth_user_id).first()

        if not user:
            with transaction(self.db):
                user = User(auth_user_id=auth_user_id, username=auth_user_id)
                self.db.add(user)
            self.db.refresh(user)

        return user

    @storage_call
    def get_by_id(self, user_id: int) -> User | None:
        """Get user by internal ID"""
        return self.db.get(User, user_id)
