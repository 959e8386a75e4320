# cadence/repositories/user_repository.py

from sqlalchemy.orm import Session

from cadence.db.models.user import User
from cadence.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user entities."""

    def __init__(self, session: Session):
        super().__init__(session, User)
