from typing import Union

from pydantic import SecretStr
from sqlalchemy.orm import Session

from core.exceptions import AuthError, ConflictError
from core.security import hash_password, verify_password
from models.user import User
from repositories.user_repo import UserRepository


class AuthService:
    def __init__(self, db: Session):
        self.repo = UserRepository(db)

    def register(self, *, email: str, username: str, password: Union[str, SecretStr]) -> User:
        if self.repo.get_by_email(email):
            raise ConflictError("Email already registered")
        if self.repo.get_by_username(username):
            raise ConflictError("Username already taken")
        return self.repo.create(email=email, username=username, password_hash=hash_password(password))

    def login(self, *, email: str, password: Union[str, SecretStr]) -> User:
        user = self.repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise AuthError("Invalid credentials")
        return user
