from typing import Optional

from sqlalchemy.orm import Session

from badgeshop.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id) -> Optional[User]:
        try:
            return self.db.get(User, int(user_id))
        except (TypeError, ValueError):
            return None

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create(
        self, first_name: str, last_name: str, email: str, password_hash: str, role: str = "user"
    ) -> User:
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password_hash,
            role=role,
        )
        self.db.add(user)
        self.db.flush()
        return user

    def update_checkout_info(self, user: User, address: str, city: str, postal_code: str, country: str) -> User:
        user.address = address
        user.city = city
        user.postal_code = postal_code
        user.country = country
        self.db.flush()
        return user
