from sqlalchemy.orm import Session

from . import user as model
from ... import schemas


def get_user_by_email(db: Session, email: str):
    return db.query(model.User).filter(model.User.email == email.lower()).first()


def create_user(db: Session, user: schemas.UserCreate, hashed_password: str):
    db_user = model.User(email=user.email.lower(), hashed_password=hashed_password)
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user
