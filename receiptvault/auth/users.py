"""
User directory: insert-or-update keyed by the identity provider's subject.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from receiptvault.errors import PersistenceError
from receiptvault.models import UserModel

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}


def upsert_user(db: Session, user_id: str, name: Optional[str] = None, email: Optional[str] = None) -> None:
    """Create the user or overwrite name/email (last write wins, nulls included).

    Done as a single INSERT .. ON CONFLICT so two concurrent sign-ins for the
    same subject both succeed.
    """
    insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
    try:
        if insert is not None:
            stmt = insert(UserModel).values(id=user_id, name=name, email=email)
            stmt = stmt.on_conflict_do_update(
                index_elements=[UserModel.id],
                set_={"name": name, "email": email, "updated_at": func.now()},
            )
            db.execute(stmt)
        else:
            db.merge(UserModel(id=user_id, name=name, email=email))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("User upsert failed for %s: %s", user_id, e)
        raise PersistenceError("Failed to save user", detail=str(e)) from e


def get_user(db: Session, user_id: str) -> Optional[UserModel]:
    return db.query(UserModel).filter(UserModel.id == user_id).first()
