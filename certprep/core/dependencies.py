"""
Dependency injection for FastAPI endpoints.
"""
from typing import Generator, Optional, cast

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from certprep.core.config import settings
from certprep.core.engine import (
    ProgressAggregator,
    QuestionBankAccessor,
    SessionBuilder,
    SessionStateMachine,
    SystemClock,
)
from certprep.core.engine.interfaces import Clock
from certprep.core.security import decode_token
from certprep.db.base import SessionLocal
from certprep.models.user import User
from certprep.repositories import SqlProgressStore, SqlSessionRepository

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/login")


def get_db() -> Generator:
    """
    Dependency for database session.

    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_clock() -> Clock:
    """Clock used by the engine. Overridden in tests."""
    return SystemClock()


def get_current_user(
    db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)
) -> User:
    """
    Get current user from the bearer JWT.

    Raises:
        HTTPException: If token is invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(token)
    if payload is None:
        raise credentials_exception
    user_id: Optional[str] = payload.get("sub")
    if user_id is None or not str(user_id).isdigit():
        raise credentials_exception

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise credentials_exception

    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current active user.

    Raises:
        HTTPException: If user is inactive
    """
    if not cast(bool, current_user.is_active):
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user


def get_current_admin(current_user: User = Depends(get_current_active_user)) -> User:
    if current_user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions")
    return current_user


# ============= Engine wiring =============

def get_question_bank(db: Session = Depends(get_db)) -> QuestionBankAccessor:
    return QuestionBankAccessor(db)


def get_aggregator(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> ProgressAggregator:
    return ProgressAggregator(
        SqlProgressStore(db), SqlSessionRepository(db), QuestionBankAccessor(db), clock
    )


def get_session_builder(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> SessionBuilder:
    return SessionBuilder(QuestionBankAccessor(db), SqlSessionRepository(db), clock)


def get_state_machine(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    aggregator: ProgressAggregator = Depends(get_aggregator),
) -> SessionStateMachine:
    return SessionStateMachine(
        SqlSessionRepository(db), QuestionBankAccessor(db), aggregator, clock
    )
