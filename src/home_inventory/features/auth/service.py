"""Account lookups and creation used by the authentication endpoints and the CLI."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from . import models


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[models.User]:
    """Retrieves a user by their username.

    Args:
        db: The database session.
        username: The username of the user to retrieve.

    Returns:
        The User object if found, otherwise None.
    """
    result = await db.execute(select(models.User).where(models.User.username == username))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[models.User]:
    """Retrieves a user by their email address."""
    result = await db.execute(select(models.User).where(models.User.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, user_in: dict, hashed_password_val: str) -> models.User:
    """Creates a new user in the database.

    Args:
        db: The database session.
        user_in: A dictionary containing the user data (excluding password).
        hashed_password_val: The hashed password for the new user.

    Returns:
        The newly created User object.
    """
    new_user = models.User(**user_in, hashed_password=hashed_password_val)
    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)
    return new_user
