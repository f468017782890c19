"""Small persistence helpers shared by the services.

Services own their transactions; these helpers cover the common
add/commit/refresh and lookup-or-404 steps.
"""

from sqlalchemy.orm import Session
from typing import Any, Type, TypeVar
from database.models import Base
from core.exceptions import NotFoundError

T = TypeVar('T', bound=Base)


def save(session: Session, obj: T) -> T:
    """Add, commit and refresh a single object.

    Args:
        session: Database session.
        obj: Model instance to persist.

    Returns:
        The persisted object with refreshed attributes.
    """
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj


def get_or_404(session: Session, model: Type[T], identifier: Any, resource: str = None) -> T:
    """Return the row with the given primary key or raise `NotFoundError`."""
    obj = session.get(model, identifier)
    if obj is None:
        raise NotFoundError(resource or model.__name__, identifier)
    return obj
