import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from scenebook.services.exceptions import TransactionFailure

logger = logging.getLogger(__name__)


@asynccontextmanager
async def atomic(db: AsyncSession, operation: str):
    """
    Run a block of statements as one unit inside a SAVEPOINT.

    Any exception rolls the savepoint back. Database errors surface as
    TransactionFailure; domain errors propagate unchanged.
    """
    try:
        async with db.begin_nested():
            yield
    except SQLAlchemyError as e:
        logger.error(f"[{operation}] rolled back: {e}")
        raise TransactionFailure(f"{operation} failed and was rolled back") from e
