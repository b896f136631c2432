from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

from sqlalchemy import Executable, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from orderflow.schemas.common import PageParams


class BaseRepository:
    """
    Base class for repositories providing common helpers.

    Note:
      Tenant isolation is the caller's filter: every query built by a subclass
      must constrain on company_id, directly or through an owned parent row.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def execute(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute a SQLAlchemy statement."""
        return await self.session.execute(statement, params or {})

    async def scalars(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return scalars."""
        result = await self.execute(statement, params)
        return result.scalars()

    async def scalar_one_or_none(self, statement: Executable, params: Optional[dict[str, Any]] = None):
        """Execute and return a single scalar or None."""
        result = await self.execute(statement, params)
        return result.scalar_one_or_none()

    async def paginate(self, statement: Select, params: PageParams) -> Tuple[List[Any], int]:
        """
        Return one page of ORM rows for a filtered select plus the unpaged total.

        The caller orders the statement; the window is rows
        [(page-1)*limit, page*limit - 1].
        """
        count_stmt = select(func.count()).select_from(
            statement.order_by(None).subquery()
        )
        total = int((await self.execute(count_stmt)).scalar_one())
        rows = await self.scalars(statement.offset(params.offset).limit(params.limit))
        return list(rows), total

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def rollback(self) -> None:
        """Discard the current transaction."""
        await self.session.rollback()

    async def flush(self) -> None:
        """Send pending changes without committing."""
        await self.session.flush()

    async def add_all(self, entities: Iterable[Any]) -> None:
        """Add multiple entities to session."""
        self.session.add_all(list(entities))

    async def add(self, entity: Any) -> None:
        """Add a single entity to session."""
        self.session.add(entity)

    async def delete(self, entity: Any) -> None:
        """Mark an entity for deletion."""
        await self.session.delete(entity)
