"""
Offset pagination over SQLAlchemy selects.
"""

from typing import Any, List, Tuple

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_tracker.app.schemas.common import Pagination


async def paginate(
    db: AsyncSession,
    query: Select,
    limit: int,
    skip: int,
    scalars: bool = True,
) -> Tuple[List[Any], Pagination]:
    """
    Run ``query`` with ``limit``/``skip`` and count its full result.

    ``query`` must already carry its ordering. With ``scalars=False`` rows
    are returned as tuples, for joined selects.
    """
    total = await db.scalar(select(func.count()).select_from(query.order_by(None).subquery()))
    result = await db.execute(query.offset(skip).limit(limit))
    items = list(result.scalars().all()) if scalars else list(result.all())
    return items, Pagination.build(total=total or 0, limit=limit, skip=skip, returned=len(items))
