"""페이지네이션 유틸리티 모듈.

Pagination utilities for SQLAlchemy async queries.
Counting and content fetching are kept as separate steps so callers can
skip the count query when the page itself already determines the total.
"""

import math
from typing import Any, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


def page_offset(page: int, per_page: int) -> int:
    """1부터 시작하는 페이지 번호를 OFFSET으로 변환합니다."""
    return (max(page, 1) - 1) * per_page


def page_count(total: int, per_page: int) -> int:
    """전체 페이지 수 - ceil(total / per_page)."""
    if per_page <= 0:
        return 0
    return math.ceil(total / per_page)


async def count_rows(db: AsyncSession, query: Select[Any]) -> int:
    """쿼리 결과 행 수를 서브쿼리 COUNT로 조회합니다.

    Count the rows produced by ``query`` by wrapping it in a subquery.
    Any ORDER BY / LIMIT / OFFSET on the query should be removed first.
    """
    count_query = select(func.count()).select_from(query.subquery())
    return (await db.execute(count_query)).scalar() or 0


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 20,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated query, returning rows and total count.
    Runs two queries: a COUNT over the unordered query and the page
    itself with OFFSET/LIMIT.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate)
        page: 요청 페이지 번호, 1부터 시작 (Page number, 1-indexed)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        tuple[Sequence[Any], int]: (행 목록, 전체 개수) (Rows and total count)
    """
    total: int = await count_rows(db, query.order_by(None))

    result = await db.execute(query.offset(page_offset(page, per_page)).limit(per_page))
    rows: Sequence[Any] = result.all()

    return rows, total
