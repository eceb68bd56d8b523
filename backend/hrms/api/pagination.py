import math

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy.orm import Query as OrmQuery


class Pagination(BaseModel):
    current: int
    pages: int
    total: int
    limit: int


class PageParams:
    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(10, ge=1, le=100),
    ) -> None:
        self.page = page
        self.limit = limit

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def paginate(query: OrmQuery, params: PageParams) -> tuple[list, Pagination]:
    total = query.order_by(None).count()
    rows = query.offset(params.offset).limit(params.limit).all()
    meta = Pagination(
        current=params.page,
        pages=math.ceil(total / params.limit),
        total=total,
        limit=params.limit,
    )
    return rows, meta
