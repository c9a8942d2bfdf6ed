from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import CursorResult, DateTime, Integer, Numeric, String, Text, delete, func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from catalog.domain.models import Product, ProductCreate
from catalog.repositories.base import AbstractProductRepository
from catalog.repositories.product_repository import utc_now


class Base(DeclarativeBase):
    pass


class ProductORM(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), index=True, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _as_utc(value: datetime) -> datetime:
    # SQLite speichert keine Zeitzone
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def _to_domain(row: ProductORM) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        description=row.description,
        price=row.price,
        stock=row.stock,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SQLiteProductRepository(AbstractProductRepository):
    """
    SQLAlchemy-Repository für Produkte.
    Funktioniert mit jeder async Database-URL, Default ist SQLite über aiosqlite.
    """

    def __init__(self, database_url: str, clock: Callable[[], datetime] = utc_now) -> None:
        self.engine = create_async_engine(database_url)
        self.async_session_maker = async_sessionmaker(self.engine, expire_on_commit=False)
        self._clock = clock

    async def initialize(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    async def find_page(
        self, search: str | None, page: int, per_page: int
    ) -> tuple[list[Product], int]:
        query = select(ProductORM)
        count_query = select(func.count()).select_from(ProductORM)
        if search is not None:
            condition = ProductORM.name.ilike(f"%{_escape_like(search)}%", escape="\\")
            query = query.where(condition)
            count_query = count_query.where(condition)

        query = (
            query.order_by(ProductORM.created_at.desc(), ProductORM.id.desc())
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        async with self.async_session_maker() as session:
            total = (await session.execute(count_query)).scalar_one()
            result = await session.execute(query)
            return [_to_domain(row) for row in result.scalars()], total

    async def find_by_id(self, product_id: str) -> Product | None:
        async with self.async_session_maker() as session:
            orm_product = await session.get(ProductORM, product_id)
            if orm_product:
                return _to_domain(orm_product)
            return None

    async def insert(self, payload: ProductCreate) -> Product:
        now = self._clock()
        orm_product = ProductORM(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )
        async with self.async_session_maker() as session, session.begin():
            session.add(orm_product)
        return _to_domain(orm_product)

    async def update_by_id(self, product_id: str, changes: dict[str, Any]) -> Product | None:
        async with self.async_session_maker() as session, session.begin():
            orm_product = await session.get(ProductORM, product_id)
            if orm_product is None:
                return None
            for field, value in changes.items():
                setattr(orm_product, field, value)
            orm_product.updated_at = self._clock()
        return _to_domain(orm_product)

    async def delete_by_id(self, product_id: str) -> bool:
        async with self.async_session_maker() as session, session.begin():
            result = await session.execute(delete(ProductORM).where(ProductORM.id == product_id))
            if isinstance(result, CursorResult):
                return bool(result.rowcount > 0)
            return False
