# music_school/services/base_service.py
"""Base service with common CRUD operations."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from typing import Type, Any, Dict, Optional, List, TypeVar, Generic
import logging

from ..core.exceptions import ConflictError, NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

# Define generic type
T = TypeVar('T')

class BaseService(Generic[T]):
    resource_name = "Resource"

    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db

    async def get(self, id: Any) -> Optional[T]:
        stmt = select(self.model).where(self.model.id == id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_404(self, id: Any) -> T:
        obj = await self.get(id)
        if obj is None:
            raise NotFoundError(self.resource_name, id)
        return obj

    async def get_multi(self, skip: int = 0, limit: Optional[int] = None, order_by: str = "id", **filters) -> List[T]:
        stmt = select(self.model)

        # Add additional filters
        for key, value in filters.items():
            if hasattr(self.model, key) and value is not None:
                stmt = stmt.where(getattr(self.model, key) == value)

        if hasattr(self.model, order_by):
            stmt = stmt.order_by(getattr(self.model, order_by))

        stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create(self, obj_in: Dict) -> T:
        obj = self.model(**obj_in)
        self.db.add(obj)
        await self.commit()
        await self.db.refresh(obj)
        return obj

    async def update(self, id: Any, obj_in: Dict) -> T:
        obj = await self.get_or_404(id)
        for key, value in obj_in.items():
            setattr(obj, key, value)
        await self.commit()
        await self.db.refresh(obj)
        return obj

    async def delete(self, id: Any) -> None:
        """Permanently delete record from database"""
        obj = await self.get_or_404(id)
        await self.db.delete(obj)
        await self.commit()

    async def commit(self) -> None:
        """Commit the session, translating store failures into domain errors"""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.info(f"{self.resource_name} integrity violation: {e.orig}")
            raise ConflictError(f"{self.resource_name} conflicts with existing data")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{self.resource_name} persistence failure: {e}")
            raise PersistenceError(str(e))
