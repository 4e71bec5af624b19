from datetime import datetime
from sqlalchemy import Column, DateTime

from qna_service.core.db import Base


class BaseModel(Base):
    """Абстрактная модель с отметками времени создания и изменения"""
    __abstract__ = True

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
