from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class DatedAt:
    """Отметки времени создания и изменения сущности"""
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def touch(self, at: Optional[datetime] = None) -> None:
        """Обновление времени последнего изменения"""
        self.updated_at = at or datetime.utcnow()


def same_entity(left: Any, right: Any) -> bool:
    """Сравнение двух сущностей по идентификатору.

    Сущность без присвоенного id равна только самой себе.
    """
    if left is right:
        return True
    if left is None or right is None or type(left) is not type(right):
        return False
    if left.id is None or right.id is None:
        return False
    return left.id == right.id
