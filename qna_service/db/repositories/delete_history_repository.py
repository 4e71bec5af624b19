from typing import Sequence
from sqlalchemy.ext.asyncio import AsyncSession

from qna_service.db.models.qna import DeleteHistory as DeleteHistoryModel
from qna_service.domains.qna.history import DeleteHistory


class DeleteHistoryRepository:
    """Репозиторий журнала удалений"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_all(self, histories: Sequence[DeleteHistory]) -> None:
        """Добавление записей журнала в порядке их создания"""
        self.session.add_all([
            DeleteHistoryModel(
                content_type=history.content_type,
                content_id=history.content_id,
                deleted_by_id=history.writer_id,
                created_at=history.created_at
            )
            for history in histories
        ])
        await self.session.flush()
