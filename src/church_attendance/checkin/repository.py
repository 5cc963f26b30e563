from __future__ import annotations

from typing import Optional, Protocol

from .model import QRSession


class QRSessionRepository(Protocol):
    def create(self, session: QRSession) -> QRSession:
        raise NotImplementedError

    def get(self, session_id: str) -> Optional[QRSession]:
        raise NotImplementedError

    def increment_check_ins(self, session_id: str) -> bool:
        raise NotImplementedError

    def upsert_check_ins(self, session: QRSession) -> None:
        """Insert `session`, or only overwrite its check-in count if it exists."""

        raise NotImplementedError
