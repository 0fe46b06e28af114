import logging
from typing import Any, List, Optional

from league.core.exceptions import DocumentNotFound
from league.models import TournamentConfig, TournamentStatus
from league.services.store import TOURNAMENTS, JsonDocumentStore

logger = logging.getLogger(__name__)


class TournamentService:
    def __init__(self, store: JsonDocumentStore):
        self.store = store

    def create_tournament(self, tournament_data: TournamentConfig) -> TournamentConfig:
        self.store.insert(TOURNAMENTS, tournament_data.model_dump(mode="json"))
        logger.info("Created tournament %s (%s)", tournament_data.name, tournament_data.id)
        return tournament_data

    def get_tournament_by_id(self, tournament_id: str) -> Optional[TournamentConfig]:
        try:
            return TournamentConfig(**self.store.get_one(TOURNAMENTS, tournament_id))
        except DocumentNotFound:
            return None

    def require_tournament(self, tournament_id: str) -> TournamentConfig:
        tournament = self.get_tournament_by_id(tournament_id)
        if tournament is None:
            raise DocumentNotFound(TOURNAMENTS, tournament_id)
        return tournament

    def get_all_tournaments(self) -> List[TournamentConfig]:
        return [TournamentConfig(**d) for d in self.store.get_all(TOURNAMENTS, order_by="created_at", descending=True)]

    def update_tournament(self, tournament_id: str, **fields: Any) -> TournamentConfig:
        current = self.require_tournament(tournament_id)
        # validate the merged document before writing it
        updated = TournamentConfig(**{**current.model_dump(), **fields})
        self.store.update(TOURNAMENTS, tournament_id, updated.model_dump(mode="json"))
        return updated

    def update_tournament_status(self, tournament_id: str, status: TournamentStatus, **fields: Any) -> TournamentConfig:
        try:
            status = TournamentStatus(status)
        except ValueError:
            raise ValueError(f"Invalid status value: {status}")
        updated = self.update_tournament(tournament_id, status=status, **fields)
        logger.info("Tournament %s is now %s", tournament_id, updated.status)
        return updated
