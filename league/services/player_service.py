import logging
from typing import List, Optional

from league.core.exceptions import (
    CapacityReached,
    DuplicateName,
    TransitionNotAllowed,
    WrongState,
)
from league.models import PlayerModel, PlayerStatus, StatDelta, TournamentStatus
from league.services.image_host import ImageHostClient
from league.services.store import PLAYERS, JsonDocumentStore
from league.services.tournament_service import TournamentService

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    return " ".join(name.split()).casefold()


class PlayerService:
    def __init__(self, store: JsonDocumentStore, tournament_service: TournamentService, image_host: ImageHostClient):
        self.store = store
        self.tournament_service = tournament_service
        self.image_host = image_host

    def get_player(self, player_id: str) -> PlayerModel:
        return PlayerModel(**self.store.get_one(PLAYERS, player_id))

    def list_players(self, tournament_id: str, status: Optional[PlayerStatus] = None) -> List[PlayerModel]:
        """Players of a tournament, newest registration first."""
        filters = {"tournament_id": tournament_id}
        if status is not None:
            filters["status"] = PlayerStatus(status).value
        documents = self.store.get_all(PLAYERS, order_by="created_at", descending=True, **filters)
        return [PlayerModel(**d) for d in documents]

    def is_name_taken(self, tournament_id: str, display_name: str) -> bool:
        wanted = normalize_name(display_name)
        return any(
            normalize_name(d.get("display_name", "")) == wanted
            for d in self.store.get_all(PLAYERS, tournament_id=tournament_id)
        )

    async def register(
        self,
        tournament_id: str,
        display_name: str,
        real_name: str,
        avatar: bytes,
        avatar_filename: str = "avatar.png",
    ) -> PlayerModel:
        """
        Registers a pending player.
        The avatar is uploaded first; no player is stored if the upload fails.
        """
        tournament = self.tournament_service.require_tournament(tournament_id)
        if tournament.status != TournamentStatus.OPEN:
            raise TransitionNotAllowed(f"Registration is closed for {tournament.name}.")

        display_name = " ".join(display_name.split())
        if self.is_name_taken(tournament_id, display_name):
            raise DuplicateName(f"The name '{display_name}' is already registered.")

        # validate the fields before spending an upload on them
        player = PlayerModel(tournament_id=tournament_id, display_name=display_name, real_name=real_name.strip())
        avatar_url = await self.image_host.upload(avatar, avatar_filename)
        player = player.model_copy(update={"avatar_url": avatar_url})
        if self.is_name_taken(tournament_id, display_name):
            raise DuplicateName(f"The name '{display_name}' was registered while the avatar uploaded.")

        self.store.insert(PLAYERS, player.model_dump(mode="json"))
        logger.info("Registered player %s for tournament %s", player.display_name, tournament_id)
        return player

    def approve_player(self, player_id: str) -> PlayerModel:
        player = self.get_player(player_id)
        if player.status == PlayerStatus.APPROVED:
            raise WrongState(f"{player.display_name} is already approved.")

        tournament = self.tournament_service.require_tournament(player.tournament_id)
        if tournament.status != TournamentStatus.OPEN:
            raise TransitionNotAllowed("Players can only be approved before the draw.")
        approved_count = len(self.list_players(tournament.id, status=PlayerStatus.APPROVED))
        if approved_count >= tournament.capacity:
            raise CapacityReached(f"{tournament.name} already has {tournament.capacity} approved players.")

        self.store.update(PLAYERS, player_id, {"status": PlayerStatus.APPROVED.value})
        logger.info("Approved player %s", player.display_name)
        return player.model_copy(update={"status": PlayerStatus.APPROVED})

    def apply_delta(self, player_id: str, delta: StatDelta) -> PlayerModel:
        player = self.get_player(player_id).with_delta(delta)
        self.store.update(PLAYERS, player_id, {
            "points": player.points,
            "goals_for": player.goals_for,
            "goals_against": player.goals_against,
        })
        return player

    def mark_eliminated(self, player_ids: List[str]) -> None:
        if player_ids:
            self.store.update_many(PLAYERS, {pid: {"eliminated": True} for pid in player_ids})
