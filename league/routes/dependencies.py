from functools import lru_cache

from league.core.config import settings
from league.services.image_host import ImageHostClient
from league.services.player_service import PlayerService
from league.services.progression_service import ProgressionService
from league.services.store import JsonDocumentStore
from league.services.tournament_service import TournamentService


@lru_cache
def get_store() -> JsonDocumentStore:
    return JsonDocumentStore(settings.DATA_DIR)


@lru_cache
def get_image_host() -> ImageHostClient:
    return ImageHostClient()


def get_tournament_service() -> TournamentService:
    return TournamentService(get_store())


def get_player_service() -> PlayerService:
    return PlayerService(get_store(), get_tournament_service(), get_image_host())


def get_progression_service() -> ProgressionService:
    return ProgressionService(
        get_store(),
        get_tournament_service(),
        get_player_service(),
        get_image_host(),
        require_review=settings.REQUIRE_RESULT_REVIEW,
        min_players=settings.MIN_PLAYERS,
    )
