import random
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from league.core.security import get_current_admin
from league.main import app
from league.models import PlayerModel, PlayerStatus
from league.routes import dependencies
from league.services.image_host import ImageHostClient
from league.services.player_service import PlayerService
from league.services.progression_service import ProgressionService
from league.services.store import JsonDocumentStore
from league.services.tournament_service import TournamentService

TOURNAMENT_ID = "tournament-test"


def make_player(name, points=0, goals_for=0, goals_against=0, tournament_id=TOURNAMENT_ID, status=PlayerStatus.APPROVED):
    return PlayerModel(
        id=f"player-{name}-{uuid.uuid4().hex[:6]}",
        tournament_id=tournament_id,
        display_name=name,
        real_name=f"{name} Real",
        status=status,
        points=points,
        goals_for=goals_for,
        goals_against=goals_against,
    )


@pytest.fixture
def players_factory():
    def _make(count, tournament_id=TOURNAMENT_ID):
        return [make_player(f"P{i}", tournament_id=tournament_id) for i in range(count)]
    return _make


@pytest.fixture
def store(tmp_path):
    return JsonDocumentStore(str(tmp_path / "data"))


@pytest.fixture
def mock_image_host():
    host = MagicMock(spec=ImageHostClient)
    host.upload = AsyncMock(return_value="https://i.ibb.co/test/image.png")
    return host


@pytest.fixture
def tournament_service(store):
    return TournamentService(store)


@pytest.fixture
def player_service(store, tournament_service, mock_image_host):
    return PlayerService(store, tournament_service, mock_image_host)


@pytest.fixture
def progression_service(store, tournament_service, player_service, mock_image_host):
    return ProgressionService(
        store,
        tournament_service,
        player_service,
        mock_image_host,
        rng=random.Random(1234),
    )


ADMIN = "admin"


@pytest.fixture
def api_client(tournament_service, player_service, progression_service):
    """TestClient wired to the tmp-path services, with the admin already logged in."""
    app.dependency_overrides[dependencies.get_tournament_service] = lambda: tournament_service
    app.dependency_overrides[dependencies.get_player_service] = lambda: player_service
    app.dependency_overrides[dependencies.get_progression_service] = lambda: progression_service
    app.dependency_overrides[get_current_admin] = lambda: ADMIN
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(api_client):
    del app.dependency_overrides[get_current_admin]
    return api_client
