import logging
import random
from collections import defaultdict
from typing import Dict, List, Optional

from league.core.exceptions import InsufficientPlayers, TransitionNotAllowed, WrongState
from league.engine import draw as draw_engine
from league.engine import recorder, seeding, standings
from league.models import (
    DrawResult,
    GroupModel,
    GroupStandings,
    KnockoutRound,
    MatchModel,
    MatchSeed,
    MatchStage,
    MatchStatus,
    PlayerModel,
    PlayerStatus,
    ProgressionSystem,
    TournamentConfig,
    TournamentProgress,
    TournamentStatus,
)
from league.services.image_host import ImageHostClient
from league.services.player_service import PlayerService
from league.services.store import GROUPS, MATCHES, PLAYERS, JsonDocumentStore
from league.services.tournament_service import TournamentService

logger = logging.getLogger(__name__)


class ProgressionService:
    """
    Runs a tournament through its lifecycle:
    open -> active (groups drawn) -> knockout (bracket seeded) -> finished.

    Every transition is triggered by an admin call. Each one checks its
    precondition first and raises before writing anything. Draw and seeding
    compute their whole plan up front, then write it in batches; a retried
    apply removes the partial output of the failed attempt first.
    """

    def __init__(
        self,
        store: JsonDocumentStore,
        tournament_service: TournamentService,
        player_service: PlayerService,
        image_host: ImageHostClient,
        require_review: bool = True,
        min_players: int = draw_engine.MIN_PLAYERS,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.tournament_service = tournament_service
        self.player_service = player_service
        self.image_host = image_host
        self.require_review = require_review
        self.min_players = min_players
        self.rng = rng

    # --- Reads ---

    def get_match(self, match_id: str) -> MatchModel:
        return MatchModel(**self.store.get_one(MATCHES, match_id))

    def list_matches(
        self,
        tournament_id: str,
        stage: Optional[MatchStage] = None,
        group_id: Optional[str] = None,
        status: Optional[MatchStatus] = None,
    ) -> List[MatchModel]:
        filters = {"tournament_id": tournament_id}
        if stage is not None:
            filters["stage"] = MatchStage(stage).value
        if group_id is not None:
            filters["group_id"] = group_id
        if status is not None:
            filters["status"] = MatchStatus(status).value
        return [MatchModel(**d) for d in self.store.get_all(MATCHES, order_by="created_at", **filters)]

    def list_groups(self, tournament_id: str) -> List[GroupModel]:
        groups = [GroupModel(**d) for d in self.store.get_all(GROUPS, tournament_id=tournament_id)]
        return sorted(groups, key=lambda g: g.label)

    def group_standings(self, tournament_id: str) -> List[GroupStandings]:
        groups = self.list_groups(tournament_id)
        players = self.player_service.list_players(tournament_id, status=PlayerStatus.APPROVED)
        ranked = standings.rank_groups(groups, players)
        return [GroupStandings(group=g, players=ranked[g.id]) for g in groups]

    def bracket(self, tournament_id: str) -> List[KnockoutRound]:
        rounds: Dict[int, List[MatchModel]] = defaultdict(list)
        for match in self.list_matches(tournament_id, stage=MatchStage.KNOCKOUT):
            rounds[match.round_number].append(match)
        return [
            KnockoutRound(round_number=number, matches=sorted(matches, key=lambda m: m.match_in_round))
            for number, matches in sorted(rounds.items())
        ]

    def progress(self, tournament_id: str) -> TournamentProgress:
        tournament = self.tournament_service.require_tournament(tournament_id)
        matches = self.list_matches(tournament_id)
        group_matches = [m for m in matches if m.stage == MatchStage.GROUPS]
        approved = [m for m in group_matches if m.status == MatchStatus.APPROVED]
        knockout_rounds = [m.round_number for m in matches if m.stage == MatchStage.KNOCKOUT]
        return TournamentProgress(
            tournament_id=tournament.id,
            status=TournamentStatus(tournament.status).value,
            group_matches_total=len(group_matches),
            group_matches_approved=len(approved),
            matches_awaiting_approval=sum(1 for m in matches if m.status == MatchStatus.PENDING_APPROVAL),
            knockout_ready=(
                tournament.status == TournamentStatus.ACTIVE
                and bool(group_matches)
                and len(approved) == len(group_matches)
            ),
            current_knockout_round=max(knockout_rounds) if knockout_rounds else None,
            champion_id=tournament.champion_id,
        )

    # --- Transitions ---

    def draw(self, tournament_id: str) -> DrawResult:
        tournament = self.tournament_service.require_tournament(tournament_id)
        if tournament.status != TournamentStatus.OPEN:
            raise TransitionNotAllowed(f"The draw was already made (status: {tournament.status}).")

        approved = self.player_service.list_players(tournament_id, status=PlayerStatus.APPROVED)
        # oldest registration first, so the shuffle sees a stable input
        approved.reverse()
        if len(approved) < tournament.capacity:
            raise InsufficientPlayers(
                f"{len(approved)} of {tournament.capacity} players are approved; the draw needs all of them."
            )

        if tournament.progression_system == ProgressionSystem.KNOCKOUT_ONLY:
            seeds = seeding.seed_players(approved, self.rng)
            matches = self._apply_knockout_plan(tournament, seeds)
            self.tournament_service.update_tournament_status(tournament_id, TournamentStatus.KNOCKOUT)
            logger.info("Seeded knockout-only bracket for %s: %d matches", tournament.name, len(matches))
            return DrawResult(matches=matches)

        groups, fixtures = draw_engine.draw(approved, tournament.group_size, self.rng, min_players=self.min_players)
        matches = self._apply_group_plan(tournament, groups, fixtures)
        self.tournament_service.update_tournament_status(tournament_id, TournamentStatus.ACTIVE)
        logger.info(
            "Drew %d groups and %d fixtures for %s", len(groups), len(matches), tournament.name
        )
        return DrawResult(groups=groups, matches=matches)

    def seed_knockout(self, tournament_id: str) -> List[MatchModel]:
        tournament = self.tournament_service.require_tournament(tournament_id)
        if tournament.progression_system != ProgressionSystem.ROUND_ROBIN_KNOCKOUT:
            raise TransitionNotAllowed("This tournament has no group stage to seed from.")
        if tournament.status != TournamentStatus.ACTIVE:
            raise TransitionNotAllowed(f"Knockout seeding needs an active group stage (status: {tournament.status}).")

        group_matches = self.list_matches(tournament_id, stage=MatchStage.GROUPS)
        unresolved = [m for m in group_matches if m.status != MatchStatus.APPROVED]
        if unresolved:
            raise TransitionNotAllowed(f"{len(unresolved)} group matches are not approved yet.")

        groups = self.list_groups(tournament_id)
        players = self.player_service.list_players(tournament_id, status=PlayerStatus.APPROVED)
        ranked = standings.rank_groups(groups, players)
        seeds = seeding.seed(groups, ranked, tournament.qualifiers_per_group, self.rng)

        matches = self._apply_knockout_plan(tournament, seeds)
        qualified = {s.player1_id for s in seeds} | {s.player2_id for s in seeds}
        self.player_service.mark_eliminated([p.id for p in players if p.id not in qualified])
        self.tournament_service.update_tournament_status(tournament_id, TournamentStatus.KNOCKOUT)
        logger.info("Seeded knockout for %s: %d qualifiers", tournament.name, len(qualified))
        return matches

    async def report_result(
        self,
        match_id: str,
        score1: int,
        score2: int,
        evidence: Optional[bytes] = None,
        evidence_filename: str = "result.png",
    ) -> MatchModel:
        """
        Player-side result submission.
        The screenshot, when given, is uploaded before the match changes; a
        failed upload leaves the match untouched.
        """
        match = self.get_match(match_id)
        self._check_stage_open(match)
        # fail on a bad score or a double submission before uploading anything
        recorder.report(match, score1, score2)

        evidence_url = None
        if evidence:
            evidence_url = await self.image_host.upload(evidence, evidence_filename)

        # the match may have changed while the upload was in flight
        match = self.get_match(match_id)
        self._check_stage_open(match)
        reported = recorder.report(match, score1, score2, evidence_url)
        self._save_match(reported)
        logger.info("Result %s-%s reported for match %s", score1, score2, match_id)

        if not self.require_review:
            return self.approve_result(match_id)
        return reported

    def approve_result(self, match_id: str, score1: Optional[int] = None, score2: Optional[int] = None) -> MatchModel:
        match = self.get_match(match_id)
        tournament = self._check_stage_open(match)

        approved, delta1, delta2 = recorder.approve(match, score1, score2)
        self._save_match(approved)
        if approved.stage == MatchStage.GROUPS:
            self.player_service.apply_delta(approved.player1_id, delta1)
            self.player_service.apply_delta(approved.player2_id, delta2)
        logger.info("Approved result %s-%s for match %s", approved.score1, approved.score2, match_id)

        if approved.stage == MatchStage.KNOCKOUT:
            self._advance_knockout(tournament)
        return approved

    def reject_result(self, match_id: str) -> MatchModel:
        """
        Sends a result back to pending_result.
        An approved group result has its stat deltas reversed first.
        """
        match = self.get_match(match_id)
        self._check_stage_open(match)

        if match.status == MatchStatus.APPROVED:
            if match.stage == MatchStage.GROUPS:
                delta1, delta2 = recorder.stat_deltas(match)
                self.player_service.apply_delta(match.player1_id, delta1.negated())
                self.player_service.apply_delta(match.player2_id, delta2.negated())
            else:
                later = [
                    m for m in self.list_matches(match.tournament_id, stage=MatchStage.KNOCKOUT)
                    if m.round_number > match.round_number
                ]
                if later:
                    raise WrongState("The next knockout round was already drawn from this result.")

        reset = recorder.reject(match)
        self._save_match(reset)
        logger.info("Rejected result for match %s", match_id)
        return reset

    # --- Internals ---

    def _check_stage_open(self, match: MatchModel) -> TournamentConfig:
        tournament = self.tournament_service.require_tournament(match.tournament_id)
        expected = TournamentStatus.ACTIVE if match.stage == MatchStage.GROUPS else TournamentStatus.KNOCKOUT
        if tournament.status != expected:
            raise WrongState(f"{match.stage} results cannot change while the tournament is {tournament.status}.")
        return tournament

    def _save_match(self, match: MatchModel) -> None:
        self.store.update(MATCHES, match.id, match.model_dump(mode="json"))

    def _apply_group_plan(
        self, tournament: TournamentConfig, groups: List[GroupModel], fixtures: List[MatchSeed]
    ) -> List[MatchModel]:
        self.store.delete_where(GROUPS, tournament_id=tournament.id)
        self.store.delete_where(MATCHES, tournament_id=tournament.id, stage=MatchStage.GROUPS.value)

        matches = [MatchModel.from_seed(seed, tournament.id) for seed in fixtures]
        self.store.insert_many(GROUPS, [g.model_dump(mode="json") for g in groups])
        self.store.update_many(PLAYERS, {
            pid: {"group_id": g.id, "group_name": g.name} for g in groups for pid in g.player_ids
        })
        self.store.insert_many(MATCHES, [m.model_dump(mode="json") for m in matches])
        return matches

    def _apply_knockout_plan(self, tournament: TournamentConfig, seeds: List[MatchSeed]) -> List[MatchModel]:
        self.store.delete_where(MATCHES, tournament_id=tournament.id, stage=MatchStage.KNOCKOUT.value)
        matches = [MatchModel.from_seed(seed, tournament.id) for seed in seeds]
        self.store.insert_many(MATCHES, [m.model_dump(mode="json") for m in matches])
        return matches

    def _advance_knockout(self, tournament: TournamentConfig) -> None:
        """Opens the next knockout round, or crowns the champion, once the current round is complete."""
        knockout = self.list_matches(tournament.id, stage=MatchStage.KNOCKOUT)
        current = max(m.round_number for m in knockout)
        round_matches = sorted((m for m in knockout if m.round_number == current), key=lambda m: m.match_in_round)
        if any(m.status != MatchStatus.APPROVED for m in round_matches):
            return

        self.player_service.mark_eliminated([m.loser_id for m in round_matches])
        entrant_ids = [m.winner_id for m in round_matches]
        if tournament.knockout_bye_id:
            entrant_ids.append(tournament.knockout_bye_id)

        if len(entrant_ids) == 1:
            champion = self.player_service.get_player(entrant_ids[0])
            self.tournament_service.update_tournament_status(
                tournament.id, TournamentStatus.FINISHED, champion_id=champion.id, knockout_bye_id=None
            )
            logger.info("%s won %s", champion.display_name, tournament.name)
            return

        entrants: List[PlayerModel] = [self.player_service.get_player(pid) for pid in entrant_ids]
        seeds, bye = seeding.next_round(entrants, current + 1)
        matches = [MatchModel.from_seed(seed, tournament.id) for seed in seeds]
        self.store.insert_many(MATCHES, [m.model_dump(mode="json") for m in matches])
        self.tournament_service.update_tournament(tournament.id, knockout_bye_id=bye.id if bye else None)
        logger.info("Knockout round %d drawn for %s with %d matches", current + 1, tournament.name, len(matches))
