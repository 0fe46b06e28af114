import pytest

from league.core.exceptions import InvalidScore, WrongState
from league.engine import recorder
from league.models import MatchModel, MatchStage, MatchStatus, StatDelta

from conftest import make_player


def new_match(stage=MatchStage.GROUPS):
    p1, p2 = make_player("home"), make_player("away")
    return MatchModel(
        tournament_id="t",
        stage=stage,
        group_id="g" if stage == MatchStage.GROUPS else None,
        group_name="Group A" if stage == MatchStage.GROUPS else None,
        player1_id=p1.id,
        player2_id=p2.id,
        player1_name=p1.display_name,
        player2_name=p2.display_name,
    )


class TestReport:

    def test_moves_to_pending_approval_with_scores_and_evidence(self):
        reported = recorder.report(new_match(), 2, 1, "https://i.ibb.co/x/shot.png")
        assert reported.status == MatchStatus.PENDING_APPROVAL
        assert (reported.score1, reported.score2) == (2, 1)
        assert reported.evidence_url == "https://i.ibb.co/x/shot.png"

    def test_does_not_modify_original(self):
        match = new_match()
        recorder.report(match, 2, 1)
        assert match.status == MatchStatus.PENDING_RESULT
        assert match.score1 is None

    def test_second_report_is_wrong_state(self):
        reported = recorder.report(new_match(), 0, 0)
        with pytest.raises(WrongState):
            recorder.report(reported, 3, 0)

    @pytest.mark.parametrize("score1,score2", [(-1, 0), (0, -3), (1.5, 0), ("2", 1), (None, 1), (True, 0)])
    def test_invalid_scores(self, score1, score2):
        with pytest.raises(InvalidScore):
            recorder.report(new_match(), score1, score2)

    def test_knockout_draw_is_invalid(self):
        with pytest.raises(InvalidScore):
            recorder.report(new_match(MatchStage.KNOCKOUT), 1, 1)

    def test_group_draw_is_allowed(self):
        assert recorder.report(new_match(), 1, 1).status == MatchStatus.PENDING_APPROVAL


class TestApprove:

    def test_player1_win(self):
        approved, d1, d2 = recorder.approve(recorder.report(new_match(), 3, 1))
        assert approved.status == MatchStatus.APPROVED
        assert approved.winner_id == approved.player1_id
        assert d1 == StatDelta(points=3, goals_for=3, goals_against=1)
        assert d2 == StatDelta(points=0, goals_for=1, goals_against=3)

    def test_player2_win(self):
        approved, d1, d2 = recorder.approve(recorder.report(new_match(), 0, 2))
        assert approved.winner_id == approved.player2_id
        assert approved.loser_id == approved.player1_id
        assert (d1.points, d2.points) == (0, 3)

    def test_draw_awards_one_point_each(self):
        approved, d1, d2 = recorder.approve(recorder.report(new_match(), 2, 2))
        assert approved.winner_id is None
        assert d1 == StatDelta(points=1, goals_for=2, goals_against=2)
        assert d2 == StatDelta(points=1, goals_for=2, goals_against=2)

    def test_scores_are_never_null_after_approval(self):
        approved, _, _ = recorder.approve(recorder.report(new_match(), 0, 0))
        assert approved.score1 is not None and approved.score2 is not None

    def test_knockout_approval_changes_no_standings(self):
        approved, d1, d2 = recorder.approve(recorder.report(new_match(MatchStage.KNOCKOUT), 4, 2))
        assert approved.winner_id == approved.player1_id
        assert d1 == StatDelta() and d2 == StatDelta()

    def test_direct_entry_without_review(self):
        approved, d1, _ = recorder.approve(new_match(), 1, 0)
        assert approved.status == MatchStatus.APPROVED
        assert d1.points == 3

    def test_direct_entry_needs_scores(self):
        with pytest.raises(WrongState):
            recorder.approve(new_match())

    def test_admin_scores_replace_reported_ones(self):
        approved, d1, d2 = recorder.approve(recorder.report(new_match(), 1, 0), 1, 1)
        assert (approved.score1, approved.score2) == (1, 1)
        assert d1.points == d2.points == 1

    def test_cannot_approve_twice(self):
        approved, _, _ = recorder.approve(recorder.report(new_match(), 1, 0))
        with pytest.raises(WrongState):
            recorder.approve(approved)

    def test_direct_knockout_draw_is_invalid(self):
        with pytest.raises(InvalidScore):
            recorder.approve(new_match(MatchStage.KNOCKOUT), 2, 2)


class TestReject:

    def test_clears_pending_approval(self):
        reset = recorder.reject(recorder.report(new_match(), 2, 0, "https://x/y.png"))
        assert reset.status == MatchStatus.PENDING_RESULT
        assert reset.score1 is None and reset.score2 is None
        assert reset.evidence_url is None

    def test_clears_approved_result(self):
        approved, _, _ = recorder.approve(recorder.report(new_match(), 2, 0))
        reset = recorder.reject(approved)
        assert reset.status == MatchStatus.PENDING_RESULT
        assert reset.winner_id is None

    def test_nothing_to_reject(self):
        with pytest.raises(WrongState):
            recorder.reject(new_match())

    def test_rejected_match_can_be_reported_again(self):
        reset = recorder.reject(recorder.report(new_match(), 2, 0))
        assert recorder.report(reset, 0, 1).status == MatchStatus.PENDING_APPROVAL


class TestRoundTrip:

    @pytest.mark.parametrize("score1,score2", [(3, 0), (0, 4), (2, 2), (0, 0)])
    def test_reverse_then_reject_restores_stats(self, score1, score2):
        match = new_match()
        home = make_player("home", points=4, goals_for=5, goals_against=3)
        away = make_player("away", points=1, goals_for=2, goals_against=6)

        approved, d1, d2 = recorder.approve(recorder.report(match, score1, score2))
        home_after, away_after = home.with_delta(d1), away.with_delta(d2)

        r1, r2 = recorder.stat_deltas(approved)
        home_back, away_back = home_after.with_delta(r1.negated()), away_after.with_delta(r2.negated())
        recorder.reject(approved)

        assert (home_back.points, home_back.goals_for, home_back.goals_against) == (4, 5, 3)
        assert (away_back.points, away_back.goals_for, away_back.goals_against) == (1, 2, 6)

    def test_points_conservation(self):
        results = [(2, 1), (0, 0), (1, 3), (4, 4), (2, 0), (1, 1)]
        total = 0
        for s1, s2 in results:
            _, d1, d2 = recorder.approve(recorder.report(new_match(), s1, s2))
            total += d1.points + d2.points
        decisive = sum(1 for s1, s2 in results if s1 != s2)
        drawn = len(results) - decisive
        assert total == 3 * decisive + 2 * drawn
