from typing import Any, Optional, Tuple

from league.core.exceptions import InvalidScore, WrongState
from league.models import MatchModel, MatchStage, MatchStatus, StatDelta

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1
POINTS_FOR_LOSS = 0


def validate_score(value: Any) -> int:
    # bool is an int subclass but never a score
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidScore(f"Score must be a whole number, got {value!r}.")
    if value < 0:
        raise InvalidScore(f"Score cannot be negative, got {value}.")
    return value


def _validate_pair(match: MatchModel, score1: Any, score2: Any) -> Tuple[int, int]:
    score1 = validate_score(score1)
    score2 = validate_score(score2)
    if match.stage == MatchStage.KNOCKOUT and score1 == score2:
        raise InvalidScore("A knockout match needs a winner; scores cannot be equal.")
    return score1, score2


def _updated(match: MatchModel, **changes) -> MatchModel:
    # re-validate so the paired-scores invariant is checked on every transition
    return MatchModel.model_validate({**match.model_dump(), **changes})


def points_for(own: int, other: int) -> int:
    if own > other:
        return POINTS_FOR_WIN
    if own == other:
        return POINTS_FOR_DRAW
    return POINTS_FOR_LOSS


def winner_of(match: MatchModel) -> Optional[str]:
    if match.score1 is None or match.score1 == match.score2:
        return None
    return match.player1_id if match.score1 > match.score2 else match.player2_id


def stat_deltas(match: MatchModel) -> Tuple[StatDelta, StatDelta]:
    """
    Stat changes for player 1 and player 2 from the match's scores.
    Knockout results never touch standings, so they yield empty deltas.
    """
    if match.score1 is None or match.score2 is None:
        raise WrongState("Match has no result to score.")
    if match.stage != MatchStage.GROUPS:
        return StatDelta(), StatDelta()
    return (
        StatDelta(points=points_for(match.score1, match.score2), goals_for=match.score1, goals_against=match.score2),
        StatDelta(points=points_for(match.score2, match.score1), goals_for=match.score2, goals_against=match.score1),
    )


def report(match: MatchModel, score1: Any, score2: Any, evidence_url: Optional[str] = None) -> MatchModel:
    """pending_result -> pending_approval, attaching scores and evidence."""
    if match.status != MatchStatus.PENDING_RESULT:
        raise WrongState(f"A result for this match was already submitted (status: {match.status}).")
    score1, score2 = _validate_pair(match, score1, score2)
    return _updated(
        match,
        score1=score1,
        score2=score2,
        evidence_url=evidence_url,
        status=MatchStatus.PENDING_APPROVAL,
    )


def approve(match: MatchModel, score1: Any = None, score2: Any = None) -> Tuple[MatchModel, StatDelta, StatDelta]:
    """
    Confirms a result and returns the stat deltas for both players.

    A ``pending_approval`` match is approved with its reported scores unless
    replacement scores are given. A ``pending_result`` match can be approved
    directly (no review) only when both scores are given.
    Player records are not touched; applying the deltas is the caller's job.
    """
    if match.status == MatchStatus.APPROVED:
        raise WrongState("Match result is already approved.")

    has_scores = score1 is not None or score2 is not None
    if match.status == MatchStatus.PENDING_RESULT and not has_scores:
        raise WrongState("No result has been reported for this match.")

    if has_scores:
        score1, score2 = _validate_pair(match, score1, score2)
    else:
        score1, score2 = match.score1, match.score2

    approved = _updated(match, score1=score1, score2=score2, status=MatchStatus.APPROVED)
    approved = approved.model_copy(update={"winner_id": winner_of(approved)})
    delta1, delta2 = stat_deltas(approved)
    return approved, delta1, delta2


def reject(match: MatchModel) -> MatchModel:
    """
    Resets a submitted or approved result back to pending_result.

    Rejecting an approved group result leaves standings wrong unless the
    caller has already applied the negated deltas from ``stat_deltas``.
    """
    if match.status == MatchStatus.PENDING_RESULT:
        raise WrongState("There is no submitted result to reject.")
    return _updated(
        match,
        score1=None,
        score2=None,
        evidence_url=None,
        winner_id=None,
        status=MatchStatus.PENDING_RESULT,
    )
