import random
from typing import Dict, List, Optional, Sequence, Tuple

from league.core.exceptions import NotEnoughQualifiers, OddQualifierCount
from league.engine.draw import shuffled
from league.models import GroupModel, MatchSeed, MatchStage, PlayerModel


def qualifiers(
    groups: Sequence[GroupModel],
    standings: Dict[str, List[PlayerModel]],
    qualifiers_per_group: int,
) -> List[PlayerModel]:
    """The top ``qualifiers_per_group`` of every group, group by group."""
    advancing: List[PlayerModel] = []
    for group in groups:
        ranked = standings.get(group.id, [])
        if len(ranked) < qualifiers_per_group:
            raise NotEnoughQualifiers(
                f"{group.name} has {len(ranked)} ranked players, {qualifiers_per_group} must qualify."
            )
        advancing.extend(ranked[:qualifiers_per_group])
    return advancing


def pair_off(players: Sequence[PlayerModel], round_number: int = 1) -> List[MatchSeed]:
    """Pairs consecutive players: (0, 1), (2, 3), ... The count must be even."""
    if len(players) % 2:
        raise OddQualifierCount(f"Cannot pair {len(players)} players into knockout matches.")
    return [
        MatchSeed(
            stage=MatchStage.KNOCKOUT,
            round_number=round_number,
            match_in_round=index // 2 + 1,
            player1_id=players[index].id,
            player2_id=players[index + 1].id,
            player1_name=players[index].display_name,
            player2_name=players[index + 1].display_name,
        )
        for index in range(0, len(players), 2)
    ]


def seed_players(players: Sequence[PlayerModel], rng: Optional[random.Random] = None) -> List[MatchSeed]:
    """Random first knockout round from a pool of players."""
    if len(players) < 2:
        raise NotEnoughQualifiers("A knockout bracket needs at least two players.")
    if len(players) % 2:
        raise OddQualifierCount(f"{len(players)} players cannot be paired without a bye.")
    return pair_off(shuffled(players, rng), round_number=1)


def seed(
    groups: Sequence[GroupModel],
    standings: Dict[str, List[PlayerModel]],
    qualifiers_per_group: int,
    rng: Optional[random.Random] = None,
) -> List[MatchSeed]:
    """First knockout round from the group standings."""
    return seed_players(qualifiers(groups, standings, qualifiers_per_group), rng)


def next_round(entrants: Sequence[PlayerModel], round_number: int) -> Tuple[List[MatchSeed], Optional[PlayerModel]]:
    """
    Pairs the survivors of a knockout round in bracket order.

    With an odd number of entrants the last one is left unpaired and returned
    as the bye, to be added to the entrants of the following round.
    """
    bye = None
    if len(entrants) % 2:
        entrants, bye = list(entrants[:-1]), entrants[-1]
    return pair_off(entrants, round_number=round_number), bye
