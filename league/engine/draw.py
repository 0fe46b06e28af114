import random
import string
from itertools import combinations
from typing import List, Optional, Sequence, Tuple, TypeVar

from league.core.exceptions import InsufficientPlayers, LeagueError, WrongState
from league.models import GroupModel, MatchSeed, MatchStage, PlayerModel, PlayerStatus

MIN_PLAYERS = 4
GROUP_LABELS = string.ascii_uppercase

T = TypeVar("T")


def shuffled(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Returns a uniformly shuffled copy (random.shuffle is a Fisher-Yates shuffle)."""
    pool = list(items)
    (rng or random).shuffle(pool)
    return pool


def group_label(index: int) -> str:
    # Past 26 groups the labels wrap around and repeat.
    return GROUP_LABELS[index % len(GROUP_LABELS)]


def round_robin(group: GroupModel, members: Sequence[PlayerModel]) -> List[MatchSeed]:
    """One fixture per unordered pair of members: n*(n-1)/2 for a group of n."""
    return [
        MatchSeed(
            stage=MatchStage.GROUPS,
            group_id=group.id,
            group_name=group.name,
            player1_id=p1.id,
            player2_id=p2.id,
            player1_name=p1.display_name,
            player2_name=p2.display_name,
        )
        for p1, p2 in combinations(members, 2)
    ]


def draw(
    approved_players: Sequence[PlayerModel],
    group_size: int,
    rng: Optional[random.Random] = None,
    min_players: int = MIN_PLAYERS,
) -> Tuple[List[GroupModel], List[MatchSeed]]:
    """
    Splits the approved pool into groups and lists every group fixture.

    The pool is shuffled, then cut into consecutive chunks of ``group_size``;
    the last group is smaller when the pool does not divide evenly.
    Nothing is persisted here.
    """
    if group_size < 2:
        raise LeagueError("group_size must be at least 2")

    required = max(group_size, min_players)
    if len(approved_players) < required:
        raise InsufficientPlayers(
            f"At least {required} approved players are needed for the draw, got {len(approved_players)}."
        )

    for player in approved_players:
        if player.status != PlayerStatus.APPROVED:
            raise WrongState(f"Player {player.display_name} is not approved")

    tournament_id = approved_players[0].tournament_id
    pool = shuffled(approved_players, rng)

    groups: List[GroupModel] = []
    fixtures: List[MatchSeed] = []
    for index, start in enumerate(range(0, len(pool), group_size)):
        chunk = pool[start:start + group_size]
        label = group_label(index)
        group = GroupModel(
            tournament_id=tournament_id,
            label=label,
            name=f"Group {label}",
            player_ids=[p.id for p in chunk],
        )
        groups.append(group)
        fixtures.extend(round_robin(group, chunk))

    return groups, fixtures
