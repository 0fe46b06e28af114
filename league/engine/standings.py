from typing import Dict, Iterable, List, Tuple

from league.core.exceptions import WrongState
from league.models import GroupModel, PlayerModel


def standings_key(player: PlayerModel) -> Tuple[int, int, int]:
    # points, then goal difference, then goals scored; all descending
    return (-player.points, -player.goal_difference, -player.goals_for)


def rank(players: Iterable[PlayerModel]) -> List[PlayerModel]:
    """
    Orders players best first.
    Players level on every criterion keep their input order (sorted() is stable),
    so ranking the same input twice always gives the same table.
    """
    return sorted(players, key=standings_key)


def rank_groups(groups: List[GroupModel], players: Iterable[PlayerModel]) -> Dict[str, List[PlayerModel]]:
    """Ranks each group's members, starting from the order they were drawn in."""
    by_id = {p.id: p for p in players}
    standings: Dict[str, List[PlayerModel]] = {}
    for group in groups:
        missing = [pid for pid in group.player_ids if pid not in by_id]
        if missing:
            raise WrongState(f"{group.name} lists {len(missing)} players that are not approved members of the tournament.")
        members = [by_id[pid] for pid in group.player_ids]
        standings[group.id] = rank(members)
    return standings
