import pytest

from league.core.exceptions import WrongState
from league.engine.standings import rank, rank_groups
from league.models import GroupModel

from conftest import make_player


class TestRank:

    def test_orders_by_points_first(self):
        low = make_player("low", points=1)
        high = make_player("high", points=9)
        mid = make_player("mid", points=4)
        assert [p.display_name for p in rank([low, high, mid])] == ["high", "mid", "low"]

    def test_goal_difference_breaks_points_tie(self):
        a = make_player("a", points=6, goals_for=5, goals_against=4) # +1
        b = make_player("b", points=6, goals_for=3, goals_against=0) # +3
        assert rank([a, b])[0] is b

    def test_goals_for_breaks_goal_difference_tie(self):
        a = make_player("a", points=4, goals_for=2, goals_against=1)
        b = make_player("b", points=4, goals_for=6, goals_against=5)
        assert [p.display_name for p in rank([a, b])] == ["b", "a"]

    def test_full_tie_keeps_input_order(self):
        first = make_player("first", points=3, goals_for=2, goals_against=2)
        second = make_player("second", points=3, goals_for=2, goals_against=2)
        assert rank([first, second]) == [first, second]
        assert rank([second, first]) == [second, first]

    def test_is_idempotent(self):
        players = [make_player(f"p{i}", points=i % 3, goals_for=i, goals_against=7 - i) for i in range(8)]
        once = rank(players)
        assert rank(players) == once
        assert rank(once) == once

    def test_does_not_mutate_input(self):
        players = [make_player("a", points=0), make_player("b", points=3)]
        snapshot = list(players)
        rank(players)
        assert players == snapshot


class TestRankGroups:

    def test_ranks_each_group_from_its_members(self):
        a1, a2 = make_player("a1", points=1), make_player("a2", points=3)
        b1, b2 = make_player("b1", points=7), make_player("b2", points=0)
        group_a = GroupModel(tournament_id="t", label="A", name="Group A", player_ids=[a1.id, a2.id])
        group_b = GroupModel(tournament_id="t", label="B", name="Group B", player_ids=[b1.id, b2.id])

        standings = rank_groups([group_a, group_b], [b2, a1, b1, a2])

        assert standings[group_a.id] == [a2, a1]
        assert standings[group_b.id] == [b1, b2]

    def test_tie_order_follows_group_membership(self):
        p1, p2 = make_player("x"), make_player("y")
        group = GroupModel(tournament_id="t", label="A", name="Group A", player_ids=[p2.id, p1.id])
        assert rank_groups([group], [p1, p2])[group.id] == [p2, p1]

    def test_unresolved_member_is_an_error(self):
        present, absent = make_player("here"), make_player("gone")
        group = GroupModel(tournament_id="t", label="A", name="Group A", player_ids=[present.id, absent.id])
        with pytest.raises(WrongState, match="Group A"):
            rank_groups([group], [present])
