from .player_model import PlayerModel, PlayerStatus, StatDelta
from .group_model import GroupModel
from .match_model import MatchModel, MatchSeed, MatchStage, MatchStatus
from .tournament_model import ProgressionSystem, TournamentConfig, TournamentStatus
from .progress_model import DrawResult, GroupStandings, KnockoutRound, TournamentProgress
