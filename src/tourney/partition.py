"""
Splitting a selected roster into fixed-size teams.
"""
import random
from typing import List, Optional

from tourney.models import Competitor, Team


def partition_teams(competitors: List[Competitor], team_size: int = 1, shuffle: bool = False,
                    rng: Optional[random.Random] = None) -> List[Team]:
    """
    Chunk competitors into consecutive teams of ``team_size``.

    When ``shuffle`` is set the list is uniformly permuted first. A count that
    is not a multiple of ``team_size`` leaves a short final team; the structure
    generator rejects that.
    """
    players = list(competitors)
    if shuffle:
        (rng or random).shuffle(players)
    return [Team(players[i:i + team_size]) for i in range(0, len(players), team_size)]
