"""
Tournament operations over a match store: creation, result entry with winner
advancement, and the derived bracket, standings and layout views.
"""
import logging
import random
from typing import List, Dict, Optional

from tourney.errors import TournamentError, TournamentExistsError
from tourney.generation import TournamentConfig, generate_structure, swap_competitor
from tourney.layout import compute_layout, CARD_WIDTH, ROUND_GAP, MIN_CARD_SPACING
from tourney.models import Competitor, Match, Round, Group, Team, STATUS_DRAFT, STATUS_FINISHED
from tourney.resolution import (
    advance_winner, champion, filter_visible, group_matches_by_round,
)
from tourney.standings import group_matches_by_group
from tourney.store import MatchStore

logger = logging.getLogger(__name__)


class TournamentService:
    def __init__(self, match_store: MatchStore, layout_settings: Optional[Dict] = None):
        self.match_store = match_store
        self.layout_settings = layout_settings or {}

    def create_tournament(self, competitors: List[Competitor], config: TournamentConfig,
                          rng: Optional[random.Random] = None) -> List[Match]:
        """Generate the whole structure, then store it in one bulk insert."""
        if config.name in self.match_store.list_tournaments():
            raise TournamentExistsError(config.name)
        matches = generate_structure(competitors, config, rng=rng)
        self.match_store.add_matches(matches)
        logger.info('Created tournament "%s" with %d matches', config.name, len(matches))
        return matches

    def update_match(self, match_id, **changes) -> Match:
        """
        Commit a match update and, if it is now finished with a winner,
        advance the winner downstream.

        Advancement failures are logged only: the committed result stands and
        ``resolve_tournament`` can redo the propagation later.
        """
        match = self.match_store.update_match(match_id, changes)
        if match.status == STATUS_FINISHED and match.winner_id is not None:
            self._advance(match)
        return match

    def edit_draft(self, match_id, slot: str, index: int, competitor: Competitor) -> Match:
        """Put ``competitor`` into a draft match, swapping positions if already in it."""
        match = self.match_store.get_match(match_id)
        if match.status != STATUS_DRAFT:
            raise ValueError(f"{match.match_name} is {match.status}; only draft matches can be edited")
        swap_competitor(match, slot, index, competitor)
        return self.match_store.update_match(match_id, {'slot_a': match.slot_a, 'slot_b': match.slot_b})

    def _advance(self, match: Match):
        try:
            siblings = self.match_store.get_matches(tournament_name=match.tournament_name)
            advancement = advance_winner(match, siblings)
            if advancement is not None:
                self.match_store.update_match(advancement.target_id, advancement.changes())
                logger.info("Advanced winner of %s to match %s (slot %s)",
                            match.match_name, advancement.target_id, advancement.slot)
            return advancement
        except TournamentError as e:
            logger.error("Failed to advance winner of %s: %s", match.match_name, e)
            return None

    def resolve_tournament(self, tournament_name: str) -> int:
        """Re-run advancement for every finished match in play order. Returns how many advanced."""
        advanced = 0
        rounds = group_matches_by_round(self.match_store.get_matches(tournament_name=tournament_name))
        for round_ in rounds:
            for match in round_.matches:
                if match.status == STATUS_FINISHED and match.winner_id is not None:
                    if self._advance(match) is not None:
                        advanced += 1
        return advanced

    def get_bracket(self, tournament_name: str, visible_statuses: Optional[Dict[str, bool]] = None) -> List[Round]:
        matches = [m for m in self.match_store.get_matches(tournament_name=tournament_name) if not m.group_name]
        if visible_statuses is not None:
            matches = filter_visible(matches, visible_statuses)
        return group_matches_by_round(matches)

    def get_groups(self, tournament_name: str, visible_statuses: Optional[Dict[str, bool]] = None) -> List[Group]:
        matches = self.match_store.get_matches(tournament_name=tournament_name)
        if visible_statuses is not None:
            matches = filter_visible(matches, visible_statuses)
        return group_matches_by_group(matches)

    def get_champion(self, tournament_name: str) -> Optional[Team]:
        return champion(self.get_bracket(tournament_name))

    def get_layout(self, tournament_name: str, heights: Dict[str, float]):
        return compute_layout(
            self.get_bracket(tournament_name),
            heights,
            card_width=self.layout_settings.get('card_width', CARD_WIDTH),
            round_gap=self.layout_settings.get('round_gap', ROUND_GAP),
            min_spacing=self.layout_settings.get('min_card_spacing', MIN_CARD_SPACING),
        )
