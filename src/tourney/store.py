"""
YAML-backed roster and match stores.

Each store is a single YAML file guarded by a FileLock, so a read-then-write
of one record is atomic across processes sharing the data directory.
"""
import logging
import os
from typing import Callable, List, Optional

import yaml
from filelock import FileLock

from tourney.errors import MatchNotFoundError
from tourney.models import Competitor, Match, MATCH_STATUSES

logger = logging.getLogger(__name__)

LOCK_TIMEOUT = 10

UPDATABLE_FIELDS = {
    'status', 'winner_id', 'score',
    'slot_a', 'slot_b', 'placeholder_a', 'placeholder_b',
}


class RosterStore:
    """Competitors listed in a YAML file under a top-level ``competitors`` key."""

    def __init__(self, path):
        self.path = path

    def get_competitors(self, **filters) -> List[Competitor]:
        """All competitors, optionally filtered by attribute equality (e.g. branch='North')."""
        if not os.path.exists(self.path):
            return []
        with open(self.path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        competitors = []
        for entry in data.get('competitors', []):
            competitor = Competitor.from_dict(entry)
            if all(competitor.attributes.get(k) == v for k, v in filters.items()):
                competitors.append(competitor)
        return competitors

    def save_competitors(self, competitors: List[Competitor]):
        os.makedirs(os.path.dirname(self.path) or '.', exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            yaml.dump({'competitors': [c.to_dict() for c in competitors]}, f,
                      default_flow_style=False, allow_unicode=True)


class MatchStore:
    """All matches of every tournament, stored as a list of plain records."""

    def __init__(self, path):
        self.path = path
        os.makedirs(os.path.dirname(self.path) or '.', exist_ok=True)
        self._lock = FileLock(f"{self.path}.lock", timeout=LOCK_TIMEOUT)
        self._subscribers: List[Callable[[List[Match]], None]] = []

    def _read(self) -> List[dict]:
        if not os.path.exists(self.path):
            return []
        with open(self.path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        if not data:
            return []
        return data.get('matches', [])

    def _write(self, records: List[dict]):
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            yaml.dump({'matches': records}, f, default_flow_style=False, allow_unicode=True)
        os.replace(tmp_path, self.path)

    def _notify(self, records: List[dict]):
        if not self._subscribers:
            return
        matches = [Match.from_dict(r) for r in records]
        for callback in list(self._subscribers):
            callback(matches)

    def subscribe(self, callback: Callable[[List[Match]], None]) -> Callable[[], None]:
        """Call ``callback`` with every match after each committed write. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def add_matches(self, matches: List[Match]):
        """Insert all matches in one write."""
        with self._lock:
            records = self._read()
            records.extend(m.to_dict() for m in matches)
            self._write(records)
        logger.info("Stored %d matches", len(matches))
        self._notify(records)

    def get_matches(self, tournament_name: Optional[str] = None, game: Optional[str] = None) -> List[Match]:
        matches = [Match.from_dict(r) for r in self._read()]
        if tournament_name is not None:
            matches = [m for m in matches if m.tournament_name == tournament_name]
        if game is not None:
            matches = [m for m in matches if m.game == game]
        return matches

    def get_match(self, match_id) -> Match:
        for record in self._read():
            if record['id'] == match_id:
                return Match.from_dict(record)
        raise MatchNotFoundError(match_id)

    def update_match(self, match_id, changes: dict) -> Match:
        """Apply field changes to one match under the lock and return it."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        if 'status' in changes and changes['status'] not in MATCH_STATUSES:
            raise ValueError(f"Unknown status: {changes['status']}")

        with self._lock:
            records = self._read()
            for index, record in enumerate(records):
                if record['id'] == match_id:
                    match = Match.from_dict(record)
                    for field, value in changes.items():
                        if field == 'score':
                            value = tuple(value)
                        elif field == 'winner_id' and value is not None:
                            value = str(value)
                        setattr(match, field, value)
                    records[index] = match.to_dict()
                    self._write(records)
                    break
            else:
                raise MatchNotFoundError(match_id)
        self._notify(records)
        return match

    def list_tournaments(self) -> List[str]:
        names = []
        for record in self._read():
            name = record.get('tournament_name', '')
            if name not in names:
                names.append(name)
        return names

    def delete_tournament(self, tournament_name: str) -> int:
        """Remove every match of a tournament. Returns how many were deleted."""
        with self._lock:
            records = self._read()
            kept = [r for r in records if r.get('tournament_name') != tournament_name]
            removed = len(records) - len(kept)
            if removed:
                self._write(kept)
        if removed:
            logger.info("Deleted %d matches of %s", removed, tournament_name)
            self._notify(kept)
        return removed
