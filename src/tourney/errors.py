"""
Exceptions raised by the tournament engine.
"""


class TournamentError(Exception):
    """Base class for all engine errors."""


class InvalidShapeError(TournamentError):
    """Team count is not a power of two for a single elimination bracket."""

    def __init__(self, num_teams):
        self.num_teams = num_teams
        super().__init__(
            f"The number of teams ({num_teams}) must be a power of 2 (e.g., 4, 8, 16)."
        )


class InvalidGroupCountError(TournamentError):
    def __init__(self, num_groups):
        self.num_groups = num_groups
        super().__init__(f"The number of groups ({num_groups}) must be at least 1.")


class IncorrectPlayerCountError(TournamentError):
    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"You have selected {actual} players, but this tournament configuration requires {expected}."
        )


class InsufficientPlayersError(TournamentError):
    def __init__(self, actual, minimum=2):
        self.actual = actual
        self.minimum = minimum
        super().__init__(
            f"Need at least {minimum} players for a Battle Royale match, got {actual}."
        )


class StructuralLookupFailure(TournamentError):
    """Downstream match lookup found a dangling link or more than one target."""


class LayoutNotReady(TournamentError):
    """Not every match has a measured height yet; retry once they are known."""

    def __init__(self, missing_ids):
        self.missing_ids = list(missing_ids)
        super().__init__(f"Layout pending: {len(self.missing_ids)} match heights not measured")


class MatchNotFoundError(TournamentError):
    def __init__(self, match_id):
        self.match_id = match_id
        super().__init__(f"Match {match_id} not found.")


class TournamentExistsError(TournamentError):
    def __init__(self, name):
        self.name = name
        super().__init__(f'Tournament "{name}" already exists.')
