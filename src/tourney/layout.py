"""
Bracket layout: positions match cards of measured height in columns, centring
each card between the two matches that feed it, and draws the connectors.
"""
from typing import List, Dict

from tourney.errors import LayoutNotReady
from tourney.models import Round

CARD_WIDTH = 240
ROUND_GAP = 100
MIN_CARD_SPACING = 40


class Rect:
    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    @property
    def center_y(self):
        return self.y + self.height / 2

    def to_dict(self) -> Dict:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}

    def __repr__(self):
        return f"Rect(x={self.x}, y={self.y}, width={self.width}, height={self.height})"


class Segment:
    """A straight connector line from (x1, y1) to (x2, y2)."""

    def __init__(self, x1, y1, x2, y2):
        self.x1 = x1
        self.y1 = y1
        self.x2 = x2
        self.y2 = y2

    def to_dict(self) -> Dict:
        return {'x1': self.x1, 'y1': self.y1, 'x2': self.x2, 'y2': self.y2}

    def __eq__(self, other):
        return isinstance(other, Segment) and (self.x1, self.y1, self.x2, self.y2) == (other.x1, other.y1, other.x2, other.y2)

    def __repr__(self):
        return f"Segment(({self.x1}, {self.y1}) -> ({self.x2}, {self.y2}))"


class Pending:
    """Some match heights are still unknown."""
    ready = False

    def __init__(self, missing_ids):
        self.missing_ids = list(missing_ids)

    def require(self):
        raise LayoutNotReady(self.missing_ids)

    def __repr__(self):
        return f"Pending(missing={len(self.missing_ids)})"


class Ready:
    ready = True

    def __init__(self, rects, connectors, width, height):
        self.rects = rects
        self.connectors = connectors
        self.width = width
        self.height = height

    def require(self):
        return self

    def to_dict(self) -> Dict:
        return {
            'rects': {match_id: rect.to_dict() for match_id, rect in self.rects.items()},
            'connectors': [segment.to_dict() for segment in self.connectors],
            'width': self.width,
            'height': self.height,
        }

    def __repr__(self):
        return f"Ready(cards={len(self.rects)}, connectors={len(self.connectors)})"


def compute_layout(rounds: List[Round], heights: Dict[str, float], card_width=CARD_WIDTH,
                   round_gap=ROUND_GAP, min_spacing=MIN_CARD_SPACING):
    """
    Lay out a single elimination bracket.

    Returns ``Pending`` listing the match ids without a measured height, or
    ``Ready`` with a Rect per match id and the connector segments.
    """
    missing = [m.id for r in rounds for m in r.matches if m.id not in heights]
    if missing:
        return Pending(missing)
    if not rounds:
        return Ready({}, [], 0, 0)

    rects: Dict[str, Rect] = {}
    columns: List[List[Rect]] = []

    for round_index, round_ in enumerate(rounds):
        x = round_index * (card_width + round_gap)
        column = []
        if round_index == 0:
            y = 0
            for match in round_.matches:
                height = heights[match.id]
                column.append(Rect(x, y, card_width, height))
                y += height + min_spacing
        else:
            previous = columns[round_index - 1]
            for match_index, match in enumerate(round_.matches):
                height = heights[match.id]
                feeders = previous[match_index * 2:match_index * 2 + 2]
                if feeders:
                    center = sum(f.center_y for f in feeders) / len(feeders)
                    y = center - height / 2
                else:
                    y = match_index * (height + min_spacing)
                column.append(Rect(x, y, card_width, height))
        for match, rect in zip(round_.matches, column):
            rects[match.id] = rect
        columns.append(column)

    connectors = _connectors(columns, round_gap)
    width = (len(rounds) - 1) * (card_width + round_gap) + card_width
    height = max(rect.bottom for rect in rects.values()) if rects else 0
    return Ready(rects, connectors, width, height)


def _connectors(columns: List[List[Rect]], round_gap) -> List[Segment]:
    segments = []
    for round_index in range(len(columns) - 1):
        current = columns[round_index]
        following = columns[round_index + 1]
        for i in range(0, len(current), 2):
            child_index = i // 2
            if child_index >= len(following):
                break
            child = following[child_index]
            first = current[i]
            x1 = first.right
            x2 = child.x

            if i + 1 < len(current):
                second = current[i + 1]
                mid_x = x1 + round_gap / 2
                segments.extend([
                    Segment(x1, first.center_y, mid_x, first.center_y),
                    Segment(x1, second.center_y, mid_x, second.center_y),
                    Segment(mid_x, first.center_y, mid_x, second.center_y),
                    Segment(mid_x, child.center_y, x2, child.center_y),
                ])
            else:
                segments.append(Segment(x1, first.center_y, x2, child.center_y))
    return segments
