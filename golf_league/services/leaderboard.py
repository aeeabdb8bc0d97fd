from typing import Iterable, List, Sequence

from golf_league.models.score_model import (
    BACK_NINE,
    FRONT_NINE,
    LeaderboardEntry,
    ScorecardModel,
    ScorecardStatus,
)


def total(holes: Sequence[int]) -> int:
    return sum(holes)


def front_nine(holes: Sequence[int]) -> int:
    """Holes 1-9 ("out")."""
    return sum(holes[FRONT_NINE])


def back_nine(holes: Sequence[int]) -> int:
    """Holes 10-18 ("in")."""
    return sum(holes[BACK_NINE])


def rank_scorecards(scorecards: Iterable[ScorecardModel]) -> List[ScorecardModel]:
    """Lowest total first; equal totals are ordered by player id."""
    return sorted(scorecards, key=lambda card: (card.total_score, card.player_id))


def build_leaderboard(scorecards: Iterable[ScorecardModel], include_drafts: bool = False) -> List[LeaderboardEntry]:
    """
    Ranks a session's scorecards.

    Only submitted cards are ranked unless ``include_drafts`` is set. Ties
    share a rank and the next rank skips (1, 2, 2, 4).
    """
    eligible = [
        card for card in scorecards
        if include_drafts or card.status == ScorecardStatus.SUBMITTED
    ]

    entries: List[LeaderboardEntry] = []
    previous_total = None
    rank = 0
    for position, card in enumerate(rank_scorecards(eligible), start=1):
        if card.total_score != previous_total:
            rank = position
            previous_total = card.total_score
        entries.append(LeaderboardEntry(
            rank=rank,
            player_id=card.player_id,
            foursome_id=card.foursome_id,
            total_score=card.total_score,
            front_nine=front_nine(card.holes),
            back_nine=back_nine(card.holes),
            status=card.status,
        ))
    return entries
