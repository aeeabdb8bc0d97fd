import random
from typing import Iterable, List, Optional

from golf_league.models.foursome_model import FOURSOME_SIZE, FoursomeModel

_default_rng = random.SystemRandom()


def partition_players(
    player_ids: Iterable[str],
    session_id: str,
    rng: Optional[random.Random] = None,
) -> List[FoursomeModel]:
    """
    Splits a session roster into foursomes.

    The roster is shuffled, then cut into consecutive groups of four, so the
    sizes come out as 4, 4, ..., r with 1 <= r <= 4. Groups are not balanced:
    nine players give 4, 4, 1. Numbering follows the shuffled order, so two
    runs over the same roster give different groupings.

    Pass a seeded ``random.Random`` as ``rng`` to get a repeatable result.
    Nothing is persisted here.
    """
    rng = rng or _default_rng
    roster = list(dict.fromkeys(player_ids))
    shuffled = rng.sample(roster, len(roster))

    foursomes: List[FoursomeModel] = []
    for start in range(0, len(shuffled), FOURSOME_SIZE):
        foursomes.append(FoursomeModel(
            session_id=session_id,
            foursome_number=start // FOURSOME_SIZE + 1,
            player_ids=shuffled[start:start + FOURSOME_SIZE],
        ))
    return foursomes
