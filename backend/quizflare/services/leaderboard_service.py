from typing import List, Optional, Sequence

from quizflare.schemas.quiz import LeaderboardEntry, RankedLeaderboardEntry


def ranked_leaderboard(
    entries: Sequence[LeaderboardEntry],
    quiz_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[RankedLeaderboardEntry]:
    """Best accuracy first, score breaks ties. Equal entries keep insertion order."""
    selected = [entry for entry in entries if quiz_id is None or entry.quiz_id == quiz_id]
    selected.sort(key=lambda entry: (-entry.accuracy, -entry.score))
    if limit is not None:
        selected = selected[:limit]
    return [RankedLeaderboardEntry(rank=index, entry=entry) for index, entry in enumerate(selected, start=1)]
