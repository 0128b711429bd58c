"""Per-team and per-player mutual exclusion for mutating operations.

Single-process only: every lifecycle operation holds its team's lock from
the first read to the commit, so a second operation on the same contract
re-reads committed state and fails its own eligibility check. Turnover
and trades hold several team locks at once, taken in id order. Signing
takes the player's lock before the team's so two teams cannot sign the
same player at once.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from threading import Lock, RLock
from typing import Dict, Iterable, Iterator, Tuple

_REGISTRY_LOCK = Lock()
_LOCKS: Dict[Tuple[str, int], RLock] = {}


def _lock_for(kind: str, key: int) -> RLock:
    with _REGISTRY_LOCK:
        lock = _LOCKS.get((kind, key))
        if lock is None:
            lock = _LOCKS[(kind, key)] = RLock()
        return lock


@contextmanager
def team_locks(team_ids: Iterable[int]) -> Iterator[None]:
    with ExitStack() as stack:
        for team_id in sorted(set(team_ids)):
            stack.enter_context(_lock_for("team", team_id))
        yield


@contextmanager
def player_lock(player_id: int) -> Iterator[None]:
    with _lock_for("player", player_id):
        yield
