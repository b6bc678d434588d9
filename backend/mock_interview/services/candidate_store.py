from __future__ import annotations
from typing import Any, Dict, List, Optional

from mock_interview.domain.models import Candidate, DashboardStats


class CandidateStore:
    """Abstract store for candidate records.

    Replace this with a DB-backed implementation without changing routers.
    Records are only ever added and updated; there is no deletion path.
    """

    def add_candidate(self, candidate: Candidate) -> Candidate:
        raise NotImplementedError

    def update_candidate(self, candidate_id: str, **changes: Any) -> Optional[Candidate]:
        raise NotImplementedError

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        raise NotImplementedError

    def list_candidates(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[Candidate]:
        raise NotImplementedError

    def stats(self) -> DashboardStats:
        raise NotImplementedError


class InMemoryCandidateStore(CandidateStore):
    def __init__(self) -> None:
        # insertion order doubles as the dashboard's tie-break order
        self.candidates: Dict[str, Candidate] = {}

    def add_candidate(self, candidate: Candidate) -> Candidate:
        existing = self.candidates.get(candidate.id)
        if existing is not None:
            return existing
        self.candidates[candidate.id] = candidate
        return candidate

    def update_candidate(self, candidate_id: str, **changes: Any) -> Optional[Candidate]:
        current = self.candidates.get(candidate_id)
        if current is None:
            return None
        changes.pop("id", None)
        updated = current.model_copy(update=changes)
        self.candidates[candidate_id] = updated
        return updated

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        return self.candidates.get(candidate_id)

    def list_candidates(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[Candidate]:
        """Dashboard view: filter by name/email and status, best scores first.

        Scored candidates come first ordered by score (descending); unscored
        candidates follow in the order they were added.
        """
        needle = (search or "").strip().lower()
        results = []
        for candidate in self.candidates.values():
            if needle and needle not in candidate.name.lower() and needle not in candidate.email.lower():
                continue
            if status and status != "all" and candidate.status != status:
                continue
            results.append(candidate)

        scored = [c for c in results if c.score is not None]
        unscored = [c for c in results if c.score is None]
        scored.sort(key=lambda c: c.score, reverse=True)
        return scored + unscored

    def stats(self) -> DashboardStats:
        counts = {"pending": 0, "ready": 0, "in-progress": 0, "completed": 0}
        for candidate in self.candidates.values():
            counts[candidate.status] = counts.get(candidate.status, 0) + 1
        return DashboardStats(
            total=len(self.candidates),
            pending=counts["pending"],
            ready=counts["ready"],
            in_progress=counts["in-progress"],
            completed=counts["completed"],
        )


# Singleton provider for DI
_store_singleton: Optional[CandidateStore] = None


def get_candidate_store() -> CandidateStore:
    global _store_singleton
    if _store_singleton is None:
        _store_singleton = InMemoryCandidateStore()
    return _store_singleton
