"""
Prospect stores
===============
Persistence boundary for prospect records. Two implementations share one
interface:

- InMemoryProspectStore: dict-backed, for tests and local runs
- SqlProspectStore: SQLAlchemy-backed, unique on (workspace_id, canonical URL)

Store failures are raised as ProspectStoreError.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..models.schemas import ConfidenceTier, IntentHeat, Prospect
from ..errors import ProspectStoreError
from .database import ProspectRow


class ProspectStore(ABC):
    """Read-then-write prospect persistence keyed by (workspace, canonical URL)"""

    @abstractmethod
    def find(self, workspace_id: str, canonical_url: str) -> Optional[Prospect]:
        ...

    @abstractmethod
    def insert(self, prospect: Prospect) -> Prospect:
        ...

    @abstractmethod
    def update_sighting(
        self,
        prospect_id: str,
        times_seen: int,
        intent_heat: IntentHeat,
        icp_match_score: int,
        icp_confidence: ConfidenceTier,
    ) -> Prospect:
        ...

    @abstractmethod
    def list_recent(self, workspace_id: str, limit: int) -> List[Prospect]:
        """Newest first by created_at"""


# =============================================================================
# In-memory store
# =============================================================================

class InMemoryProspectStore(ProspectStore):

    def __init__(self):
        self._rows: Dict[str, Prospect] = {}
        self._keys: Dict[Tuple[str, str], str] = {}
        self._order: Dict[str, int] = {}

    def find(self, workspace_id, canonical_url):
        prospect_id = self._keys.get((workspace_id, canonical_url))
        if prospect_id is None:
            return None
        return self._rows[prospect_id].model_copy()

    def insert(self, prospect):
        key = (prospect.workspace_id, prospect.linkedin_url_canonical)
        if key in self._keys:
            raise ProspectStoreError(
                f"Duplicate prospect for workspace {key[0]}: {key[1]}"
            )
        stored = prospect.model_copy(update={"id": prospect.id or str(uuid.uuid4())})
        self._rows[stored.id] = stored
        self._keys[key] = stored.id
        self._order[stored.id] = len(self._order)
        return stored.model_copy()

    def update_sighting(self, prospect_id, times_seen, intent_heat, icp_match_score, icp_confidence):
        if prospect_id not in self._rows:
            raise ProspectStoreError(f"Prospect {prospect_id} not found")
        updated = self._rows[prospect_id].model_copy(update={
            "times_seen": times_seen,
            "intent_heat": intent_heat,
            "icp_match_score": icp_match_score,
            "icp_confidence": icp_confidence,
        })
        self._rows[prospect_id] = updated
        return updated.model_copy()

    def list_recent(self, workspace_id, limit):
        rows = [p for p in self._rows.values() if p.workspace_id == workspace_id]
        rows.sort(key=lambda p: (p.created_at, self._order[p.id]), reverse=True)
        return [p.model_copy() for p in rows[:limit]]

    def __len__(self):
        return len(self._rows)


# =============================================================================
# SQLAlchemy store
# =============================================================================

def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on read
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_prospect(row: ProspectRow) -> Prospect:
    return Prospect(
        id=row.id,
        workspace_id=row.workspace_id,
        full_name=row.full_name,
        linkedin_url=row.linkedin_url,
        linkedin_url_canonical=row.linkedin_url_canonical,
        source_url=row.source_url,
        icp=row.icp,
        role_detected=row.role_detected,
        icp_match_score=row.icp_match_score,
        icp_confidence=row.icp_confidence,
        intent_heat=row.intent_heat or IntentHeat.COLD,
        geo_state=row.geo_state,
        geo_city=row.geo_city,
        times_seen=row.times_seen or 1,
        first_seen_at=_as_utc(row.first_seen_at),
        created_at=_as_utc(row.created_at),
    )


class SqlProspectStore(ProspectStore):

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def find(self, workspace_id, canonical_url):
        stmt = (
            select(ProspectRow)
            .where(ProspectRow.workspace_id == workspace_id)
            .where(ProspectRow.linkedin_url_canonical == canonical_url)
            .limit(1)
        )
        try:
            with self.session_factory() as session:
                row = session.execute(stmt).scalars().first()
                return _to_prospect(row) if row else None
        except SQLAlchemyError as e:
            raise ProspectStoreError(f"Prospect lookup failed: {e}") from e

    def insert(self, prospect):
        row = ProspectRow(
            id=prospect.id or str(uuid.uuid4()),
            workspace_id=prospect.workspace_id,
            full_name=prospect.full_name,
            linkedin_url=prospect.linkedin_url,
            linkedin_url_canonical=prospect.linkedin_url_canonical,
            source_url=prospect.source_url,
            icp=prospect.icp,
            role_detected=prospect.role_detected,
            icp_match_score=prospect.icp_match_score,
            icp_confidence=prospect.icp_confidence.value,
            intent_heat=prospect.intent_heat.value,
            geo_state=prospect.geo_state,
            geo_city=prospect.geo_city,
            times_seen=prospect.times_seen,
            first_seen_at=prospect.first_seen_at,
            created_at=prospect.created_at,
        )
        try:
            with self.session_factory() as session:
                session.add(row)
                session.commit()
                return _to_prospect(row)
        except SQLAlchemyError as e:
            raise ProspectStoreError(f"Prospect insert failed: {e}") from e

    def update_sighting(self, prospect_id, times_seen, intent_heat, icp_match_score, icp_confidence):
        try:
            with self.session_factory() as session:
                row = session.get(ProspectRow, prospect_id)
                if row is None:
                    raise ProspectStoreError(f"Prospect {prospect_id} not found")
                row.times_seen = times_seen
                row.intent_heat = IntentHeat(intent_heat).value
                row.icp_match_score = icp_match_score
                row.icp_confidence = ConfidenceTier(icp_confidence).value
                session.commit()
                return _to_prospect(row)
        except SQLAlchemyError as e:
            raise ProspectStoreError(f"Prospect update failed: {e}") from e

    def list_recent(self, workspace_id, limit):
        stmt = (
            select(ProspectRow)
            .where(ProspectRow.workspace_id == workspace_id)
            .order_by(ProspectRow.created_at.desc())
            .limit(limit)
        )
        try:
            with self.session_factory() as session:
                return [_to_prospect(row) for row in session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            raise ProspectStoreError(f"Prospect listing failed: {e}") from e
