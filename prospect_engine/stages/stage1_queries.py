"""
Stage 1: Query Synthesis
========================
Turns one ICP profile and a geography selection into a bounded,
deterministic list of search-engine queries.

For each geography term (the city alone, or the first three states):
- "{geo} {keyword}" for the first three positive keywords
- "{role} {geo}" for the first two role titles
The combined list is truncated to the query cap.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..models.icp_profile import ICPProfile
from ..config.settings import QUERY_LIMITS

logger = logging.getLogger(__name__)


class QuerySynthesisStage:
    """
    Stage 1: Build search queries for one ICP lane.
    """

    def __init__(self, limits: Optional[Dict[str, int]] = None):
        self.limits = {**QUERY_LIMITS, **(limits or {})}

    def process(
        self,
        profile: ICPProfile,
        states: Sequence[str],
        city: Optional[str] = None,
    ) -> List[str]:
        """
        Synthesize queries for a profile.

        Args:
            profile: ICP profile supplying keywords and role titles
            states: Geography terms in caller order
            city: When given, the only geography term

        Returns:
            Ordered list of at most `max_queries` query strings
        """
        geo_terms = self.geo_terms(states, city)
        if not geo_terms:
            return []

        keywords = profile.positive_keywords[: self.limits["keywords_per_geo"]]
        roles = profile.role_titles[: self.limits["roles_per_geo"]]

        queries = []
        for geo in geo_terms:
            for keyword in keywords:
                queries.append(f"{geo} {keyword}")
            for role in roles:
                queries.append(f"{role} {geo}")

        queries = queries[: self.limits["max_queries"]]
        logger.debug("Synthesized %d queries for %s", len(queries), profile.id)
        return queries

    def geo_terms(self, states: Sequence[str], city: Optional[str] = None) -> List[str]:
        """Geography terms used for synthesis"""
        if city:
            return [city]
        return list(states or [])[: self.limits["max_geo_terms"]]
