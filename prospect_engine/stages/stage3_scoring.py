"""
Stage 3: Candidate Filtering & Scoring
======================================
Deterministic keep/drop decision for one search candidate.

Steps:
- URL-shape filter (hard reject, no scoring)
- Keyword match (+2, first match only)
- Role match (+2, first match in list order is the detected role)
- Geography match (+1, primary state only)
- Coaching/negative penalty (-3, first match only)
- Threshold: score <= 1 is dropped; high >= 4, medium >= 2, else low
"""

import logging
import re
from typing import Optional, Sequence, Tuple

from ..models.schemas import (
    SearchCandidate,
    CandidateScore,
    ConfidenceTier,
    DropReason,
)
from ..models.icp_profile import ICPProfile

logger = logging.getLogger(__name__)

_PROFILE_SLUG = re.compile(r"linkedin\.com/in/([^/?#]+)", re.IGNORECASE)

CANONICAL_PREFIX = "https://www.linkedin.com/in/"


def is_profile_url(url: Optional[str], profile: ICPProfile) -> bool:
    """True when the URL matches an allowed pattern and no blocked pattern"""
    if not url:
        return False
    lowered = url.lower()
    if not any(pattern in lowered for pattern in profile.allow_url_patterns):
        return False
    return not any(pattern in lowered for pattern in profile.block_url_patterns)


def extract_name_from_url(url: str) -> Optional[str]:
    """
    Derive a display name from the profile slug.

    "linkedin.com/in/jane-doe-123" -> "Jane Doe 123". Only the first
    character of each token is upper-cased.
    """
    match = _PROFILE_SLUG.search(url or "")
    if not match:
        return None
    words = match.group(1).replace("-", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def canonicalize_profile_url(url: str) -> str:
    """Canonical identity URL; the raw URL when no profile path is found"""
    match = _PROFILE_SLUG.search(url or "")
    if not match:
        return url
    return f"{CANONICAL_PREFIX}{match.group(1)}"


def first_match(text: str, terms: Sequence[str]) -> Optional[str]:
    """Scan terms in declaration order, return the first one found in text"""
    for term in terms:
        if term.lower() in text:
            return term
    return None


class CandidateScoringStage:
    """
    Stage 3: Filter and score search candidates against an ICP.
    """

    def process(
        self,
        candidate: SearchCandidate,
        profile: ICPProfile,
        geo_state: Optional[str] = None,
    ) -> CandidateScore:
        """
        Score one candidate.

        Args:
            candidate: Search result to evaluate
            profile: ICP the lane is searching for
            geo_state: Primary state; None when searching by city only

        Returns:
            CandidateScore with keep/drop decision
        """
        if not is_profile_url(candidate.url, profile):
            logger.debug("Dropped non-profile URL %s", candidate.url)
            return CandidateScore(kept=False, drop_reason=DropReason.URL_FILTER)

        text = f"{candidate.title or ''} {candidate.text or ''}".lower()
        score, role_detected = self.calculate_score(text, profile, geo_state)

        if score <= profile.score_thresholds.drop:
            logger.debug("Dropped %s with score %d", candidate.url, score)
            return CandidateScore(
                kept=False,
                score=score,
                role_detected=role_detected,
                drop_reason=DropReason.LOW_SCORE,
            )

        return CandidateScore(
            kept=True,
            score=score,
            confidence=self.confidence_for(score, profile),
            role_detected=role_detected,
            full_name=extract_name_from_url(candidate.url) or candidate.title or "Unknown",
            canonical_url=canonicalize_profile_url(candidate.url),
        )

    def calculate_score(
        self,
        text: str,
        profile: ICPProfile,
        geo_state: Optional[str] = None,
    ) -> Tuple[int, Optional[str]]:
        """Additive score and detected role for case-folded text"""
        rules = profile.scoring_rules
        score = 0

        if first_match(text, profile.positive_keywords):
            score += rules.keyword_match

        role_detected = first_match(text, profile.role_titles)
        if role_detected:
            score += rules.role_match

        if geo_state and geo_state.lower() in text:
            score += rules.geo_match

        if first_match(text, profile.negative_keywords):
            score += rules.coaching_penalty

        return score, role_detected

    def confidence_for(self, score: int, profile: ICPProfile) -> ConfidenceTier:
        thresholds = profile.score_thresholds
        if score >= thresholds.keep:
            return ConfidenceTier.HIGH
        if score >= thresholds.low_confidence:
            return ConfidenceTier.MEDIUM
        return ConfidenceTier.LOW
