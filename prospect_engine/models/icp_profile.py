"""
ICP Profile Models
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple
from pydantic import BaseModel, Field

from ..config.settings import ICP_PROFILES_CONFIG


class ScoringWeights(BaseModel):
    """Additive points awarded per match category"""
    keyword_match: int = 2
    role_match: int = 2
    geo_match: int = 1
    coaching_penalty: int = -3
    # Carried from the profile tables; not applied by the scorer
    wrong_industry_penalty: int = -2

    class Config:
        frozen = True


class ScoreThresholds(BaseModel):
    """Score cut-offs for confidence tiers and the drop decision"""
    keep: int = 4
    low_confidence: int = 2
    drop: int = 1

    class Config:
        frozen = True


class ICPProfile(BaseModel):
    """Complete, immutable ICP profile"""
    id: str
    label: str
    entity_type: str = "people"
    include_domains: Tuple[str, ...] = ("linkedin.com",)
    allow_url_patterns: Tuple[str, ...] = ("linkedin.com/in/",)
    block_url_patterns: Tuple[str, ...] = ()

    # Order matters: scanning stops at the first match
    positive_keywords: Tuple[str, ...]
    role_titles: Tuple[str, ...]
    negative_keywords: Tuple[str, ...] = ()

    scoring_rules: ScoringWeights = Field(default_factory=ScoringWeights)
    score_thresholds: ScoreThresholds = Field(default_factory=ScoreThresholds)

    class Config:
        frozen = True


def build_icp_registry(
    table: Optional[Dict[str, Dict]] = None,
) -> Mapping[str, ICPProfile]:
    """
    Build a read-only ICP registry from dict-literal profile tables.
    """
    table = table if table is not None else ICP_PROFILES_CONFIG
    profiles = {icp_id: ICPProfile(**cfg) for icp_id, cfg in table.items()}
    return MappingProxyType(profiles)


# Loaded once per process
ICP_PROFILES: Mapping[str, ICPProfile] = build_icp_registry()


def get_icp_profile(icp_id: str) -> Optional[ICPProfile]:
    """Look up a shipped ICP profile by identifier"""
    return ICP_PROFILES.get(icp_id)
