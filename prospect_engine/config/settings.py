"""
Configuration settings for the REI Prospect Engine
"""

from typing import Dict, List, Any
import os

# =============================================================================
# SEARCH PROVIDER CONFIGURATION (Exa)
# =============================================================================

SEARCH_CONFIG = {
    "provider": "exa",
    "api_key": os.getenv("EXA_API_KEY", ""),
    "base_url": os.getenv("EXA_BASE_URL", "https://api.exa.ai"),
    "search_type": "neural",
    "num_results": 10,
    "max_characters": 500,
    "include_domains": ["linkedin.com"],
    # Deadline per provider call; a timed-out call counts as zero candidates
    "timeout_seconds": float(os.getenv("EXA_TIMEOUT_SECONDS", "15")),
    "max_attempts": int(os.getenv("EXA_MAX_ATTEMPTS", "2")),
    "base_delay_ms": 250,
    "max_delay_ms": 4000,
}

# =============================================================================
# QUERY SYNTHESIS LIMITS
# =============================================================================

QUERY_LIMITS = {
    "max_queries": 10,
    "max_geo_terms": 3,
    "keywords_per_geo": 3,
    "roles_per_geo": 2,
}

# =============================================================================
# PERSISTENCE
# =============================================================================

DATABASE_CONFIG = {
    "url": os.getenv("DATABASE_URL", "sqlite:///./prospects.db"),
    "echo": os.getenv("DATABASE_ECHO", "false").lower() == "true",
}

DEFAULT_WORKSPACE_ID = "00000000-0000-0000-0000-000000000001"

# Prospects are read newest first and capped before filters are applied
PROSPECT_PAGE_SIZE = 500

# =============================================================================
# LOGGING
# =============================================================================

LOG_CONFIG = {
    "level": os.getenv("LOG_LEVEL", "INFO"),
    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
    "datefmt": "%Y-%m-%d %H:%M:%S",
}

# =============================================================================
# INTENT HEAT RULES
# =============================================================================

INTENT_HEAT_RULES = {
    "hot": {"min_times_seen": 3, "max_days": 14},
    "warm": {"min_times_seen": 2, "max_days": 30},
}

# =============================================================================
# ICP PROFILES
# =============================================================================

_PROFILE_URL_RULES = {
    "entity_type": "people",
    "include_domains": ["linkedin.com"],
    "allow_url_patterns": ["linkedin.com/in/"],
    "block_url_patterns": [
        "linkedin.com/company",
        "linkedin.com/jobs",
        "linkedin.com/learning",
    ],
}

_DEFAULT_SCORING_RULES = {
    "keyword_match": 2,
    "role_match": 2,
    "geo_match": 1,
    "coaching_penalty": -3,
    "wrong_industry_penalty": -2,
}

_DEFAULT_SCORE_THRESHOLDS = {"keep": 4, "low_confidence": 2, "drop": 1}

ICP_PROFILES_CONFIG: Dict[str, Dict[str, Any]] = {
    "wholesaler": {
        "id": "wholesaler",
        "label": "Wholesalers",
        **_PROFILE_URL_RULES,
        "positive_keywords": [
            "wholesaler", "wholesale real estate", "assignment investor", "contract flipper",
            "acquisitions", "dispositions", "dispo", "deal sourcer", "bird dog",
            "direct to seller", "off market", "motivated seller", "distressed property",
            "assignment contract", "wholesale deal", "off-market deal", "creative finance",
        ],
        "role_titles": [
            "Wholesaler", "Real Estate Wholesaler", "Acquisitions Manager", "Dispositions Manager",
            "Deal Sourcer", "Real Estate Investor", "Investment Property Specialist",
        ],
        "negative_keywords": [
            "coach", "mentor", "course", "academy", "training", "guru", "mastermind",
            "commercial real estate", "mortgage broker", "loan officer",
        ],
        "scoring_rules": _DEFAULT_SCORING_RULES,
        "score_thresholds": _DEFAULT_SCORE_THRESHOLDS,
    },
    "flipper": {
        "id": "flipper",
        "label": "Flippers",
        **_PROFILE_URL_RULES,
        "positive_keywords": [
            "house flipper", "fix and flip", "flip investor", "property flipper",
            "rehab", "renovation", "rehabber", "renovation investor",
            "fixer upper", "distressed home", "value-add property",
            "flip project", "rehab project", "renovation deal",
        ],
        "role_titles": [
            "House Flipper", "Fix and Flip Investor", "Renovation Specialist",
            "Real Estate Rehabber", "Property Renovator", "Real Estate Investor",
        ],
        "negative_keywords": [
            "coach", "mentor", "course", "academy", "training", "guru", "mastermind",
            "commercial real estate", "interior designer",
        ],
        "scoring_rules": _DEFAULT_SCORING_RULES,
        "score_thresholds": _DEFAULT_SCORE_THRESHOLDS,
    },
    "buy_hold": {
        "id": "buy_hold",
        "label": "Buy & Hold / Landlords",
        **_PROFILE_URL_RULES,
        "positive_keywords": [
            "landlord", "buy and hold", "rental investor", "property owner",
            "rental portfolio", "multifamily investor", "passive investor",
            "cash flow investor", "BRRRR", "long-term hold", "income property",
            "portfolio owner", "multi-property owner", "real estate portfolio",
        ],
        "role_titles": [
            "Landlord", "Rental Property Investor", "Buy and Hold Investor",
            "Portfolio Owner", "Multifamily Investor", "Passive Real Estate Investor",
        ],
        "negative_keywords": [
            "coach", "mentor", "course", "academy", "training", "guru", "mastermind",
            "property manager", "property management company",
        ],
        "scoring_rules": _DEFAULT_SCORING_RULES,
        "score_thresholds": _DEFAULT_SCORE_THRESHOLDS,
    },
    "agent": {
        "id": "agent",
        "label": "Real Estate Agents",
        **_PROFILE_URL_RULES,
        "positive_keywords": [
            "realtor", "real estate agent", "broker", "real estate professional",
            "listing agent", "buyer agent", "investment property agent",
            "residential real estate", "investor-friendly agent", "REO specialist",
            "team lead", "top producer", "broker associate",
        ],
        "role_titles": [
            "Realtor", "Real Estate Agent", "Real Estate Broker", "Listing Agent",
            "Buyer Agent", "Real Estate Professional", "Licensed Real Estate Agent",
        ],
        "negative_keywords": [
            "coach", "mentor", "course", "academy", "training", "guru", "mastermind",
            "mortgage broker", "loan officer", "escrow officer",
        ],
        "scoring_rules": _DEFAULT_SCORING_RULES,
        "score_thresholds": _DEFAULT_SCORE_THRESHOLDS,
    },
    "institutional": {
        "id": "institutional",
        "label": "Institutional / Hedge Fund",
        **_PROFILE_URL_RULES,
        "positive_keywords": [
            "institutional investor", "hedge fund", "private equity", "family office",
            "fund manager", "asset manager", "portfolio manager", "CIO",
            "build-to-rent", "SFR portfolio", "bulk acquisitions", "institutional capital",
            "large scale investor", "portfolio acquisition", "bulk buyer",
        ],
        "role_titles": [
            "Fund Manager", "Asset Manager", "Portfolio Manager", "CIO",
            "VP Acquisitions", "Director of Acquisitions", "Investment Manager",
            "Real Estate Fund Manager", "Principal",
        ],
        "negative_keywords": [
            "coach", "mentor", "course", "academy", "training", "guru", "mastermind",
            "financial advisor", "wealth advisor",
        ],
        "scoring_rules": _DEFAULT_SCORING_RULES,
        "score_thresholds": _DEFAULT_SCORE_THRESHOLDS,
    },
}

# =============================================================================
# SEARCH STRATEGIES
# =============================================================================

# Labels only: the strategy is recorded with a run but does not change scoring
STRATEGIES: List[Dict[str, str]] = [
    {"id": "balanced", "label": "Balanced", "description": "Mix of targeted and discovery queries"},
    {"id": "role_focused", "label": "Role Focused", "description": "Prioritize specific job titles"},
    {"id": "fresh_sources", "label": "Fresh Sources", "description": "Emphasize new discovery"},
    {"id": "aggressive_geo", "label": "Aggressive Geo", "description": "Deep dive into specific locations"},
]

# =============================================================================
# GEOGRAPHY
# =============================================================================

US_STATES = [
    "Alabama", "Alaska", "Arizona", "Arkansas", "California", "Colorado", "Connecticut",
    "Delaware", "Florida", "Georgia", "Hawaii", "Idaho", "Illinois", "Indiana", "Iowa",
    "Kansas", "Kentucky", "Louisiana", "Maine", "Maryland", "Massachusetts", "Michigan",
    "Minnesota", "Mississippi", "Missouri", "Montana", "Nebraska", "Nevada", "New Hampshire",
    "New Jersey", "New Mexico", "New York", "North Carolina", "North Dakota", "Ohio",
    "Oklahoma", "Oregon", "Pennsylvania", "Rhode Island", "South Carolina", "South Dakota",
    "Tennessee", "Texas", "Utah", "Vermont", "Virginia", "Washington", "West Virginia",
    "Wisconsin", "Wyoming",
]
