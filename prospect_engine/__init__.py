"""
REI Prospect Engine - Staged Lead-Generation Pipeline
=====================================================
Finds and tracks real-estate investor prospects per Ideal Customer Profile:
  Stage 1: Query Synthesis (ICP vocabulary x geography)
  Stage 2: Search (Exa, fail-open per query)
  Stage 3: Filter & Score (URL shape, additive score, confidence tier)
  Stage 4: Reconcile (dedup by canonical URL, intent heat)
"""

__version__ = "1.0.0"
__author__ = "REI Prospecting Team"
