# Pipeline stages module
from .stage1_queries import QuerySynthesisStage
from .stage2_search import ExaSearchClient, SearchStage
from .stage3_scoring import CandidateScoringStage
from .stage4_reconcile import ProspectReconcileStage
