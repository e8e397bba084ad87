#Expose the high-level pipeline pieces:
#Matching policy (weights, curves, rate tables)
#Scoring / ranking
#Dispatcher orchestrator (read port + push port around the engine)

from .policy import MatchingPolicy, ScoreWeights, default_matching_policy, policy_from_env
from .scoring import (
    DriverScore,
    ScoreFactors,
    auto_assign_driver,
    find_best_matches,
    score_driver,
)
from .dispatcher import MatchingDispatcher

__all__ = [
    "MatchingPolicy",
    "ScoreWeights",
    "default_matching_policy",
    "policy_from_env",
    "DriverScore",
    "ScoreFactors",
    "score_driver",
    "find_best_matches",
    "auto_assign_driver",
    "MatchingDispatcher",
]
