"""ZStack Edge API client package."""

from .config import (
    CLUSTER_BUDGET,
    NODE_BUDGET,
    EdgeConfig,
    RetryBudget,
)
from .edge_client import EdgeClient
from .http_client import EdgeHttpClient

__all__ = [
    "CLUSTER_BUDGET",
    "NODE_BUDGET",
    "EdgeConfig",
    "RetryBudget",
    "EdgeClient",
    "EdgeHttpClient",
]
