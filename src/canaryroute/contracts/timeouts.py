"""
Timeout constants for canaryroute.

Centralizes timeout values to ensure consistency across the codebase
and make tuning easier.
"""

from __future__ import annotations

# =============================================================================
# Webhook Timeouts
# =============================================================================

# Total time allowed for a weight-change notification (connect + send + read)
WEBHOOK_TIMEOUT_S = 5.0

# =============================================================================
# Kubernetes API Timeouts
# =============================================================================

# Connect timeout for K8s API calls
K8S_API_CONNECT_TIMEOUT_S = 3

# Read timeout for K8s API calls
K8S_API_READ_TIMEOUT_S = 5

# Tuple form accepted by the kubernetes client's _request_timeout
K8S_API_REQUEST_TIMEOUT = (K8S_API_CONNECT_TIMEOUT_S, K8S_API_READ_TIMEOUT_S)
