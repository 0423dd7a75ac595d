"""
canaryroute - Ambassador canary mapping management for progressive rollouts.

Shifts a fraction of traffic toward a new service version by maintaining a
weighted clone of an operator-authored Ambassador ``Mapping``, and notifies
an external system whenever the desired weight changes.

Example usage:
    from canaryroute import AmbassadorReconciler, RolloutContext, Webhook
    from canaryroute.storage import get_mapping_client

    rollout = RolloutContext(
        name="checkout",
        namespace="default",
        mapping="checkout-mapping",
        canary_service="checkout-canary:8080",
    )
    client = get_mapping_client(namespace=rollout.namespace)

    reconciler = AmbassadorReconciler(rollout, client)
    reconciler.set_weight(20)

    Webhook().send_set_weight_event(20, rollout)
"""

__version__ = "0.1.0"
__all__ = [
    "AmbassadorReconciler",
    "RolloutContext",
    "Mapping",
    "Webhook",
    "build_canary_mapping_name",
    "__version__",
]


# Lazy imports to avoid loading the kubernetes client at import time
def __getattr__(name: str):
    if name == "AmbassadorReconciler":
        from canaryroute.reconciler import AmbassadorReconciler
        return AmbassadorReconciler
    if name == "RolloutContext":
        from canaryroute.models.rollout import RolloutContext
        return RolloutContext
    if name == "Mapping":
        from canaryroute.models.mapping import Mapping
        return Mapping
    if name == "Webhook":
        from canaryroute.webhook import Webhook
        return Webhook
    if name == "build_canary_mapping_name":
        from canaryroute.naming import build_canary_mapping_name
        return build_canary_mapping_name
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
