"""
canaryroute CLI - Drive Ambassador canary mappings by hand.

Commands:
    canaryroute canary-name   Print the canary mapping name for a base mapping
    canaryroute set-weight    Converge the canary mapping to a weight
    canaryroute sign          Sign a webhook body (for testing receivers)

Usage::

    canaryroute set-weight 20 --rollout checkout --mapping checkout-mapping \\
        --canary-service checkout-canary:8080 --namespace shop

    # Dry run against a local manifest, printing the resulting mappings
    canaryroute set-weight 20 --rollout checkout --mapping checkout-mapping \\
        --canary-service checkout-canary:8080 --client memory --manifest mapping.yaml
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import click
import yaml

from canaryroute.config import get_config, get_webhook_secret
from canaryroute.errors import CanaryRouteError
from canaryroute.events import EventRecorder, KubernetesEventRecorder, LoggingEventRecorder
from canaryroute.logger import configure_logging
from canaryroute.models.mapping import Mapping
from canaryroute.models.rollout import RolloutContext
from canaryroute.naming import build_canary_mapping_name
from canaryroute.reconciler import AmbassadorReconciler
from canaryroute.storage import (
    ClientType,
    MemoryMappingClient,
    detect_client_type,
    get_mapping_client,
)
from canaryroute.webhook import Webhook, format_timestamp, sign_payload


def _parse_annotations(values: Tuple[str, ...]) -> dict:
    annotations = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {item!r}", param_hint="--annotation")
        annotations[key] = value
    return annotations


def _load_manifests(path: Path) -> list:
    with open(path, encoding="utf-8") as f:
        docs = [d for d in yaml.safe_load_all(f) if d]
    return [Mapping.from_dict(d) for d in docs]


@click.group()
@click.option("--log-level", type=click.Choice(["debug", "info", "warning", "error"]), help="Override configured log level")
def main(log_level: Optional[str]) -> None:
    """Manage Ambassador canary mappings for progressive rollouts."""
    configure_logging(log_level)


@main.command("canary-name")
@click.argument("name")
def canary_name(name: str) -> None:
    """Print the canary mapping name derived from NAME."""
    click.echo(build_canary_mapping_name(name))


@main.command("set-weight")
@click.argument("weight", type=click.IntRange(min=0))
@click.option("--rollout", "rollout_name", required=True, help="Rollout name")
@click.option("--namespace", default=None, help="K8s namespace (defaults to config)")
@click.option("--mapping", required=True, help="Base Ambassador mapping name")
@click.option("--canary-service", required=True, help="Service receiving canary traffic")
@click.option("--client", "client_type", type=click.Choice([t.value for t in ClientType]), default=None, help="Mapping store backend (auto-detected if not set)")
@click.option("--kubeconfig", type=click.Path(exists=True, dir_okay=False), default=None, help="Path to kubeconfig")
@click.option("--manifest", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="Seed the memory store from a YAML file")
@click.option("--events", "event_sink", type=click.Choice(["log", "kubernetes"]), default="log", help="Where to record rollout events")
@click.option("--annotation", "-a", multiple=True, help="Rollout annotation key=value (can specify multiple)")
@click.option("--notify/--no-notify", default=False, help="Send the signed weight-change webhook")
def set_weight(
    weight: int,
    rollout_name: str,
    namespace: Optional[str],
    mapping: str,
    canary_service: str,
    client_type: Optional[str],
    kubeconfig: Optional[str],
    manifest: Optional[Path],
    event_sink: str,
    annotation: Tuple[str, ...],
    notify: bool,
) -> None:
    """Converge the canary mapping of a rollout to WEIGHT."""
    config = get_config()
    namespace = namespace or config.kubernetes_namespace
    if client_type is None and config.client_type != "auto":
        client_type = config.client_type

    rollout = RolloutContext(
        name=rollout_name,
        namespace=namespace,
        mapping=mapping,
        canary_service=canary_service,
        annotations=_parse_annotations(annotation) if annotation else None,
    )

    if manifest is not None:
        if client_type not in (None, ClientType.MEMORY.value):
            raise click.UsageError("--manifest requires --client memory")
        client = MemoryMappingClient(namespace=namespace, mappings=_load_manifests(manifest))
    else:
        resolved = ClientType(client_type) if client_type else detect_client_type()
        options = {}
        if resolved is ClientType.KUBERNETES:
            options["kubeconfig"] = kubeconfig or config.kubeconfig
        client = get_mapping_client(resolved, namespace=namespace, **options)

    recorder: EventRecorder = LoggingEventRecorder()
    if event_sink == "kubernetes":
        recorder = KubernetesEventRecorder()

    reconciler = AmbassadorReconciler(rollout, client, recorder)
    try:
        reconciler.set_weight(weight)
    except CanaryRouteError as e:
        raise click.ClickException(str(e))

    if notify:
        Webhook().send_set_weight_event(weight, rollout)

    if isinstance(client, MemoryMappingClient):
        docs = [client.get(name).to_dict() for name in client.names()]
        click.echo(yaml.safe_dump_all(docs, sort_keys=False), nl=False)
    else:
        click.echo(f"Canary mapping {build_canary_mapping_name(mapping)} set to weight {weight}")


@main.command()
@click.option("--body", required=True, help="Exact request body to sign")
@click.option("--timestamp", default=None, help="RFC 3339 timestamp (defaults to now)")
def sign(body: str, timestamp: Optional[str]) -> None:
    """Print X-Rollout-Timestamp and X-Rollout-Signature for BODY."""
    secret = get_webhook_secret()
    if not secret:
        raise click.ClickException("webhook secret is not configured (AMBASSADOR_WEBHOOK_SECRET)")
    if timestamp is None:
        timestamp = format_timestamp(datetime.now(timezone.utc))
    click.echo(f"X-Rollout-Timestamp: {timestamp}")
    click.echo(f"X-Rollout-Signature: {sign_payload(secret, timestamp, body.encode('utf-8'))}")


if __name__ == "__main__":
    main()
