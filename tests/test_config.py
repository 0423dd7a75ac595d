"""
Tests for canaryroute configuration.
"""

import pytest
from pydantic import ValidationError

from canaryroute.config import (
    CanaryRouteConfig,
    get_config,
    get_webhook_secret,
    reset_config,
)


class TestConfig:

    def test_defaults(self):
        config = CanaryRouteConfig()
        assert config.webhook_secret is None
        assert not config.has_webhook_secret
        assert config.webhook_timeout_seconds == 5.0
        assert config.kubernetes_namespace == "default"
        assert config.client_type == "auto"
        assert config.log_level == "info"

    def test_ambassador_secret_env(self, monkeypatch):
        monkeypatch.setenv("AMBASSADOR_WEBHOOK_SECRET", "s3cr3t")
        config = CanaryRouteConfig()
        assert config.webhook_secret.get_secret_value() == "s3cr3t"
        assert config.has_webhook_secret

    def test_prefixed_secret_env(self, monkeypatch):
        monkeypatch.setenv("CANARYROUTE_WEBHOOK_SECRET", "prefixed")
        assert CanaryRouteConfig().webhook_secret.get_secret_value() == "prefixed"

    def test_secret_is_not_printed(self, monkeypatch):
        monkeypatch.setenv("AMBASSADOR_WEBHOOK_SECRET", "s3cr3t")
        assert "s3cr3t" not in repr(CanaryRouteConfig())

    def test_prefixed_settings(self, monkeypatch):
        monkeypatch.setenv("CANARYROUTE_KUBERNETES_NAMESPACE", "rollouts")
        monkeypatch.setenv("CANARYROUTE_LOG_LEVEL", "debug")
        config = CanaryRouteConfig()
        assert config.kubernetes_namespace == "rollouts"
        assert config.log_level == "debug"

    def test_invalid_timeout(self):
        with pytest.raises(ValidationError):
            CanaryRouteConfig(webhook_timeout_seconds=0)

    def test_kubeconfig_expands_user(self):
        config = CanaryRouteConfig(kubeconfig="~/kube/config")
        assert not config.kubeconfig.startswith("~")


class TestGetConfig:

    def test_singleton(self):
        assert get_config() is get_config()

    def test_overrides_replace_singleton(self):
        config = get_config(kubernetes_namespace="canary")
        assert config.kubernetes_namespace == "canary"
        assert get_config() is config

    def test_reset(self, monkeypatch):
        first = get_config()
        reset_config()
        assert get_config() is not first

    def test_get_webhook_secret(self, monkeypatch):
        assert get_webhook_secret() == ""
        monkeypatch.setenv("AMBASSADOR_WEBHOOK_SECRET", "abc")
        reset_config()
        assert get_webhook_secret() == "abc"
