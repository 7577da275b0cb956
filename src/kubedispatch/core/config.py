"""
KUBEDISPATCH SETTINGS
---------------------
Runtime configuration for the agent. Values come from the environment
(the agent normally runs as a pod) and can be overridden by CLI flags.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from kubedispatch.core.errors import ConfigError

DEFAULT_NAMESPACE = "default"
DEFAULT_REGISTRATION_CONFIG = "litmus-portal-config"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class AgentSettings:
    agent_namespace: str = DEFAULT_NAMESPACE
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    in_cluster: Optional[bool] = None       # None = try in-cluster, then kubeconfig
    registration_config: str = DEFAULT_REGISTRATION_CONFIG
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AgentSettings":
        env = os.environ if environ is None else environ
        return cls(
            agent_namespace=env.get("AGENT_NAMESPACE") or DEFAULT_NAMESPACE,
            kubeconfig=env.get("KUBECONFIG") or None,
            context=env.get("KUBE_CONTEXT") or None,
            in_cluster=_parse_tristate(env.get("KUBEDISPATCH_IN_CLUSTER", "auto")),
            registration_config=env.get("KUBEDISPATCH_REGISTRATION_CONFIG") or DEFAULT_REGISTRATION_CONFIG,
            log_level=(env.get("KUBEDISPATCH_LOG_LEVEL") or "INFO").upper(),
        )

    def override(self, **values) -> "AgentSettings":
        """Returns a copy with every non-None value applied."""
        changes = {k: v for k, v in values.items() if v is not None}
        return replace(self, **changes)


def _parse_tristate(raw: Optional[str]) -> Optional[bool]:
    value = (raw or "auto").strip().lower()
    if value == "auto":
        return None
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigError(f"KUBEDISPATCH_IN_CLUSTER must be auto/true/false, got '{raw}'")
