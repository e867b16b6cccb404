"""
Namespace scope resolution.

Decides which namespace a run covers from the --namespace and
--all-namespaces options, falling back to the namespace of the current
kubeconfig context.
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from .errors import NamespaceResolutionError
from .types import DEFAULT_NAMESPACE, NamespaceScope

logger = logging.getLogger(__name__)

DEFAULT_KUBECONFIG = Path.home() / ".kube" / "config"


def kubeconfig_paths(kubeconfig: Optional[str] = None) -> List[Path]:
    """
    List candidate kubeconfig files in precedence order.

    Args:
        kubeconfig: Explicit kubeconfig path, overrides KUBECONFIG

    Returns:
        Paths to try, explicit path first
    """
    if kubeconfig:
        return [Path(kubeconfig)]

    env_value = os.environ.get("KUBECONFIG", "")
    paths = [Path(p) for p in env_value.split(os.pathsep) if p]
    if paths:
        return paths
    return [DEFAULT_KUBECONFIG]


def load_kubeconfig(path: Path) -> Dict[str, Any]:
    """Load a kubeconfig file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise NamespaceResolutionError(f"failed to read kubeconfig {path}: {e}") from e
    except yaml.YAMLError as e:
        raise NamespaceResolutionError(f"failed to parse kubeconfig {path}: {e}") from e

    if not isinstance(data, dict):
        raise NamespaceResolutionError(f"kubeconfig {path} is not a mapping")
    return data


def find_context(configs: List[Dict[str, Any]], name: str) -> Dict[str, Any]:
    """Find a named context across kubeconfig files."""
    for config in configs:
        entries = config.get("contexts") or []
        if not isinstance(entries, list):
            raise NamespaceResolutionError("kubeconfig contexts are malformed")
        for entry in entries:
            if not isinstance(entry, dict):
                raise NamespaceResolutionError("kubeconfig contexts are malformed")
            if entry.get("name") == name:
                context = entry.get("context") or {}
                if not isinstance(context, dict):
                    raise NamespaceResolutionError(f"kubeconfig context {name!r} is malformed")
                return context

    raise NamespaceResolutionError(f"context {name!r} was not found in kubeconfig")


def get_namespace_in_current_context(
    kubeconfig: Optional[str] = None,
    context: Optional[str] = None,
) -> str:
    """
    Get the namespace of the current kubeconfig context.

    The first existing kubeconfig that sets current-context wins. A context
    without an explicit namespace resolves to "default".

    Args:
        kubeconfig: Optional explicit kubeconfig path
        context: Context to use instead of current-context

    Returns:
        Namespace name

    Raises:
        NamespaceResolutionError: If no usable kubeconfig or context is found
    """
    existing = [p for p in kubeconfig_paths(kubeconfig) if p.exists()]
    if not existing:
        raise NamespaceResolutionError("no kubeconfig found")

    configs = [load_kubeconfig(p) for p in existing]

    if not context:
        context = next(
            (c["current-context"] for c in configs if c.get("current-context")),
            None,
        )
    if not context:
        raise NamespaceResolutionError("current-context is not set in kubeconfig")

    return find_context(configs, context).get("namespace") or DEFAULT_NAMESPACE


def resolve_namespace_scope(
    namespace: str = "",
    all_namespaces: bool = False,
    input_file_given: bool = False,
    current_namespace: Callable[[], str] = get_namespace_in_current_context,
) -> NamespaceScope:
    """
    Resolve the namespace scope of a run.

    1. --all-namespaces selects every namespace, for cluster and file runs,
       and overrides any namespace given with it.
    2. An explicit namespace is used as is.
    3. Otherwise the current kubeconfig namespace is used. If it cannot be
       determined, a cluster run fails and a file run covers every namespace.

    Args:
        namespace: Explicit namespace, empty if not given
        all_namespaces: Whether --all-namespaces was given
        input_file_given: Whether resources are read from a file
        current_namespace: Lookup for the ambient namespace

    Returns:
        Resolved NamespaceScope

    Raises:
        NamespaceResolutionError: If a cluster run has no resolvable namespace
    """
    if all_namespaces:
        if namespace:
            logger.warning(f"Ignoring namespace {namespace!r}, all namespaces requested")
        return NamespaceScope.all()

    if namespace:
        return NamespaceScope.named(namespace)

    try:
        return NamespaceScope.named(current_namespace())
    except NamespaceResolutionError as e:
        if not input_file_given:
            raise
        logger.debug(f"Namespace lookup failed, using all namespaces: {e}")
        return NamespaceScope.all()
