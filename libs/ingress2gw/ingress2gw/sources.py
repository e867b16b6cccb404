"""
Ingress resource providers.

Ingresses are read either from a manifest file or from a live cluster
through kubectl. Both providers only read.
"""

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from .errors import AcquisitionError, NamespaceResolutionError, NoResourcesFoundError
from .types import INGRESS_KIND, Ingress, NamespaceScope, ScopeKind

logger = logging.getLogger(__name__)

LIST_KINDS = ("List", "IngressList")


class ResourceProvider(ABC):
    """Source of Ingress resources."""

    @abstractmethod
    def fetch(self, scope: NamespaceScope) -> List[Ingress]:
        """Return the Ingresses inside the scope, in source order."""


def iter_ingress_manifests(documents: Iterable[Any]) -> Iterable[Dict[str, Any]]:
    """Yield Ingress manifests, expanding List documents and skipping other kinds."""
    for doc in documents:
        if not isinstance(doc, dict):
            continue
        kind = doc.get("kind")
        if kind == INGRESS_KIND:
            yield doc
        elif kind in LIST_KINDS:
            yield from iter_ingress_manifests(doc.get("items") or [])


def decode_ingresses(manifests: Iterable[Dict[str, Any]], source: str) -> List[Ingress]:
    """Decode Ingress manifests, failing on malformed ones."""
    ingresses = []
    for manifest in manifests:
        try:
            ingresses.append(Ingress.from_dict(manifest))
        except (ValueError, TypeError, AttributeError) as e:
            raise AcquisitionError(f"invalid Ingress in {source}: {e}") from e
    return ingresses


class FileResourceProvider(ResourceProvider):
    """Reads Ingresses from a multi-document YAML or JSON manifest file."""

    def __init__(self, path: str):
        self.path = Path(path)

    def load_documents(self) -> List[Any]:
        try:
            with open(self.path) as f:
                return list(yaml.safe_load_all(f))
        except OSError as e:
            raise AcquisitionError(f"failed to open input file: {e}") from e
        except yaml.YAMLError as e:
            raise AcquisitionError(f"failed to parse input file {self.path}: {e}") from e

    def fetch(self, scope: NamespaceScope) -> List[Ingress]:
        documents = self.load_documents()
        ingresses = decode_ingresses(iter_ingress_manifests(documents), str(self.path))
        selected = [i for i in ingresses if scope.matches(i.namespace)]
        logger.debug(
            f"Read {len(ingresses)} ingresses from {self.path}, "
            f"{len(selected)} in scope {scope}"
        )
        return selected


class ClusterResourceProvider(ResourceProvider):
    """Reads Ingresses from the cluster of the current kubeconfig using kubectl."""

    def __init__(self, kubectl: str = "kubectl", context: Optional[str] = None):
        self.kubectl = kubectl
        self.context = context

    def build_command(self, scope: NamespaceScope) -> List[str]:
        cmd = [self.kubectl, "get", "ingresses.networking.k8s.io", "-o", "json"]
        if self.context:
            cmd += ["--context", self.context]
        if scope.kind == ScopeKind.NAMED:
            cmd += ["--namespace", scope.name]
        else:
            cmd.append("--all-namespaces")
        return cmd

    def run_kubectl(self, cmd: List[str]) -> str:
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        except FileNotFoundError as e:
            raise AcquisitionError(f"kubectl not found: {self.kubectl}") from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise AcquisitionError(
                f"failed to get ingress resources from kubernetes cluster: {detail}"
            ) from e
        return result.stdout

    def fetch(self, scope: NamespaceScope) -> List[Ingress]:
        output = self.run_kubectl(self.build_command(scope))
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise AcquisitionError(f"unexpected kubectl output: {e}") from e

        ingresses = decode_ingresses(iter_ingress_manifests([data]), "cluster")
        return [i for i in ingresses if scope.matches(i.namespace)]


def create_provider(
    input_file: str = "",
    kubectl: str = "kubectl",
    context: Optional[str] = None,
) -> ResourceProvider:
    """
    Create the resource provider for a run.

    Args:
        input_file: Manifest file path; empty reads from the cluster
        kubectl: kubectl binary for cluster reads
        context: Optional kubeconfig context for cluster reads

    Returns:
        FileResourceProvider or ClusterResourceProvider
    """
    if input_file:
        return FileResourceProvider(input_file)
    return ClusterResourceProvider(kubectl=kubectl, context=context)


def fetch_ingresses(scope: NamespaceScope, provider: ResourceProvider) -> List[Ingress]:
    """
    Fetch Ingresses for a scope.

    Raises:
        NamespaceResolutionError: If the scope is unresolved
        AcquisitionError: If the provider fails
        NoResourcesFoundError: If no Ingress is in scope
    """
    if scope.kind == ScopeKind.UNRESOLVED:
        raise NamespaceResolutionError("namespace scope is unresolved")

    ingresses = provider.fetch(scope)
    if not ingresses:
        raise NoResourcesFoundError(scope.filter_value)
    return ingresses
