"""
Type definitions for ingress2gw.

These dataclasses represent Ingress resources read from a cluster or a
manifest file, the namespace scope of a run and the conversion result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

INGRESS_KIND = "Ingress"
INGRESS_CLASS_ANNOTATION = "kubernetes.io/ingress.class"
DEFAULT_NAMESPACE = "default"


class OutputFormat(str, Enum):
    """Output serialization format."""
    YAML = "yaml"
    JSON = "json"


class PathType(str, Enum):
    """Ingress path matching type."""
    PREFIX = "Prefix"
    EXACT = "Exact"
    IMPLEMENTATION_SPECIFIC = "ImplementationSpecific"


class ScopeKind(str, Enum):
    """State of a namespace scope."""
    ALL = "all"
    NAMED = "named"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class NamespaceScope:
    """Namespace scope for a run.

    - ALL: match resources in every namespace
    - NAMED: match resources in exactly one namespace
    - UNRESOLVED: no scope could be determined, nothing may be fetched
    """
    kind: ScopeKind
    name: str = ""

    @classmethod
    def all(cls) -> "NamespaceScope":
        return cls(ScopeKind.ALL)

    @classmethod
    def named(cls, name: str) -> "NamespaceScope":
        if not name:
            raise ValueError("Named namespace scope requires a namespace")
        return cls(ScopeKind.NAMED, name)

    @classmethod
    def unresolved(cls) -> "NamespaceScope":
        return cls(ScopeKind.UNRESOLVED)

    @property
    def is_all(self) -> bool:
        return self.kind == ScopeKind.ALL

    @property
    def filter_value(self) -> str:
        """Namespace name for a named scope, empty string otherwise."""
        return self.name if self.kind == ScopeKind.NAMED else ""

    def matches(self, namespace: Optional[str]) -> bool:
        """Check whether a resource namespace falls inside this scope."""
        if self.kind == ScopeKind.ALL:
            return True
        if self.kind == ScopeKind.NAMED:
            return namespace == self.name
        return False

    def __str__(self) -> str:
        if self.kind == ScopeKind.NAMED:
            return self.name
        return f"<{self.kind.value}>"


@dataclass
class IngressBackend:
    """Backend of an Ingress path or default backend."""
    service_name: Optional[str] = None
    port_number: Optional[int] = None
    port_name: Optional[str] = None
    resource: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["IngressBackend"]:
        if not data:
            return None
        if "service" in data:
            service = data["service"] or {}
            port = service.get("port") or {}
            return cls(
                service_name=service.get("name"),
                port_number=port.get("number"),
                port_name=port.get("name"),
            )
        return cls(resource=data.get("resource"))

    @property
    def is_service(self) -> bool:
        return self.service_name is not None

    def describe(self) -> str:
        if not self.is_service:
            kind = (self.resource or {}).get("kind", "resource")
            name = (self.resource or {}).get("name", "")
            return f"{kind}/{name}"
        port = self.port_number if self.port_number is not None else self.port_name
        return f"{self.service_name}:{port}"


@dataclass
class IngressPath:
    """A single HTTP path of an Ingress rule."""
    path: str = "/"
    path_type: Optional[Union[PathType, str]] = None  # unknown types kept as given
    backend: Optional[IngressBackend] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "IngressPath":
        path_type = data.get("pathType")
        if path_type:
            try:
                path_type = PathType(path_type)
            except ValueError:
                path_type = str(path_type)
        return cls(
            path=data.get("path") or "/",
            path_type=path_type or None,
            backend=IngressBackend.from_dict(data.get("backend")),
        )


@dataclass
class IngressRule:
    """Host-scoped routing rule of an Ingress."""
    host: str = ""
    paths: List[IngressPath] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "IngressRule":
        http = data.get("http") or {}
        return cls(
            host=data.get("host") or "",
            paths=[IngressPath.from_dict(p) for p in http.get("paths") or []],
        )


@dataclass
class IngressTLS:
    """TLS section of an Ingress."""
    hosts: List[str] = field(default_factory=list)
    secret_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "IngressTLS":
        return cls(
            hosts=data.get("hosts") or [],
            secret_name=data.get("secretName"),
        )


@dataclass
class Ingress:
    """A networking.k8s.io/v1 Ingress resource."""
    name: str
    namespace: Optional[str] = None
    ingress_class: Optional[str] = None
    default_backend: Optional[IngressBackend] = None
    rules: List[IngressRule] = field(default_factory=list)
    tls: List[IngressTLS] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict) -> "Ingress":
        metadata = data.get("metadata") or {}
        spec = data.get("spec") or {}
        annotations = metadata.get("annotations") or {}
        if "name" not in metadata:
            raise ValueError("Ingress manifest has no metadata.name")
        return cls(
            name=metadata["name"],
            namespace=metadata.get("namespace"),
            ingress_class=(
                spec.get("ingressClassName")
                or annotations.get(INGRESS_CLASS_ANNOTATION)
            ),
            default_backend=IngressBackend.from_dict(spec.get("defaultBackend")),
            rules=[IngressRule.from_dict(r) for r in spec.get("rules") or []],
            tls=[IngressTLS.from_dict(t) for t in spec.get("tls") or []],
            labels=metadata.get("labels") or {},
            annotations=annotations,
        )

    @property
    def effective_namespace(self) -> str:
        return self.namespace or DEFAULT_NAMESPACE

    @property
    def key(self) -> str:
        return f"{self.effective_namespace}/{self.name}"


@dataclass
class ConversionError:
    """A failure converting one Ingress."""
    message: str
    namespace: str = ""
    name: str = ""

    @classmethod
    def for_ingress(cls, ingress: Ingress, message: str) -> "ConversionError":
        return cls(message=message, namespace=ingress.effective_namespace, name=ingress.name)

    def __str__(self) -> str:
        if self.name:
            return f"{self.namespace}/{self.name}: {self.message}"
        return self.message


Manifest = Dict[str, Any]


@dataclass(frozen=True)
class ConversionResult:
    """Gateways, HTTPRoutes and per-Ingress errors of one conversion."""
    gateways: List[Manifest] = field(default_factory=list)
    http_routes: List[Manifest] = field(default_factory=list)
    errors: List[ConversionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


FormatLike = Union[OutputFormat, str]
