"""
Ingress to Gateway API conversion.

Ingresses are aggregated into one Gateway per (namespace, ingress class)
and one HTTPRoute per (namespace, ingress class, host). Conversion is best
effort: an Ingress that cannot be converted contributes errors and no
output, the others still convert.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from .types import (
    ConversionError,
    ConversionResult,
    Ingress,
    IngressBackend,
    IngressPath,
    Manifest,
    PathType,
)

GATEWAY_API_VERSION = "gateway.networking.k8s.io/v1beta1"

PATH_MATCH_TYPES = {
    PathType.PREFIX: "PathPrefix",
    PathType.EXACT: "Exact",
}


def name_from_host(host: str) -> str:
    """Build a resource name fragment from a host (e.g. '*.foo.com' -> 'wildcard-foo-com')."""
    if not host:
        return "all-hosts"
    return host.replace("*", "wildcard").replace(".", "-")


def unique_name(base: str, taken: Set[str]) -> str:
    """Reserve base, or base with a numeric suffix if base is already taken."""
    name = base
    suffix = 2
    while name in taken:
        name = f"{base}-{suffix}"
        suffix += 1
    taken.add(name)
    return name


@dataclass
class RouteRule:
    """Paths converted from one Ingress path entry."""
    host: str
    path: str
    match_type: str
    backend_ref: Dict[str, Any]


@dataclass
class GatewayBuilder:
    """Accumulates listeners of one Gateway, one per (host, protocol)."""
    name: str
    namespace: str
    listeners: Dict[Tuple[str, str], Dict[str, Any]] = field(default_factory=dict)
    listener_names: Set[str] = field(default_factory=set)

    def add_listener(self, host: str, protocol: str, port: int, **extra: Any) -> None:
        if (host, protocol) in self.listeners:
            return
        base = f"{name_from_host(host)}-{protocol.lower()}"
        listener: Dict[str, Any] = {"name": unique_name(base, self.listener_names)}
        if host:
            listener["hostname"] = host
        listener.update({"port": port, "protocol": protocol})
        listener.update(extra)
        self.listeners[(host, protocol)] = listener

    def add_http_listener(self, host: str) -> None:
        self.add_listener(host, "HTTP", 80)

    def add_https_listener(self, host: str, secret_name: str) -> None:
        self.add_listener(
            host, "HTTPS", 443,
            tls={"certificateRefs": [{"name": secret_name}]},
        )

    def build(self) -> Manifest:
        metadata: Dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace
        return {
            "apiVersion": GATEWAY_API_VERSION,
            "kind": "Gateway",
            "metadata": metadata,
            "spec": {
                "gatewayClassName": self.name,
                "listeners": list(self.listeners.values()),
            },
        }


@dataclass
class HTTPRouteBuilder:
    """Accumulates rules of one HTTPRoute."""
    name: str
    namespace: str
    gateway_name: str
    host: str
    rules: Dict[Tuple[str, str], List[Dict[str, Any]]] = field(default_factory=dict)

    def add_rule(self, rule: RouteRule) -> None:
        backend_refs = self.rules.setdefault((rule.match_type, rule.path), [])
        if rule.backend_ref not in backend_refs:
            backend_refs.append(rule.backend_ref)

    def build(self) -> Manifest:
        metadata: Dict[str, Any] = {"name": self.name}
        if self.namespace:
            metadata["namespace"] = self.namespace

        spec: Dict[str, Any] = {"parentRefs": [{"name": self.gateway_name}]}
        if self.host:
            spec["hostnames"] = [self.host]
        spec["rules"] = [
            {
                "matches": [{"path": {"type": match_type, "value": path}}],
                "backendRefs": backend_refs,
            }
            for (match_type, path), backend_refs in self.rules.items()
        ]
        return {
            "apiVersion": GATEWAY_API_VERSION,
            "kind": "HTTPRoute",
            "metadata": metadata,
            "spec": spec,
        }


def convert_backend(backend: Optional[IngressBackend], path: str) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Convert an Ingress backend to an HTTPRoute backendRef.

    Returns:
        (backend_ref, None) on success, (None, error message) otherwise
    """
    if backend is None:
        return None, f"path {path} has no backend"
    if not backend.is_service:
        return None, f"path {path}: backend {backend.describe()} is not a service, resource backends are not supported"
    if backend.port_number is None:
        if backend.port_name:
            return None, f"path {path}: named port {backend.port_name} of service {backend.service_name} is not supported"
        return None, f"path {path}: service {backend.service_name} has no port"
    return {"name": backend.service_name, "port": backend.port_number}, None


def convert_path(host: str, entry: IngressPath) -> Tuple[Optional[RouteRule], List[str]]:
    """Convert one Ingress path entry, collecting every problem found."""
    problems = []

    match_type = None
    if entry.path_type is None:
        problems.append(f"path {entry.path} has no path type")
    elif entry.path_type not in PATH_MATCH_TYPES:
        path_type = getattr(entry.path_type, "value", entry.path_type)
        problems.append(f"path {entry.path}: path type {path_type} is not supported")
    else:
        match_type = PATH_MATCH_TYPES[entry.path_type]

    backend_ref, backend_problem = convert_backend(entry.backend, entry.path)
    if backend_problem:
        problems.append(backend_problem)

    if problems:
        return None, problems
    return RouteRule(host=host, path=entry.path, match_type=match_type, backend_ref=backend_ref), []


def convert_ingress(ingress: Ingress) -> Tuple[List[RouteRule], List[ConversionError]]:
    """
    Convert the rules of a single Ingress.

    Args:
        ingress: Ingress to convert

    Returns:
        (route rules, errors); rules are empty whenever errors are not
    """
    problems: List[str] = []
    if not ingress.ingress_class:
        problems.append("ingress class is not specified")

    rules: List[RouteRule] = []
    for ingress_rule in ingress.rules:
        for entry in ingress_rule.paths:
            rule, path_problems = convert_path(ingress_rule.host, entry)
            problems.extend(path_problems)
            if rule:
                rules.append(rule)

    if ingress.default_backend is not None:
        backend_ref, problem = convert_backend(ingress.default_backend, "default backend")
        if problem:
            problems.append(problem)
        else:
            rules.append(RouteRule(host="", path="/", match_type="PathPrefix", backend_ref=backend_ref))

    if problems:
        return [], [ConversionError.for_ingress(ingress, p) for p in problems]
    return rules, []


def ingresses_to_gateways_and_httproutes(ingresses: List[Ingress]) -> ConversionResult:
    """
    Convert Ingresses to Gateways and HTTPRoutes.

    Args:
        ingresses: Ingresses in source order

    Returns:
        ConversionResult with resources in first-seen order
    """
    gateways: Dict[Tuple[str, str], GatewayBuilder] = {}
    routes: Dict[Tuple[str, str, str], HTTPRouteBuilder] = {}
    route_names: Dict[str, Set[str]] = {}
    errors: List[ConversionError] = []

    for ingress in ingresses:
        rules, ingress_errors = convert_ingress(ingress)
        if ingress_errors:
            errors.extend(ingress_errors)
            continue

        namespace = ingress.namespace or ""
        class_name = ingress.ingress_class
        gateway = gateways.setdefault(
            (namespace, class_name),
            GatewayBuilder(name=class_name, namespace=namespace),
        )

        for rule in rules:
            gateway.add_http_listener(rule.host)
            route = routes.get((namespace, class_name, rule.host))
            if route is None:
                route = HTTPRouteBuilder(
                    name=unique_name(
                        f"{ingress.name}-{name_from_host(rule.host)}",
                        route_names.setdefault(namespace, set()),
                    ),
                    namespace=namespace,
                    gateway_name=class_name,
                    host=rule.host,
                )
                routes[(namespace, class_name, rule.host)] = route
            route.add_rule(rule)

        for tls in ingress.tls:
            if not tls.secret_name:
                continue
            for host in tls.hosts:
                gateway.add_https_listener(host, tls.secret_name)

    return ConversionResult(
        gateways=[g.build() for g in gateways.values()],
        http_routes=[r.build() for r in routes.values()],
        errors=errors,
    )
