"""
ingress2gw - Convert Ingress resources to Gateway API resources.

Reads Ingresses from a cluster or a manifest file and prints the
equivalent Gateways and HTTPRoutes as YAML or JSON.
"""

__version__ = "0.1.0"

from .types import (
    OutputFormat,
    PathType,
    ScopeKind,
    NamespaceScope,
    Ingress,
    IngressBackend,
    IngressPath,
    IngressRule,
    IngressTLS,
    ConversionError,
    ConversionResult,
)

from .errors import (
    Ingress2GatewayError,
    ConfigurationError,
    UnsupportedOutputFormatError,
    NamespaceResolutionError,
    AcquisitionError,
    NoResourcesFoundError,
    ConversionFailedError,
)

from .namespace import (
    get_namespace_in_current_context,
    resolve_namespace_scope,
)

from .sources import (
    ResourceProvider,
    FileResourceProvider,
    ClusterResourceProvider,
    create_provider,
    fetch_ingresses,
)

from .converter import ingresses_to_gateways_and_httproutes
from .printer import ResourcePrinter, YamlPrinter, JsonPrinter, create_printer, output_result
from .runner import PrintRunner

__all__ = [
    # Types
    "OutputFormat",
    "PathType",
    "ScopeKind",
    "NamespaceScope",
    "Ingress",
    "IngressBackend",
    "IngressPath",
    "IngressRule",
    "IngressTLS",
    "ConversionError",
    "ConversionResult",
    # Errors
    "Ingress2GatewayError",
    "ConfigurationError",
    "UnsupportedOutputFormatError",
    "NamespaceResolutionError",
    "AcquisitionError",
    "NoResourcesFoundError",
    "ConversionFailedError",
    # Namespace
    "get_namespace_in_current_context",
    "resolve_namespace_scope",
    # Sources
    "ResourceProvider",
    "FileResourceProvider",
    "ClusterResourceProvider",
    "create_provider",
    "fetch_ingresses",
    # Conversion and printing
    "ingresses_to_gateways_and_httproutes",
    "ResourcePrinter",
    "YamlPrinter",
    "JsonPrinter",
    "create_printer",
    "output_result",
    "PrintRunner",
]
