"""
Print pipeline: resolve namespace, fetch Ingresses, convert, print.
"""

import logging
import sys
from typing import Callable, List, Optional, TextIO

from .converter import ingresses_to_gateways_and_httproutes
from .errors import ConversionFailedError, Ingress2GatewayError
from .namespace import get_namespace_in_current_context, resolve_namespace_scope
from .printer import ResourcePrinter, create_printer, output_result
from .sources import ResourceProvider, create_provider, fetch_ingresses
from .types import ConversionResult, FormatLike, Ingress, NamespaceScope, OutputFormat

logger = logging.getLogger(__name__)

Converter = Callable[[List[Ingress]], ConversionResult]
ProviderFactory = Callable[[str], ResourceProvider]


class PrintRunner:
    """
    Converts Ingresses to Gateways and HTTPRoutes and prints them.

    Args:
        output_format: yaml (default) or json
        input_file: Manifest file to read instead of the cluster
        namespace: Namespace scope, defaults to the current context namespace
        all_namespaces: Process every namespace
        converter: Conversion function
        provider_factory: Builds the resource provider from input_file
        current_namespace: Lookup for the current context namespace
    """

    def __init__(
        self,
        output_format: FormatLike = OutputFormat.YAML,
        input_file: str = "",
        namespace: str = "",
        all_namespaces: bool = False,
        converter: Converter = ingresses_to_gateways_and_httproutes,
        provider_factory: ProviderFactory = create_provider,
        current_namespace: Callable[[], str] = get_namespace_in_current_context,
    ):
        self.output_format = output_format
        self.input_file = input_file or ""
        self.namespace = namespace or ""
        self.all_namespaces = all_namespaces
        self.converter = converter
        self.provider_factory = provider_factory
        self.current_namespace = current_namespace

        self.resource_printer: Optional[ResourcePrinter] = None
        self.namespace_scope = NamespaceScope.unresolved()

    def initialize_resource_printer(self) -> None:
        try:
            self.resource_printer = create_printer(self.output_format)
        except Ingress2GatewayError as e:
            raise e.with_stage("failed to initialize resource printer")

    def initialize_namespace_filter(self) -> None:
        try:
            self.namespace_scope = resolve_namespace_scope(
                namespace=self.namespace,
                all_namespaces=self.all_namespaces,
                input_file_given=bool(self.input_file),
                current_namespace=self.current_namespace,
            )
        except Ingress2GatewayError as e:
            raise e.with_stage("failed to initialize namespace filter")
        logger.info(f"Namespace scope: {self.namespace_scope}")

    def get_ingresses(self) -> List[Ingress]:
        try:
            provider = self.provider_factory(self.input_file)
            ingresses = fetch_ingresses(self.namespace_scope, provider)
        except Ingress2GatewayError as e:
            raise e.with_stage("failed to get ingresses from source")
        logger.info(f"Fetched {len(ingresses)} ingresses")
        return ingresses

    def convert(self, ingresses: List[Ingress]) -> ConversionResult:
        result = self.converter(ingresses)
        if result.errors:
            raise ConversionFailedError(result.errors)
        logger.info(
            f"Converted to {len(result.gateways)} gateways "
            f"and {len(result.http_routes)} httproutes"
        )
        return result

    def print_gateways_and_httproutes(self, stream: Optional[TextIO] = None) -> int:
        """
        Run the pipeline and print the converted resources.

        Args:
            stream: Output sink, defaults to stdout

        Returns:
            Number of resources that failed to print

        Raises:
            Ingress2GatewayError: On any fatal stage failure
        """
        stream = stream or sys.stdout

        self.initialize_resource_printer()
        self.initialize_namespace_filter()
        ingresses = self.get_ingresses()
        result = self.convert(ingresses)

        return output_result(
            self.resource_printer,
            result.gateways,
            result.http_routes,
            stream,
        )
