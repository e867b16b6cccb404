"""
Resource printers for converted Gateway API resources.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, List, TextIO

import yaml

from .errors import UnsupportedOutputFormatError
from .types import FormatLike, Manifest, OutputFormat

logger = logging.getLogger(__name__)


class ResourcePrinter(ABC):
    """Serializes resources to a stream, one document per resource."""

    @abstractmethod
    def print_obj(self, obj: Manifest, stream: TextIO) -> None:
        """Write a single resource to the stream."""


class YamlPrinter(ResourcePrinter):
    """Prints resources as a multi-document YAML stream."""

    def __init__(self):
        self.printed = 0

    def print_obj(self, obj: Manifest, stream: TextIO) -> None:
        # Serialize first so a failing record writes nothing.
        content = yaml.safe_dump(obj, default_flow_style=False, sort_keys=False)
        if self.printed:
            stream.write("---\n")
        stream.write(content)
        self.printed += 1


class JsonPrinter(ResourcePrinter):
    """Prints resources as indented JSON documents."""

    def print_obj(self, obj: Manifest, stream: TextIO) -> None:
        content = json.dumps(obj, indent=4)
        stream.write(content + "\n")


PRINTERS = {
    OutputFormat.YAML: YamlPrinter,
    OutputFormat.JSON: JsonPrinter,
}


def create_printer(output_format: FormatLike = OutputFormat.YAML) -> ResourcePrinter:
    """
    Create the printer for an output format.

    Args:
        output_format: OutputFormat or its value; empty string means YAML

    Returns:
        ResourcePrinter instance

    Raises:
        UnsupportedOutputFormatError: If the format has no printer
    """
    value = output_format.value if isinstance(output_format, OutputFormat) else output_format
    try:
        fmt = OutputFormat(value or OutputFormat.YAML.value)
    except ValueError:
        raise UnsupportedOutputFormatError(str(value)) from None
    return PRINTERS[fmt]()


def resource_label(obj: Any) -> str:
    if isinstance(obj, dict):
        name = (obj.get("metadata") or {}).get("name", "<unnamed>")
        return f"{name} {obj.get('kind', 'resource')}"
    return "<invalid> resource"


def output_result(
    printer: ResourcePrinter,
    gateways: List[Manifest],
    http_routes: List[Manifest],
    stream: TextIO,
) -> int:
    """
    Print Gateways then HTTPRoutes, continuing past records that fail.

    Args:
        printer: Printer for the run's output format
        gateways: Gateway manifests in order
        http_routes: HTTPRoute manifests in order
        stream: Output sink

    Returns:
        Number of records that could not be printed
    """
    failures = 0
    for obj in list(gateways) + list(http_routes):
        try:
            printer.print_obj(obj, stream)
        except (yaml.YAMLError, TypeError, ValueError) as e:
            failures += 1
            label = resource_label(obj)
            logger.warning(f"Failed to print {label}: {e}")
            stream.write(f"# Error printing {label}: {e}\n")
    return failures
