"""
Exceptions raised by the ingress2gw pipeline.

Every fatal condition of a run is an Ingress2GatewayError. Only the CLI
catches them.
"""

from typing import List, Optional, TypeVar

from .types import ConversionError

E = TypeVar("E", bound="Ingress2GatewayError")


class Ingress2GatewayError(Exception):
    """Base class for fatal pipeline errors."""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"{self.stage}: {self.message}"
        return self.message

    def with_stage(self: E, stage: str) -> E:
        """Return this error tagged with the pipeline stage that failed."""
        self.stage = stage
        return self


class ConfigurationError(Ingress2GatewayError):
    """Invalid combination of run options."""


class UnsupportedOutputFormatError(ConfigurationError):
    """Requested output format has no printer."""

    def __init__(self, output_format: str):
        super().__init__(f"{output_format} is not a supported output format")
        self.output_format = output_format


class NamespaceResolutionError(Ingress2GatewayError):
    """Active namespace could not be determined."""


class AcquisitionError(Ingress2GatewayError):
    """Ingress resources could not be read from their source."""


class NoResourcesFoundError(Ingress2GatewayError):
    """Source returned no Ingress resources for the scope."""

    def __init__(self, namespace: str = ""):
        message = "No resources found"
        if namespace:
            message = f"{message} in {namespace} namespace"
        super().__init__(message)
        self.namespace = namespace


class ConversionFailedError(Ingress2GatewayError):
    """One or more Ingresses failed to convert."""

    def __init__(self, errors: List[ConversionError]):
        lines = [f"Encountered {len(errors)} errors"]
        lines.extend(f" # {err}" for err in errors)
        super().__init__("\n".join(lines))
        self.errors = list(errors)
