"""Exceptions raised by the resolution pipeline.

Core modules raise these and never exit the process; ``autons.cli`` maps each
one to a diagnostic on stderr and its ``exit_code``.
"""
from typing import Iterable

USAGE = (
    "use with kubectl autons <command> "
    "[<resource-type> <resource>|<resource-type>/<resource>]"
)


class AutonsError(Exception):
    """Base exception for autons errors."""
    exit_code = 1


class UsageError(AutonsError):
    """Exception raised for invalid command line input."""
    exit_code = 2


class TargetParseError(UsageError):
    """Exception raised when the resource token cannot be parsed."""
    pass


class UnknownResourceError(UsageError):
    """Exception raised when a resource type is not served by the cluster."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(
            f"Unknown resource type '{alias}', make sure it is provided in the format "
            "<resource-type>/<resource> or <resource-type> <resource>, "
            "e.g: kubectl autons get pods <pod-name>"
        )


class ClusterAccessError(AutonsError):
    """Exception raised when no cluster configuration can be loaded."""
    exit_code = 3


class DiscoveryError(AutonsError):
    """Exception raised when the API server discovery calls fail."""
    exit_code = 3


class ListingError(AutonsError):
    """Exception raised when listing objects of a resource type fails."""
    exit_code = 3


class NotFoundError(AutonsError):
    """Exception raised when no namespace holds the requested object."""
    exit_code = 4

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"Couldn't find namespace for resource {name} of kind {kind}")


class AmbiguousNamespaceError(AutonsError):
    """Exception raised when the requested object exists in several namespaces."""
    exit_code = 5

    def __init__(self, kind: str, name: str, namespaces: Iterable[str]):
        self.kind = kind
        self.name = name
        self.namespaces = list(namespaces)
        super().__init__(
            f"Found multiple namespaces for {kind} {name}: {', '.join(self.namespaces)}. "
            "Please specify a namespace manually with --namespace"
        )


class CommandNotFoundError(AutonsError):
    """Exception raised when the delegated executable is not installed."""
    exit_code = 127

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(f"Required executable '{executable}' not found in PATH")
