"""Parse a verb and resource token into the object to look for."""
from dataclasses import dataclass
from typing import List, Sequence

from ..errors import TargetParseError
from .schema import ResourceCatalog, ResourceDescriptor

LOGS_VERB = "logs"
PORT_FORWARD_VERB = "port-forward"
POD_KIND = "pods"
POD_PREFIXES = ("pod/", "pods/")

FORMATS = (
    "make sure it is provided in the format <resource-type>/<resource> "
    "or <resource-type> <resource>"
)

@dataclass(frozen=True)
class TargetReference:
    """A resource kind and the instance name to locate."""
    descriptor: ResourceDescriptor
    name: str


def _split(token: str, example: str) -> List[str]:
    parts = token.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise TargetParseError(f"Couldn't parse resource name '{token}', {FORMATS}, e.g: {example}")
    return parts


def resolve_target(verb: str, args: Sequence[str], catalog: ResourceCatalog) -> TargetReference:
    """
    Resolve the resource the command refers to.

    Args:
        verb: The kubectl verb (``logs``, ``get``, ``port-forward``...)
        args: Arguments following the verb; ``args[0]`` is the resource token
            and ``args[1]``, when present, the instance name
        catalog: Resource catalog used for alias lookup

    Returns:
        TargetReference for the namespace search

    Raises:
        TargetParseError: If the token is malformed or the name is missing
        UnknownResourceError: If the resource type is not served by the cluster
    """
    if not args:
        raise TargetParseError(f"Missing resource, {FORMATS}")
    token = args[0]
    if token.startswith("-"):
        raise TargetParseError(
            f"Expected a resource before flag '{token}', {FORMATS}, e.g: kubectl autons {verb} pod/<pod-name>"
        )

    if verb == LOGS_VERB:
        name = token
        for prefix in POD_PREFIXES:
            if name.startswith(prefix):
                name = name[len(prefix):]
                break
        if not name or "/" in name:
            raise TargetParseError(
                f"Couldn't parse pod name '{token}', e.g: kubectl autons logs pod/<pod-name>"
            )
        return TargetReference(catalog.lookup(POD_KIND), name)

    if verb == PORT_FORWARD_VERB:
        example = "kubectl autons port-forward pods/<pod-name>"
        if "/" not in token:
            return TargetReference(catalog.lookup(POD_KIND), token)
        alias, name = _split(token, example)
        return TargetReference(catalog.lookup(alias), name)

    example = f"kubectl autons {verb} pods <pod-name>"
    if "/" in token:
        alias, name = _split(token, example)
        return TargetReference(catalog.lookup(alias), name)

    if "," in token:
        raise TargetParseError(f"Multiple resource types '{token}' are not supported, {FORMATS}")
    descriptor = catalog.lookup(token)
    if len(args) < 2 or not args[1] or args[1].startswith("-"):
        raise TargetParseError(f"Couldn't parse resource name, {FORMATS}, e.g: {example}")
    return TargetReference(descriptor, args[1])
