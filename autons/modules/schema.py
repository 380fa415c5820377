"""
API schema resolution: one discovery pass producing an immutable resource catalog.

Descriptors are keyed by plural name. The same plural served by several groups
(core ``events`` and ``events.k8s.io`` ``events``) is merged into one descriptor.
Each non-core entry is also reachable as ``<plural>.<group>``, restricted to
that group. Alias conflicts between different plurals are settled by tier
(plural, then singular, then short name) and then by discovery order.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from ..errors import UnknownResourceError
from ..utils import OrderedSet
from ..utils.kube import ClusterClient, GroupVersion

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ResourceDescriptor:
    """A resource kind with every alias and group/version that serves it."""
    name: str
    plural: str
    aliases: Tuple[str, ...]
    group_versions: Tuple[GroupVersion, ...]

    def __post_init__(self):
        if self.name not in self.aliases:
            raise ValueError(f"Descriptor {self.name} must list its own name as an alias")
        if not self.group_versions:
            raise ValueError(f"Descriptor {self.name} has no group/version")


class ResourceCatalog(Mapping):
    """Read-only alias → ResourceDescriptor mapping for one invocation."""

    def __init__(self, by_alias: Dict[str, ResourceDescriptor]):
        self._by_alias = MappingProxyType(dict(by_alias))

    def __getitem__(self, alias: str) -> ResourceDescriptor:
        return self._by_alias[alias]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_alias)

    def __len__(self) -> int:
        return len(self._by_alias)

    def lookup(self, alias: str) -> ResourceDescriptor:
        """Exact alias lookup.

        Raises:
            UnknownResourceError: If no descriptor answers to ``alias``
        """
        try:
            return self._by_alias[alias]
        except KeyError:
            raise UnknownResourceError(alias) from None

    def descriptors(self) -> List[ResourceDescriptor]:
        """Distinct descriptors in discovery order."""
        return list({d.name: d for d in self._by_alias.values()}.values())


class _Builder:
    """Mutable accumulator for one descriptor; frozen by build_catalog."""

    def __init__(self, name: str, plural: str):
        self.name = name
        self.plural = plural
        self.singulars = OrderedSet()
        self.short_names = OrderedSet()
        self.group_versions = OrderedSet()


def _is_searchable(entry: Dict[str, Any]) -> bool:
    name = entry.get("name") or ""
    if not name or "/" in name:
        return False
    verbs = entry.get("verbs")
    return not verbs or "list" in verbs


def build_catalog(entries: Iterable[Tuple[GroupVersion, Dict[str, Any]]]) -> ResourceCatalog:
    """
    Build a catalog from (group/version, discovery resource entry) pairs.

    Args:
        entries: Pairs in discovery order; entries are the raw ``APIResource``
            dicts with ``name``, ``singularName``, ``kind`` and ``shortNames``

    Returns:
        Immutable ResourceCatalog
    """
    builders: Dict[str, _Builder] = {}

    for group_version, entry in entries:
        if not _is_searchable(entry):
            continue
        plural = entry["name"]
        keys = [plural]
        if group_version.group:
            keys.append(f"{plural}.{group_version.group}")
        for key in keys:
            builder = builders.get(key)
            if builder is None:
                builder = builders[key] = _Builder(key, plural)
            # Older servers and aggregated APIs report an empty singularName
            singular = entry.get("singularName") or (entry.get("kind") or "").lower()
            if singular:
                builder.singulars.add(singular)
            builder.short_names.update(entry.get("shortNames") or [])
            builder.group_versions.add(group_version)

    owner: Dict[str, str] = {}
    tiers = (
        lambda b: [b.name],
        lambda b: b.singulars,
        lambda b: b.short_names,
    )
    for tier in tiers:
        for builder in builders.values():
            for alias in tier(builder):
                if alias not in owner:
                    owner[alias] = builder.name
                elif owner[alias] != builder.name:
                    logger.debug(f"Alias {alias} of {builder.name} already belongs to {owner[alias]}")

    aliases: Dict[str, List[str]] = {name: [] for name in builders}
    for alias, name in owner.items():
        aliases[name].append(alias)

    descriptors = {
        name: ResourceDescriptor(
            name=name,
            plural=builder.plural,
            aliases=tuple(aliases[name]),
            group_versions=tuple(builder.group_versions),
        )
        for name, builder in builders.items()
    }
    return ResourceCatalog({alias: descriptors[name] for alias, name in owner.items()})


def discover(cluster: ClusterClient) -> ResourceCatalog:
    """Query the cluster's discovery endpoints once and build the catalog.

    Raises:
        DiscoveryError: If any discovery call fails
    """
    entries = []
    for group_version in cluster.list_api_groups():
        for entry in cluster.list_api_resources(group_version):
            entries.append((group_version, entry))

    catalog = build_catalog(entries)
    logger.debug(f"Discovered {len(catalog.descriptors())} resource types, {len(catalog)} aliases")
    return catalog
