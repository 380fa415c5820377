"""Find the one namespace holding the target object."""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from ..errors import AmbiguousNamespaceError, NotFoundError
from ..utils import OrderedSet
from ..utils.kube import ClusterClient, GroupVersion
from .target import TargetReference

logger = logging.getLogger(__name__)

def _matching_namespaces(cluster: ClusterClient, group_version: GroupVersion, target: TargetReference) -> List[str]:
    objects: List[Tuple[str, Optional[str]]] = cluster.list_objects(group_version, target.descriptor.plural)
    matches = [namespace for name, namespace in objects if name == target.name and namespace]
    logger.debug(f"{len(matches)} match(es) for {target.name} in {target.descriptor.plural} ({group_version})")
    return matches


def find_namespaces(cluster: ClusterClient, target: TargetReference, max_workers: int = 1) -> OrderedSet:
    """
    Collect every namespace holding an object named ``target.name``.

    Args:
        cluster: Cluster client used for listing
        target: Resolved resource kind and instance name
        max_workers: Listing calls run concurrently; 1 keeps them sequential

    Returns:
        Namespaces in group/version order, without duplicates

    Raises:
        ListingError: If any listing call fails
    """
    group_versions = target.descriptor.group_versions
    namespaces = OrderedSet()

    if max_workers > 1 and len(group_versions) > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(group_versions))) as executor:
            futures = [
                executor.submit(_matching_namespaces, cluster, gv, target)
                for gv in group_versions
            ]
            # Merge in submission order so the result matches the sequential one
            for future in futures:
                namespaces.update(future.result())
    else:
        for gv in group_versions:
            namespaces.update(_matching_namespaces(cluster, gv, target))

    return namespaces


def resolve_namespace(cluster: ClusterClient, target: TargetReference, max_workers: int = 1) -> str:
    """Return the single namespace holding the target.

    Raises:
        NotFoundError: If no namespace holds it
        AmbiguousNamespaceError: If more than one namespace does
    """
    namespaces = find_namespaces(cluster, target, max_workers=max_workers)
    kind = target.descriptor.name

    if not namespaces:
        raise NotFoundError(kind, target.name)
    if len(namespaces) > 1:
        raise AmbiguousNamespaceError(kind, target.name, namespaces)

    namespace = namespaces.first()
    logger.info(f"Resolved {kind}/{target.name} to namespace {namespace}")
    return namespace
