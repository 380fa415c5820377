"""
Resolution pipeline: schema discovery, target parsing, namespace search, dispatch.
"""
from .schema import ResourceCatalog, ResourceDescriptor, build_catalog, discover
from .target import TargetReference, resolve_target
from .namespace import find_namespaces, resolve_namespace
from .dispatch import dispatch, has_namespace_flag, run_kubectl, with_namespace

__all__ = [
    'ResourceCatalog',
    'ResourceDescriptor',
    'build_catalog',
    'discover',
    'TargetReference',
    'resolve_target',
    'find_namespaces',
    'resolve_namespace',
    'dispatch',
    'has_namespace_flag',
    'run_kubectl',
    'with_namespace',
]
