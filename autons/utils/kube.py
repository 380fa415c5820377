"""Cluster access: kubeconfig loading plus the discovery and listing calls.

Every request carries ``_request_timeout`` and urllib3 retries are disabled,
so each remote call is attempted exactly once and cannot hang forever.
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

import urllib3
import yaml
from kubernetes import client, config
from kubernetes.client.rest import ApiException

from ..config import Config
from ..errors import ClusterAccessError, DiscoveryError, ListingError

logger = logging.getLogger(__name__)

# Ask for metadata only when listing; full JSON is the fallback.
METADATA_ACCEPT = (
    "application/json;as=PartialObjectMetadataList;v=v1;g=meta.k8s.io,"
    "application/json"
)


class GroupVersion(NamedTuple):
    """An API group/version pair. The legacy core group is ``""``."""
    group: str
    version: str

    @property
    def path(self) -> str:
        """URL prefix serving this group/version."""
        if self.group:
            return f"/apis/{self.group}/{self.version}"
        return f"/api/{self.version}"

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


def load_api_client(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> client.ApiClient:
    """
    Build an ApiClient from a kubeconfig path, KUBECONFIG_CONTENT, the default
    kubeconfig location or, failing those, the in-cluster service account.

    An explicit path wins over KUBECONFIG_CONTENT so resolution targets the
    cluster kubectl will talk to.

    Args:
        kubeconfig: Explicit kubeconfig path (from a --kubeconfig flag)
        context: Kubeconfig context to use (from a --context flag)

    Returns:
        ApiClient that never retries failed requests

    Raises:
        ClusterAccessError: If no configuration can be loaded
    """
    configuration = client.Configuration()

    try:
        if kubeconfig:
            resolved = Path(os.path.expanduser(kubeconfig)).resolve()
            if not resolved.exists():
                raise ClusterAccessError(f"Kubeconfig not found: {resolved}")
            config.load_kube_config(
                config_file=str(resolved), context=context, client_configuration=configuration
            )
        # CI/CD secret-based loading
        elif "KUBECONFIG_CONTENT" in os.environ:
            config_dict = yaml.safe_load(os.environ["KUBECONFIG_CONTENT"])
            config.load_kube_config_from_dict(
                config_dict, context=context, client_configuration=configuration
            )
        else:
            try:
                config.load_kube_config(context=context, client_configuration=configuration)
            except config.ConfigException as e:
                if context:
                    raise
                logger.debug(f"No usable kubeconfig ({e}), trying in-cluster config")
                config.load_incluster_config(client_configuration=configuration)
    except (config.ConfigException, yaml.YAMLError) as e:
        raise ClusterAccessError(f"Couldn't initialize client: {e}") from e

    configuration.retries = False
    return client.ApiClient(configuration=configuration)


class ClusterClient:
    """Discovery and object listing against one cluster."""

    def __init__(self, api_client: client.ApiClient, timeout: Optional[float] = None):
        self.api_client = api_client
        self.timeout = Config.API_TIMEOUT if timeout is None else timeout

    def _get(self, path: str, accept: str = "application/json") -> Dict[str, Any]:
        logger.debug(f"GET {path}")
        return self.api_client.call_api(
            path,
            "GET",
            header_params={"Accept": accept},
            response_type="object",
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
            _request_timeout=self.timeout,
        )

    def list_api_groups(self) -> List[GroupVersion]:
        """List every served group/version, core group first.

        Raises:
            DiscoveryError: If the API server cannot be queried
        """
        try:
            core = self._get("/api")
            groups = self._get("/apis")
        except (ApiException, urllib3.exceptions.HTTPError) as e:
            raise DiscoveryError(f"Error while listing API groups: {e}") from e

        result = [GroupVersion("", version) for version in core.get("versions") or []]
        for group in groups.get("groups") or []:
            for version in group.get("versions") or []:
                result.append(GroupVersion(group["name"], version["version"]))
        return result

    def list_api_resources(self, group_version: GroupVersion) -> List[Dict[str, Any]]:
        """List the raw resource entries served under one group/version.

        Raises:
            DiscoveryError: If the API server cannot be queried
        """
        try:
            resource_list = self._get(group_version.path)
        except (ApiException, urllib3.exceptions.HTTPError) as e:
            raise DiscoveryError(f"Error while listing resources for {group_version}: {e}") from e
        return resource_list.get("resources") or []

    def list_objects(self, group_version: GroupVersion, plural: str) -> List[Tuple[str, Optional[str]]]:
        """List (name, namespace) of every object of a resource across all namespaces.

        Cluster-scoped objects carry a namespace of ``None``.

        Raises:
            ListingError: If the objects cannot be listed
        """
        try:
            object_list = self._get(f"{group_version.path}/{plural}", accept=METADATA_ACCEPT)
        except (ApiException, urllib3.exceptions.HTTPError) as e:
            raise ListingError(f"Error finding resources {plural} in {group_version}: {e}") from e

        objects = []
        for item in object_list.get("items") or []:
            metadata = item.get("metadata") or {}
            objects.append((metadata.get("name"), metadata.get("namespace")))
        return objects
