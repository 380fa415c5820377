import sys
from unittest.mock import MagicMock

import pytest

import autons.modules.dispatch  # noqa: F401
from autons.errors import ListingError
from autons.modules.schema import build_catalog
from autons.utils.kube import GroupVersion

CORE_V1 = GroupVersion("", "v1")
APPS_V1 = GroupVersion("apps", "v1")
EVENTS_V1 = GroupVersion("events.k8s.io", "v1")
METRICS = GroupVersion("metrics.k8s.io", "v1beta1")
CERT_MANAGER = GroupVersion("cert-manager.io", "v1")
KNATIVE = GroupVersion("networking.internal.knative.dev", "v1alpha1")

LIST_VERBS = ["get", "list", "watch"]


def resource(name, singular="", short_names=None, verbs=None, namespaced=True, kind=None):
    entry = {
        "name": name,
        "singularName": singular,
        "namespaced": namespaced,
        "verbs": LIST_VERBS if verbs is None else verbs,
    }
    if kind:
        entry["kind"] = kind
    if short_names:
        entry["shortNames"] = short_names
    return entry


DISCOVERY = {
    CORE_V1: [
        resource("pods", "pod", ["po"]),
        resource("pods/log", verbs=["get"]),
        resource("services", "service", ["svc"]),
        resource("configmaps", "", ["cm"], kind="ConfigMap"),
        resource("events", "event", ["ev"]),
        resource("nodes", "node", ["no"], namespaced=False),
        resource("bindings", "binding", verbs=["create"]),
    ],
    APPS_V1: [
        resource("deployments", "deployment", ["deploy"]),
    ],
    EVENTS_V1: [
        resource("events", "event", ["ev"]),
    ],
    METRICS: [
        resource("pods", "", verbs=["get", "list"]),
    ],
    CERT_MANAGER: [
        resource("certificates", "certificate", ["cert", "certs"]),
    ],
    KNATIVE: [
        resource("certificates", "certificate", ["kcert"]),
    ],
}


class FakeCluster:
    """In-memory stand-in for ClusterClient."""

    def __init__(self, discovery=None, objects=None):
        self.discovery = DISCOVERY if discovery is None else discovery
        self.objects = objects or {}
        self.failing = set()
        self.calls = []

    def list_api_groups(self):
        self.calls.append(("groups",))
        return list(self.discovery)

    def list_api_resources(self, group_version):
        self.calls.append(("resources", group_version))
        return self.discovery[group_version]

    def list_objects(self, group_version, plural):
        self.calls.append(("objects", group_version, plural))
        if (group_version, plural) in self.failing:
            raise ListingError(f"Error finding resources {plural} in {group_version}: boom")
        return list(self.objects.get((group_version, plural), []))


@pytest.fixture
def cluster():
    return FakeCluster()


@pytest.fixture
def catalog():
    return build_catalog(
        (gv, entry) for gv, entries in DISCOVERY.items() for entry in entries
    )


class KubectlRuns:
    """Records kubectl invocations in place of subprocess.Popen."""

    def __init__(self, returncode=0):
        self.returncode = returncode
        self.commands = []
        self.kwargs = []

    def popen(self, command, **kwargs):
        self.commands.append(command)
        self.kwargs.append(kwargs)
        process = MagicMock()
        process.wait.return_value = self.returncode
        return process


@pytest.fixture
def kubectl_runs(monkeypatch):
    runs = KubectlRuns()
    monkeypatch.setattr(sys.modules["autons.modules.dispatch"].subprocess, "Popen", runs.popen)
    return runs
