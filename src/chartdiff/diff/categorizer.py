"""Resource categorization — kind tables, path cues, and category ranking.

The lookup tables are module-level frozen constants shared by every
invocation.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from chartdiff.diff.models import ResourceChange

OTHER = "Other"
CUSTOM_RESOURCES = "Custom Resources"
ALL_CHANGES = "All Changes"
METADATA = "Metadata & Tags"
STATUS = "Status"

KIND_CATEGORIES: Mapping[str, str] = MappingProxyType({
    # Workloads
    "Deployment": "Workloads",
    "StatefulSet": "Workloads",
    "DaemonSet": "Workloads",
    "ReplicaSet": "Workloads",
    "Job": "Workloads",
    "CronJob": "Workloads",
    "Pod": "Workloads",
    # Services
    "Service": "Services",
    "Endpoints": "Services",
    "EndpointSlice": "Services",
    # Networking
    "Ingress": "Networking",
    "IngressClass": "Networking",
    "NetworkPolicy": "Networking",
    # Storage
    "PersistentVolume": "Storage",
    "PersistentVolumeClaim": "Storage",
    "StorageClass": "Storage",
    "VolumeAttachment": "Storage",
    # Configuration
    "ConfigMap": "Configuration",
    "Secret": "Configuration",
    # RBAC
    "ServiceAccount": "RBAC",
    "Role": "RBAC",
    "RoleBinding": "RBAC",
    "ClusterRole": "RBAC",
    "ClusterRoleBinding": "RBAC",
    # Policy
    "PodDisruptionBudget": "Policy",
    "PodSecurityPolicy": "Policy",
    "LimitRange": "Policy",
    "ResourceQuota": "Policy",
    "PriorityClass": "Policy",
    # Autoscaling
    "HorizontalPodAutoscaler": "Autoscaling",
    "VerticalPodAutoscaler": "Autoscaling",
})

KNOWN_KINDS: frozenset[str] = frozenset(KIND_CATEGORIES) | frozenset({
    "Namespace",
    "Node",
    "Event",
    "ComponentStatus",
    "ReplicationController",
    "PodTemplate",
    "ControllerRevision",
    "CustomResourceDefinition",
    "APIService",
    "MutatingWebhookConfiguration",
    "ValidatingWebhookConfiguration",
    "ValidatingAdmissionPolicy",
    "ValidatingAdmissionPolicyBinding",
    "CSIDriver",
    "CSINode",
    "CSIStorageCapacity",
    "Lease",
    "RuntimeClass",
    "CertificateSigningRequest",
    "FlowSchema",
    "PriorityLevelConfiguration",
})

# Checked in order once a path is known to touch ".spec."
_SPEC_CUES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("containers", "image", "template"), "Container & Image"),
    (("replicas", "scale"), "Scaling"),
    (("service", "port", "type"), "Service Configuration"),
    (("selector", "matchlabels"), "Selectors & Matching"),
    (("resources", "limits", "requests"), "Resources"),
    (("env", "configmap", "secret"), "Environment & Config"),
    (("volume", "persistentvolume"), "Storage & Volumes"),
    (("ingress", "host", "path"), "Networking"),
)

# Field-level categories first, then resource-level ones.
CATEGORY_RANK: Tuple[str, ...] = (
    "Container & Image",
    "Scaling",
    "Resources",
    "Service Configuration",
    "Networking",
    "Environment & Config",
    "Storage & Volumes",
    "Selectors & Matching",
    "Configuration Data",
    "Spec Changes",
    "Workloads",
    "Services",
    "Storage",
    "Configuration",
    "RBAC",
    "Policy",
    "Autoscaling",
    CUSTOM_RESOURCES,
)

# Always last, after unranked categories.
CATEGORY_TAIL: Tuple[str, ...] = (METADATA, STATUS, ALL_CHANGES, OTHER)


def _categorize_path(path: str) -> Optional[str]:
    """Return a field-level category for *path*, or None when no cue matches."""
    p = f".{path.lower()}."
    if "metadata.labels" in p or "metadata.annotations" in p:
        return METADATA
    if ".status." in p:
        return STATUS
    if ".spec." in p:
        for cues, category in _SPEC_CUES:
            if any(cue in p for cue in cues):
                return category
        return "Spec Changes"
    if ".data." in p or "configmap" in p or "secret" in p:
        return "Configuration Data"
    return None


def categorize(path: str, kind: str) -> str:
    """Assign a human-meaningful category from a field path and resource kind.

    Resolution order: path cues, exact kind table, custom-resource
    detection, then the kind itself (``Other`` when empty).
    """
    if path:
        category = _categorize_path(path)
        if category is not None:
            return category
    if kind in KIND_CATEGORIES:
        return KIND_CATEGORIES[kind]
    if kind and kind not in KNOWN_KINDS:
        return CUSTOM_RESOURCES
    return kind or OTHER


def category_sort_key(category: str) -> Tuple[int, int, str]:
    """Ranked categories, then unranked alphabetically, then the tail."""
    if category in CATEGORY_RANK:
        return (0, CATEGORY_RANK.index(category), "")
    if category in CATEGORY_TAIL:
        return (2, CATEGORY_TAIL.index(category), "")
    return (1, 0, category)


def categorize_all(changes: Iterable[ResourceChange]) -> List[ResourceChange]:
    """Fill in the category of every change that does not have one yet."""
    result: List[ResourceChange] = []
    for change in changes:
        if not change.category:
            change.category = categorize(change.path, change.kind)
        result.append(change)
    return result


def group_by_category(
    changes: Iterable[ResourceChange],
) -> List[Tuple[str, List[ResourceChange]]]:
    """Group changes by category, categories in rank order."""
    grouped: Dict[str, List[ResourceChange]] = {}
    for change in changes:
        grouped.setdefault(change.category or OTHER, []).append(change)
    return [(cat, grouped[cat]) for cat in sorted(grouped, key=category_sort_key)]
