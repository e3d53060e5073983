"""Shared test fixtures: sample dyff, unified, and YAML-document diffs."""

from __future__ import annotations

import textwrap

import pytest


@pytest.fixture
def sample_dyff_diff() -> str:
    """Path-oriented diff with a label change and a replica change."""
    return (
        "metadata.labels.foo  (v1/ServiceAccount/default/svc-account)\n"
        "- old\n"
        "+ new\n"
        "\n"
        "spec.replicas  (v1/Deployment/ns1/my-app)\n"
        "- 1\n"
        "+ 3"
    )


@pytest.fixture
def sample_metadata_heavy_diff() -> str:
    """Several metadata.* blocks around one real spec change."""
    return textwrap.dedent("""\
        metadata.labels.helm.sh/chart  (v1/ConfigMap/ns/app-config)
        - app-1.0.0
        + app-1.1.0

        spec.template.metadata.annotations.checksum/config  (apps/v1/Deployment/ns/web)
        - 1111
        + 2222

        metadata.resourceVersion  (v1/Service/ns/web)
        - 10
        + 11

        spec.replicas  (apps/v1/Deployment/ns/web)
        - 1
        + 2
    """)


@pytest.fixture
def sample_unified_diff() -> str:
    """Line-oriented fallback produced when dyff is unavailable."""
    return textwrap.dedent("""\
        --- version1.yaml
        +++ version2.yaml
        @@ -1,4 +1,4 @@
         kind: Deployment
         metadata:
           name: web
        -  replicas: 1
        +  replicas: 3
    """)


@pytest.fixture
def sample_document_diff() -> str:
    """YAML documents separated by --- with no resource identifiers."""
    return "kind: Service\nname: my-svc\n---\nkind: Deployment\nname: my-app"


@pytest.fixture
def sample_secret_diff() -> str:
    return textwrap.dedent("""\
        data.password  (v1/Secret/ns/db-credentials)
          env:
            - name: DB_PASSWORD
        -     value: QWxhZGRpbjpvcGVuc2VzYW1l
        +     value: c2VjcmV0LXBhc3N3b3JkLTI=
    """)
