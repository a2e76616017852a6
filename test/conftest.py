import os
from pathlib import Path

import pytest

from image_mirror.config import Manifest, Source, Target

TEST_DIRECTORY = Path(os.path.dirname(os.path.realpath(__file__)))


@pytest.fixture(scope="session")
def test_path():
    """Return the path to the test directory"""
    return TEST_DIRECTORY


@pytest.fixture(scope="session")
def testdata_path():
    """Return the path to the test data directory"""
    return TEST_DIRECTORY / "testdata"


@pytest.fixture(scope="session")
def manifests_path(testdata_path):
    """Return the path to the test manifest files"""
    return testdata_path / "manifests"


@pytest.fixture(scope="session")
def kubernetes_path(testdata_path):
    """Return the path to the test Kubernetes manifests"""
    return testdata_path / "kubernetes"


@pytest.fixture
def basic_manifest_file(manifests_path):
    """Return the path to a manifest using every persisted key"""
    return manifests_path / "basic.yaml"


@pytest.fixture
def default_target():
    """Return a default target with a host and a repository prefix"""
    return Target(host="target.com", repository="mirror")


@pytest.fixture
def materialized_manifest(default_target) -> Manifest:
    """Return a manifest whose sources all carry a resolved target"""
    return Manifest(
        target=default_target,
        sources=[
            Source(host="quay.io", repository="prometheus/prometheus", tag="v2.45.0", target=default_target),
            Source(
                host="docker.io",
                repository="library/nginx",
                tag="1.25.3",
                target=Target(host="other.com", repository="web"),
            ),
            Source(host="gcr.io", repository="distroless/static", digest="sha256:abc123", target=default_target),
            Source(host="source.com", repository="", tag="1.10", target=default_target),
        ],
    )
