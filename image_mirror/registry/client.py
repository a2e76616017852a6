import logging
from urllib.parse import urljoin

import requests

from image_mirror.config.auth import Auth
from image_mirror.const import (
    DEFAULT_REGISTRY_API_HOST,
    DEFAULT_REGISTRY_HOST,
    DEFAULT_REGISTRY_NAMESPACE,
    DEFAULT_REGISTRY_TIMEOUT,
)
from image_mirror.error import MirrorRegistryListError

log = logging.getLogger(__name__)

DOCKER_HUB_HOSTS = ["", DEFAULT_REGISTRY_HOST, "index.docker.io", DEFAULT_REGISTRY_API_HOST]


class RegistryClient:
    """Client for listing tags through the registry HTTP API v2.

    Only HTTP basic credentials are supported. Registries that require a bearer token exchange will answer with an
    error, which is raised as a MirrorRegistryListError.
    """

    ENDPOINTS = {
        "tags": "/v2/{repository}/tags/list",
    }
    PAGE_SIZE = 100

    def __init__(
        self,
        credentials: dict[str, Auth] | None = None,
        timeout: float = DEFAULT_REGISTRY_TIMEOUT,
        scheme: str = "https",
    ):
        self.credentials = credentials or {}
        self.timeout = timeout
        self.scheme = scheme
        self.session = requests.Session()

    @staticmethod
    def normalize(host: str, repository: str) -> tuple[str, str]:
        """Map a host and repository to the API host and repository name to query.

        Images without a host live on Docker Hub, which serves its API from a separate host. Docker Hub repositories
        without a namespace belong to the `library` namespace.
        """
        if host in DOCKER_HUB_HOSTS:
            host = DEFAULT_REGISTRY_API_HOST
            if "/" not in repository:
                repository = f"{DEFAULT_REGISTRY_NAMESPACE}/{repository}"
        return host, repository

    def endpoint(self, endpoint_name: str, host: str, **kwargs) -> str:
        endpoint_template = self.ENDPOINTS.get(endpoint_name)
        if endpoint_template is None:
            raise ValueError(f"Endpoint '{endpoint_name}' not found.")
        return urljoin(f"{self.scheme}://{host}", endpoint_template.format(**kwargs))

    def _get_auth(self, host: str) -> tuple[str, str] | None:
        auth = self.credentials.get(host)
        if auth is None or auth.is_empty:
            return None
        return auth.username, auth.password

    def _get(self, url: str, host: str, repository: str, params: dict | None = None) -> requests.Response:
        log.debug(f"GET {url}")
        try:
            response = self.session.get(url, params=params, auth=self._get_auth(host), timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise MirrorRegistryListError(
                f"Registry returned an error listing tags: {e}", host, repository, e.response.status_code
            ) from e
        except requests.exceptions.RequestException as e:
            raise MirrorRegistryListError(f"Unable to reach registry: {e}", host, repository) from e
        return response

    def list_tags(self, host: str, repository: str) -> list[str]:
        """List the tags of a repository in the order the registry reports them.

        :param host: Registry host. Empty means Docker Hub.
        :param repository: Repository name under the host.

        :raises MirrorRegistryListError: If the registry could not be reached or returned an error.
        """
        api_host, name = self.normalize(host, repository)
        target = self.endpoint("tags", api_host, repository=name)

        response = self._get(target, host, repository, params={"n": self.PAGE_SIZE})
        tags = self._parse_tags(response, host, repository)
        while response.links.get("next"):
            target = urljoin(target, response.links["next"]["url"])
            response = self._get(target, host, repository)
            tags.extend(self._parse_tags(response, host, repository))

        log.debug(f"Found {len(tags)} tag(s) for {host}/{repository}")
        return tags

    @staticmethod
    def _parse_tags(response: requests.Response, host: str, repository: str) -> list[str]:
        try:
            data = response.json()
        except requests.exceptions.JSONDecodeError as e:
            raise MirrorRegistryListError(f"Registry returned an invalid tag list: {e}", host, repository) from e

        # Registries report a repository without tags as `null`.
        return list(data.get("tags") or [])
