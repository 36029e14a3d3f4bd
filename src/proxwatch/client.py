"""High-level async client for the cluster monitoring backend."""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import aiohttp

from proxwatch._api import clusters as _clusters_api
from proxwatch._transport import HttpTransport, Transport
from proxwatch.config import ProxwatchConfig
from proxwatch.exceptions import ProxwatchError
from proxwatch.models.cluster import Cluster, ClusterList, RegisterClusterRequest
from proxwatch.models.disk import ClusterDisks
from proxwatch.models.monitoring import ClusterStatus
from proxwatch.sync.polling import PollingController
from proxwatch.sync.resource import ResourceController

_logger = logging.getLogger(__name__)

C = TypeVar("C", bound=ResourceController[Any])


class ProxwatchClient:
    """Async client for the cluster monitoring API.

    Usage::

        async with ProxwatchClient(config) as client:
            clusters = await client.list_clusters()
            async with client.poll_cluster_status(clusters.clusters[0].id) as status:
                status.subscribe(print)
                ...

    Reads are plain round trips; nothing is cached between calls.
    Writes (:meth:`register_cluster`, :meth:`delete_cluster`) are
    fire-and-confirm: they raise on failure and never touch controller
    state, so callers refetch the affected controllers themselves.

    Controllers created through the ``watch_*`` / ``poll_*`` factories are
    closed when the client context exits.
    """

    def __init__(
        self,
        config: ProxwatchConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or ProxwatchConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None
        self._controllers: list[ResourceController[Any]] = []

    @property
    def config(self) -> ProxwatchConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ProxwatchClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close_controllers()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    def close_controllers(self) -> None:
        """Close every controller created by this client."""
        controllers, self._controllers = self._controllers, []
        for controller in controllers:
            controller.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise ProxwatchError("Client not initialized. Use 'async with ProxwatchClient(...) as client:'")
        return self._transport

    def _track(self, controller: C) -> C:
        self._controllers = [c for c in self._controllers if not c.closed]
        self._controllers.append(controller)
        return controller

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def list_clusters(self) -> ClusterList:
        """Fetch every registered cluster."""
        return await _clusters_api.list_clusters(self._require_transport())

    async def get_cluster(self, cluster_id: str) -> Cluster:
        return await _clusters_api.get_cluster(self._require_transport(), cluster_id)

    async def get_cluster_disks(self, cluster_id: str) -> ClusterDisks:
        """Fetch the disk inventory of every node in the cluster."""
        return await _clusters_api.get_cluster_disks(self._require_transport(), cluster_id)

    async def get_cluster_status(self, cluster_id: str) -> ClusterStatus:
        """Fetch live node health and guest counts."""
        return await _clusters_api.get_cluster_status(self._require_transport(), cluster_id)

    # ------------------------------------------------------------------
    # Write endpoints
    # ------------------------------------------------------------------

    async def register_cluster(
        self,
        *,
        name: str,
        api_endpoint: str,
        username: str,
        password: str,
    ) -> Cluster:
        """Register a cluster with the backend.

        Input is validated locally first (:class:`pydantic.ValidationError`
        on failure); the backend then checks the credentials against the
        Proxmox API.
        """
        request = RegisterClusterRequest(
            name=name,
            api_endpoint=api_endpoint,
            username=username,
            password=password,
        )
        cluster = await _clusters_api.register_cluster(self._require_transport(), request)
        _logger.info("Registered cluster %s (%s)", cluster.name, cluster.id)
        return cluster

    async def delete_cluster(self, cluster_id: str) -> None:
        """Deregister a cluster."""
        await _clusters_api.delete_cluster(self._require_transport(), cluster_id)
        _logger.info("Deleted cluster %s", cluster_id)

    # ------------------------------------------------------------------
    # Controllers
    # ------------------------------------------------------------------

    def watch_clusters(self) -> ResourceController[ClusterList]:
        """Track the cluster list; call ``refetch()`` after a write."""
        self._require_transport()
        return self._track(ResourceController(self.list_clusters, name="clusters"))

    def watch_cluster(self, cluster_id: str) -> ResourceController[Cluster]:
        self._require_transport()
        return self._track(ResourceController(self.get_cluster, (cluster_id,), name="cluster"))

    def watch_cluster_disks(self, cluster_id: str) -> ResourceController[ClusterDisks]:
        self._require_transport()
        return self._track(ResourceController(self.get_cluster_disks, (cluster_id,), name="cluster-disks"))

    def poll_cluster_status(
        self,
        cluster_id: str,
        *,
        interval_ms: int | None = None,
    ) -> PollingController[ClusterStatus]:
        """Track live cluster status, refreshed every *interval_ms*.

        Defaults to ``config.status_poll_interval_ms`` (30 seconds).
        """
        self._require_transport()
        if interval_ms is None:
            interval_ms = self._config.status_poll_interval_ms
        return self._track(
            PollingController(
                self.get_cluster_status,
                (cluster_id,),
                interval_ms=interval_ms,
                name="cluster-status",
            )
        )
