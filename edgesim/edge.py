"""Edge servers, their image caches and the registries they pull images from."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence

EDGE_REGISTRY_IMAGE_SIZE = 500
DEFAULT_REGISTRY_COUNT = 10
DEFAULT_IMAGES_PER_REGISTRY = 100
DEFAULT_IMAGE_SIZE = 300


class PullSource(IntEnum):
    """Where a requested image was served from."""

    LOCAL = 0
    FIRST_REGISTRY = 1
    SECOND_REGISTRY = 2
    REMOTE = 3
    NOT_FOUND = 4


@dataclass(frozen=True)
class ContainerImage:
    """A container image identified by id, with its size."""

    id: int
    size: int


def _find(images: Sequence[ContainerImage], image_id: int) -> ContainerImage | None:
    return next((image for image in images if image.id == image_id), None)


def _transfer_time(size: int, bandwidth: float) -> float:
    if bandwidth:
        return size / bandwidth
    if size == 0:
        return math.nan
    return math.copysign(math.inf, size)


@dataclass
class RegistryServer:
    """A remote registry holding images, reached with a fixed overhead."""

    id: int
    images: list[ContainerImage] = field(default_factory=list)
    overhead: int = 0

    def fill(self, size: int, first_id: int, last_id: int) -> None:
        """Add images with ids first_id..last_id inclusive, all of one size."""
        self.images.extend(ContainerImage(image_id, size) for image_id in range(first_id, last_id + 1))

    def find(self, image_id: int) -> ContainerImage | None:
        """Return the image with the given id, or None."""
        return _find(self.images, image_id)


@dataclass
class EdgeRegistryServer:
    """A registry hosted on a cluster leader, holding a bounded set of images."""

    node_id: str = ""
    max_num_of_image: int = 0
    current_num_of_image: int = 0
    images: list[ContainerImage] = field(default_factory=list)

    def find(self, image_id: int) -> ContainerImage | None:
        """Return the image with the given id, or None."""
        return _find(self.images, image_id)


@dataclass
class EdgeServer:
    """An edge server with a local image cache and a pull history."""

    id: int
    name: str
    num_of_image: int = 0
    max_cache_size: int = 0
    current_cache_size: int = 0
    local_images: list[ContainerImage] = field(default_factory=list)
    hit_count: int = 0
    miss_count: int = 0
    registry_servers: list[RegistryServer] = field(default_factory=list)
    first_registry: EdgeRegistryServer = field(default_factory=EdgeRegistryServer)
    second_registry: EdgeRegistryServer = field(default_factory=EdgeRegistryServer)
    first_registry_bandwidth: float = 0.0
    second_registry_bandwidth: float = 0.0
    history: list[int] = field(default_factory=list)
    affinity_overhead: int = 0
    network_overhead: int = 0

    def clean_cache(self) -> None:
        """Drop every cached image."""
        self.num_of_image = 0
        self.current_cache_size = 0
        self.local_images = []

    def download_image(self, image: ContainerImage) -> None:
        """Store an image, emptying the cache first if it would not fit."""
        if self.max_cache_size < self.current_cache_size + image.size:
            self.clean_cache()
        self.num_of_image += 1
        self.current_cache_size += image.size
        self.local_images.append(image)

    def pull_image(
        self, image_id: int, use_affinity: bool, use_network_overhead: bool
    ) -> tuple[float, PullSource]:
        """Serve a request for an image and return the time taken and its source.

        The local cache is tried first, then the first edge registry (when
        network overhead is used), the second edge registry (when affinity is
        used) and finally the remote registries. Edge registry pulls take
        size / bandwidth; remote pulls take the registry's overhead.
        """
        self.history.append(image_id)

        if _find(self.local_images, image_id) is not None:
            self.hit_count += 1
            return 0.0, PullSource.LOCAL

        if use_network_overhead:
            image = self.first_registry.find(image_id)
            if image is not None:
                self.miss_count += 1
                self.download_image(image)
                return _transfer_time(image.size, self.first_registry_bandwidth), PullSource.FIRST_REGISTRY

        if use_affinity:
            image = self.second_registry.find(image_id)
            if image is not None:
                self.miss_count += 1
                self.download_image(image)
                return _transfer_time(image.size, self.second_registry_bandwidth), PullSource.SECOND_REGISTRY

        for registry in self.registry_servers:
            image = registry.find(image_id)
            if image is not None:
                self.miss_count += 1
                self.download_image(image)
                return float(registry.overhead), PullSource.REMOTE

        return 0.0, PullSource.NOT_FOUND


def default_registry_servers() -> list[RegistryServer]:
    """Ten registries numbered from 1, each holding the next hundred image ids."""
    servers = []
    for index in range(DEFAULT_REGISTRY_COUNT):
        server = RegistryServer(index + 1)
        server.fill(
            DEFAULT_IMAGE_SIZE,
            index * DEFAULT_IMAGES_PER_REGISTRY + 1,
            (index + 1) * DEFAULT_IMAGES_PER_REGISTRY,
        )
        servers.append(server)
    return servers


def create_edge_registry_server(
    members: Sequence[EdgeServer], leader_id: str, capacity: int
) -> EdgeRegistryServer:
    """Build a leader's registry from the most recent pulls of the cluster members.

    Each member whose history is longer than capacity // len(members) gives up
    that many of its latest image ids, newest first; they are removed from its
    history. The registry keeps at most ``capacity`` images.
    """
    registry = EdgeRegistryServer(node_id=leader_id, max_num_of_image=capacity)
    image_ids: list[int] = []
    for member in members:
        share = capacity // len(members)
        if member.history and len(member.history) > share:
            kept = len(member.history) - share
            image_ids.extend(reversed(member.history[kept:]))
            member.history = member.history[:kept]

    for image_id in image_ids:
        if registry.current_num_of_image < registry.max_num_of_image:
            registry.images.append(ContainerImage(image_id, EDGE_REGISTRY_IMAGE_SIZE))
            registry.current_num_of_image += 1
    return registry