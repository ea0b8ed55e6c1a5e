"""Building the servers of a simulation and placing edge registries on cluster leaders."""

from __future__ import annotations

import random
from typing import Any, Iterable, Sequence

from edgesim.edge import EdgeRegistryServer, EdgeServer, RegistryServer, create_edge_registry_server
from edgesim.graph import Graph, elect_leader_using_affinity
from edgesim.records import LeaderOfCluster
from edgesim.weightedrand import Choice

PREFERRED_WEIGHT = 5
OTHER_WEIGHT = 1
REGISTRY_IMAGE_SIZE = 500
IMAGES_PER_REGISTRY = 100
BASE_REGISTRY_OVERHEAD = 9
REGISTRY_OVERHEAD_SPREAD = 3
EDGE_CACHE_SIZE = 50000
EDGE_REGISTRY_CAPACITY = 300
DEFAULT_BANDWIDTH = 118.7


def registry_weights(num_of_registry_server: int) -> dict[int, list[Choice[int]]]:
    """Map each registry number to choices that favour that registry.

    Registry ``i`` gets weight 5 for itself and weight 1 for every other one.
    """
    numbers = range(1, num_of_registry_server + 1)
    return {
        preferred: [
            Choice(number, PREFERRED_WEIGHT if number == preferred else OTHER_WEIGHT)
            for number in numbers
        ]
        for preferred in numbers
    }


def make_registry_servers(count: int, rng: Any = None) -> list[RegistryServer]:
    """Create remote registries numbered from 1, each holding the next hundred image ids.

    Every registry gets a random overhead between 9 and 11.
    """
    source = rng if rng is not None else random
    servers = []
    for index in range(count):
        overhead = source.randrange(REGISTRY_OVERHEAD_SPREAD) + BASE_REGISTRY_OVERHEAD
        server = RegistryServer(index + 1, overhead=overhead)
        server.fill(
            REGISTRY_IMAGE_SIZE,
            index * IMAGES_PER_REGISTRY + 1,
            (index + 1) * IMAGES_PER_REGISTRY,
        )
        servers.append(server)
    return servers


def make_edge_servers(names: Iterable[str], registry_servers: list[RegistryServer]) -> list[EdgeServer]:
    """Create one edge server per name, numbered from 0, all sharing the given registries."""
    return [
        EdgeServer(
            id=index,
            name=name,
            max_cache_size=EDGE_CACHE_SIZE,
            registry_servers=registry_servers,
        )
        for index, name in enumerate(names)
    ]


def _members(subgraph: Graph, edge_servers: Sequence[EdgeServer]) -> list[EdgeServer]:
    return [server for server in edge_servers for node in subgraph.nodes if node.id == server.name]


def _server_named(edge_servers: Sequence[EdgeServer], name: str) -> EdgeServer | None:
    return next((server for server in reversed(edge_servers) if server.name == name), None)


def _bandwidth(server: EdgeServer, leader: EdgeServer | None, leader_id: str, subgraph: Graph) -> float:
    bandwidth = DEFAULT_BANDWIDTH
    for line in subgraph.lines:
        if leader is None:
            raise KeyError(f"no edge server named {leader_id!r}")
        if (server.name == line.node_a.id and leader.name == line.node_b.id) or (
            leader.name == line.node_a.id and server.name == line.node_b.id
        ):
            bandwidth = line.value
    return bandwidth


def deploy_first_registries(
    clusters: Sequence[Graph],
    leaders: Sequence[LeaderOfCluster],
    edge_servers: Sequence[EdgeServer],
) -> list[EdgeRegistryServer]:
    """Place a first edge registry on the given leader of every cluster.

    Each member of a cluster gets the registry and, as its bandwidth to it,
    the value of its line to the leader, or 118.7 without one. Raises
    KeyError when a cluster with lines has a leader that is no edge server.
    Returns the registries in cluster order.
    """
    registries = []
    for subgraph in clusters:
        leader_id = next(
            (leader.leader for leader in reversed(leaders) if leader.id == subgraph.id), ""
        )
        members = _members(subgraph, edge_servers)
        leader = _server_named(edge_servers, leader_id)
        registry = create_edge_registry_server(members, leader_id, EDGE_REGISTRY_CAPACITY)
        for server in members:
            server.first_registry_bandwidth = _bandwidth(server, leader, leader_id, subgraph)
            server.first_registry = registry
        registries.append(registry)
    return registries


def deploy_second_registries(
    clusters: Sequence[Graph], edge_servers: Sequence[EdgeServer]
) -> list[EdgeRegistryServer]:
    """Place a second edge registry on the affinity leader of every cluster.

    The set of members grows from cluster to cluster: each registry is built
    from, and handed to, the servers of its own cluster and of every cluster
    before it. Bandwidths are taken as for the first registries. Raises
    KeyError when a cluster with lines has a leader that is no edge server.
    Returns the registries in cluster order.
    """
    registries = []
    members: list[EdgeServer] = []
    for subgraph in clusters:
        leader_id = elect_leader_using_affinity(subgraph)
        members.extend(_members(subgraph, edge_servers))
        leader = _server_named(edge_servers, leader_id)
        registry = create_edge_registry_server(members, leader_id, EDGE_REGISTRY_CAPACITY)
        for server in members:
            server.second_registry_bandwidth = _bandwidth(server, leader, leader_id, subgraph)
            server.second_registry = registry
        registries.append(registry)
    return registries