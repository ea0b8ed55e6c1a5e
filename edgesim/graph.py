"""Undirected weighted graphs of edge servers, clustering and leader election."""

from __future__ import annotations

import random
import warnings
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence


@dataclass
class Node:
    """A graph vertex identified by a string."""

    id: str


@dataclass
class Line:
    """A weighted edge between two nodes."""

    id: int
    value: float
    node_a: Node
    node_b: Node


@dataclass
class Graph:
    """A graph holding its nodes and lines in insertion order."""

    id: str = ""
    lines: list[Line] = field(default_factory=list)
    nodes: list[Node] = field(default_factory=list)

    def add_node(self, node_id: str) -> Node:
        """Append a node with the given id and return it."""
        node = Node(node_id)
        self.nodes.append(node)
        return node

    def add_line(self, node_a: Node, node_b: Node, line_id: int, value: float) -> Line:
        """Append a line between two nodes and return it."""
        line = Line(line_id, value, node_a, node_b)
        self.lines.append(line)
        return line

    def find_node(self, node_id: str) -> Node | None:
        """Return the first node with the given id, or None."""
        return next((node for node in self.nodes if node.id == node_id), None)

    def sum_of_values(self) -> int:
        """Sum of the line values, each truncated to an integer."""
        return sum(int(line.value) for line in self.lines)

    def _render(self, header: Iterable[str], body: Iterable[str]) -> str:
        return "\n".join(["Graph {", *header, *body, "}"]) + "\n"

    def to_dot(self) -> str:
        """Render the graph in DOT notation."""
        return self._render(
            [],
            (
                f'  {line.node_a.id} -- {line.node_b.id} '
                f'[len = {int(line.value)}, label = "{int(line.value)}"] '
                for line in self.lines
            ),
        )

    def to_dot_with_leader(self, leader_id: str) -> str:
        """Render the graph in DOT notation with the leader highlighted."""
        return self._render(
            [f"  {{node [style=filled,color=skyblue] e{leader_id}}}"],
            self._prefixed_lines(),
        )

    def to_network_dot(self) -> str:
        """Render a network graph whose last node is the router."""
        return self._render(
            [f"  {{node [shape=octagon, style=filled,color=green] e{len(self.nodes) - 1}}}"],
            self._prefixed_lines(),
        )

    def to_affinity_overall_dot(self) -> str:
        """Render an affinity graph with affinities shown as fractions."""
        return self._render(
            [],
            (
                f'  e{line.node_a.id} -- e{line.node_b.id} '
                f'[len = {int(line.value / 5)}, label = "{line.value / 100:.2f}"] '
                for line in self.lines
            ),
        )

    def to_affinity_dot(self, leader_id: str) -> str:
        """Render an affinity subgraph with its leader highlighted."""
        return self._render(
            [f"  {{node [style=filled,color=yellow] e{leader_id}}}"],
            (
                f'  {line.node_a.id} -- {line.node_b.id} '
                f'[len = {line.value / 5:f}, label = " {line.value:.2f}"] '
                for line in self.lines
            ),
        )

    def _prefixed_lines(self) -> Iterable[str]:
        return (
            f'  e{line.node_a.id} -- e{line.node_b.id} '
            f'[len = {int(line.value)}, label = "{int(line.value)}"] '
            for line in self.lines
        )


def _complete_graph(num_of_node: int, rng: Any) -> tuple[Graph, list[tuple[int, int, Line]]]:
    source = rng if rng is not None else random
    graph = Graph()
    for number in range(1, num_of_node + 1):
        graph.add_node(str(number))
    made: list[tuple[int, int, Line]] = []
    line_id = 1
    for i, node_a in enumerate(graph.nodes):
        for j in range(i + 1, num_of_node):
            value = source.randrange(10) + 1
            made.append((i, j, graph.add_line(node_a, graph.nodes[j], line_id, float(value))))
            line_id += 1
    return graph, made


def generate_random_graph(num_of_node: int, rng: Any = None) -> Graph:
    """Build a complete graph on nodes "1".."n" with random values in 1..10."""
    graph, _ = _complete_graph(num_of_node, rng)
    return graph


def generate_random_graph_with_router(num_of_node: int, rng: Any = None) -> tuple[Graph, list[int]]:
    """Build a complete random graph with an extra router node appended last.

    Returns the graph and, for each server node, the value of its line to the router.
    """
    total = num_of_node + 1
    graph, made = _complete_graph(total, rng)
    overheads = [int(line.value) for _, j, line in made if j == total - 1]
    return graph, overheads


def generate_affinity_graph(edge_servers: Sequence[Any]) -> Graph:
    """Build a graph whose lines carry the pull-history affinity between servers.

    Every ordered pair of servers gets a line, including a server with itself.
    Affinity is the percentage of matching image-id pairs in the two histories,
    or zero when there are no matches or no mismatches.
    """
    graph = Graph()
    for server in edge_servers:
        graph.add_node(server.name)
    for index, server_a in enumerate(edge_servers):
        node_a = graph.find_node(server_a.name)
        for server_b in edge_servers:
            node_b = graph.find_node(server_b.name)
            hit = miss = 0
            if server_a.id != server_b.id:
                for image_a in server_a.history:
                    for image_b in server_b.history:
                        if image_a == image_b:
                            hit += 1
                        else:
                            miss += 1
            affinity = hit / (hit + miss) * 100 if hit and miss else 0.0
            graph.add_line(node_a, node_b, index, affinity)
    return graph


def cluster_graph(graph: Graph, k: int) -> list[Graph]:
    """Split a numbered complete graph into k consecutive clusters.

    Each cluster takes n // k nodes in order, the last one also the remainder;
    a cluster keeps the lines running between its own nodes.
    """
    n = len(graph.nodes)
    q, r = divmod(n, k)
    if n <= k:
        warnings.warn(f"Set k less than {n}", stacklevel=2)

    clusters: list[Graph] = []
    for i in range(k):
        subgraph = Graph()
        subgraph.nodes.extend(graph.nodes[i * q:(i + 1) * q])
        if i == k - 1 and r:
            subgraph.nodes.extend(graph.nodes[q * k:q * k + r])

        size = len(subgraph.nodes)
        for node in subgraph.nodes:
            outgoing = [line for line in graph.lines if line.node_a.id == node.id]
            start = int(node.id) - i * q
            for position in range(start, size):
                index = size - position - 1
                if index >= len(outgoing):
                    raise IndexError(f"node {node.id} has no line at position {index}")
                subgraph.lines.append(outgoing[index])
        clusters.append(subgraph)
    return clusters


def _incident_sum(graph: Graph, node: Node) -> list[float]:
    return [
        line.value
        for line in graph.lines
        if node.id in (line.node_a.id, line.node_b.id)
    ]


def elect_leader_using_overhead(graph: Graph) -> str:
    """Return the node with the smallest total line value; ties go to the later node."""
    leader_id = ""
    min_sum = 1000000
    for node in graph.nodes:
        total = sum(int(value) for value in _incident_sum(graph, node))
        if min_sum >= total:
            leader_id = node.id
            min_sum = total
    return leader_id


def elect_leader_using_affinity(graph: Graph) -> str:
    """Return the leader of an affinity subgraph.

    Every node examined takes the lead in turn, so the election settles on the
    last node; an empty graph has no leader and gives an empty string.
    """
    return graph.nodes[-1].id if graph.nodes else ""