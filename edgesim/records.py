"""Reading the cluster, leader and bandwidth records that drive a simulation."""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence, Union

from edgesim.graph import Graph

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class LeaderOfCluster:
    """The leader chosen for the cluster with the given id."""

    id: str = ""
    leader: str = ""


@dataclass(frozen=True)
class WeightOfTwoNodes:
    """The bandwidth between two named nodes."""

    node_a: str = ""
    node_b: str = ""
    weight: float = 0.0


def _lines(path: PathLike) -> Iterator[str]:
    """Yield the lines of a text file without their line terminators."""
    text = Path(path).read_text(encoding="utf-8")
    pieces = text.split("\n")
    if pieces and pieces[-1] == "":
        pieces.pop()
    for piece in pieces:
        yield piece[:-1] if piece.endswith("\r") else piece


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON value {name}")


def read_json_lines(path: PathLike) -> list[dict[str, Any]]:
    """Parse a file holding one JSON object per line.

    Raises ValueError (json.JSONDecodeError among them) on a line that is not
    a JSON object; a ``null`` line gives an empty record.
    """
    records: list[dict[str, Any]] = []
    for line in _lines(path):
        value = json.loads(line, parse_constant=_reject_constant)
        if value is None:
            value = {}
        if not isinstance(value, dict):
            raise ValueError(f"expected a JSON object, got {type(value).__name__}")
        records.append(value)
    return records


def _parse_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return 0.0


def parse_weight_line(line: str) -> WeightOfTwoNodes:
    """Parse a line such as ``(A, B, 12.5)``.

    Missing fields stay empty, and a weight that is not a number reads as zero.
    """
    cleaned = line.replace("(", "").replace(")", "").replace(" ", "")
    parts = cleaned.split(",")
    node_a = parts[0] if len(parts) > 0 else ""
    node_b = parts[1] if len(parts) > 1 else ""
    weight = _parse_float(parts[2]) if len(parts) > 2 else 0.0
    return WeightOfTwoNodes(node_a, node_b, weight)


def read_weights(path: PathLike) -> list[WeightOfTwoNodes]:
    """Read a bandwidth file with one ``(A, B, weight)`` entry per line."""
    return [parse_weight_line(line) for line in _lines(path)]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_number(value: float) -> str:
    """Format a number rounded to an integer, without a decimal point."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:.0f}"


def _leader_value(value: Any, numeric: bool) -> str | None:
    if numeric:
        return _format_number(value) if _is_number(value) else None
    return value if isinstance(value, str) else None


def parse_leaders(record: Mapping[str, Any], numeric: bool) -> list[LeaderOfCluster]:
    """Turn a record mapping cluster ids to leaders into a leader list.

    Leaders are names, or numbers written as integers when ``numeric`` is set.
    An entry of the wrong type repeats the entry before it, or an empty
    leader when it comes first.
    """
    leaders: list[LeaderOfCluster] = []
    current = LeaderOfCluster()
    for key, value in record.items():
        leader = _leader_value(value, numeric)
        if leader is not None:
            current = LeaderOfCluster(key, leader)
        leaders.append(current)
    return leaders


def parse_cluster_nodes(value: Any, numeric: bool) -> list[str] | None:
    """Return the node ids of a cluster entry.

    The entry must be a list of names, or of numbers when ``numeric`` is set;
    anything else gives None.
    """
    if not isinstance(value, list):
        return None
    nodes: list[str] = []
    for item in value:
        node = _leader_value(item, numeric)
        if node is None:
            return None
        nodes.append(node)
    return nodes


def build_cluster_graphs(
    record: Mapping[str, Any], weights: Sequence[WeightOfTwoNodes], numeric: bool
) -> list[Graph]:
    """Build one graph per cluster in the record.

    A cluster graph holds the cluster's nodes and a line for every weight
    entry joining two different nodes of the cluster; the line id is the
    entry's position in ``weights``.
    """
    graphs: list[Graph] = []
    for key, value in record.items():
        subgraph = Graph(id=key)
        for node_id in parse_cluster_nodes(value, numeric) or []:
            subgraph.add_node(node_id)
        for position, weight in enumerate(weights):
            for node_a in subgraph.nodes:
                if weight.node_a != node_a.id:
                    continue
                for node_b in subgraph.nodes:
                    if weight.node_b != node_a.id and weight.node_b == node_b.id:
                        subgraph.add_line(node_a, node_b, position, weight.weight)
        graphs.append(subgraph)
    return graphs