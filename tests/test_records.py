import json

import pytest

from edgesim.records import (
    LeaderOfCluster,
    WeightOfTwoNodes,
    build_cluster_graphs,
    parse_cluster_nodes,
    parse_leaders,
    parse_weight_line,
    read_json_lines,
    read_weights,
)


def test_read_json_lines_round_trip(tmp_path):
    records = [{"0": ["Aachen", "Berlin"]}, {"1": [3, 4], "2": []}]
    path = tmp_path / "clusters.txt"
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n", encoding="utf-8")
    assert read_json_lines(path) == records


def test_read_json_lines_handles_crlf_and_null(tmp_path):
    path = tmp_path / "leaders.txt"
    path.write_text('{"a": "Kiel"}\r\nnull\r\n', encoding="utf-8")
    assert read_json_lines(path) == [{"a": "Kiel"}, {}]


def test_read_json_lines_rejects_blank_line(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text('{"a": 1}\n\n{"b": 2}\n', encoding="utf-8")
    with pytest.raises(json.JSONDecodeError):
        read_json_lines(path)


def test_read_json_lines_rejects_non_object(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("[1, 2]\n", encoding="utf-8")
    with pytest.raises(ValueError):
        read_json_lines(path)


def test_read_json_lines_rejects_nan(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text('{"a": NaN}\n', encoding="utf-8")
    with pytest.raises(ValueError):
        read_json_lines(path)


def test_read_json_lines_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_json_lines(tmp_path / "absent.txt")


def test_parse_weight_line_full():
    assert parse_weight_line("(Aachen, Berlin, 118.7)") == WeightOfTwoNodes("Aachen", "Berlin", 118.7)


def test_parse_weight_line_bad_weight_reads_zero():
    assert parse_weight_line("(1, 2, abc)") == WeightOfTwoNodes("1", "2", 0.0)


def test_parse_weight_line_missing_fields():
    assert parse_weight_line("(7)") == WeightOfTwoNodes("7", "", 0.0)
    assert parse_weight_line("") == WeightOfTwoNodes()


def test_read_weights(tmp_path):
    path = tmp_path / "w.txt"
    path.write_text("(0, 1, 2.5)\r\n(1, 2, 40)\n", encoding="utf-8")
    assert read_weights(path) == [
        WeightOfTwoNodes("0", "1", 2.5),
        WeightOfTwoNodes("1", "2", 40.0),
    ]


def test_parse_leaders_names():
    record = {"0": "Berlin", "1": "Kiel"}
    assert parse_leaders(record, numeric=False) == [
        LeaderOfCluster("0", "Berlin"),
        LeaderOfCluster("1", "Kiel"),
    ]


def test_parse_leaders_numeric_formats_integers():
    record = {"0": 3.0, "1": 12}
    assert parse_leaders(record, numeric=True) == [
        LeaderOfCluster("0", "3"),
        LeaderOfCluster("1", "12"),
    ]


def test_parse_leaders_wrong_type_repeats_previous():
    record = {"0": "Berlin", "1": 5}
    assert parse_leaders(record, numeric=False) == [
        LeaderOfCluster("0", "Berlin"),
        LeaderOfCluster("0", "Berlin"),
    ]


def test_parse_leaders_wrong_type_first_is_empty():
    assert parse_leaders({"0": "x"}, numeric=True) == [LeaderOfCluster()]


def test_parse_cluster_nodes():
    assert parse_cluster_nodes(["Ulm", "Trier"], numeric=False) == ["Ulm", "Trier"]
    assert parse_cluster_nodes([0, 7.0], numeric=True) == ["0", "7"]


@pytest.mark.parametrize(
    "value, numeric",
    [
        (["a", 1], False),
        ([1, "a"], True),
        ("a", False),
        ({"a": 1}, True),
        ([True], True),
    ],
)
def test_parse_cluster_nodes_mismatch(value, numeric):
    assert parse_cluster_nodes(value, numeric) is None


def test_build_cluster_graphs_lines_within_cluster():
    record = {"c0": ["A", "B"], "c1": ["C"]}
    weights = [
        WeightOfTwoNodes("A", "B", 2.0),
        WeightOfTwoNodes("B", "A", 3.0),
        WeightOfTwoNodes("A", "C", 4.0),
        WeightOfTwoNodes("A", "A", 1.0),
    ]
    first, second = build_cluster_graphs(record, weights, numeric=False)

    assert first.id == "c0"
    assert [node.id for node in first.nodes] == ["A", "B"]
    assert [(line.id, line.node_a.id, line.node_b.id, line.value) for line in first.lines] == [
        (0, "A", "B", 2.0),
        (1, "B", "A", 3.0),
    ]
    assert first.lines[0].node_a is first.nodes[0]
    assert first.lines[0].node_b is first.nodes[1]

    assert second.id == "c1"
    assert [node.id for node in second.nodes] == ["C"]
    assert second.lines == []


def test_build_cluster_graphs_numeric_ids():
    record = {"0": [0, 1, 2]}
    weights = [WeightOfTwoNodes("0", "2", 5.5), WeightOfTwoNodes("3", "0", 9.0)]
    (graph,) = build_cluster_graphs(record, weights, numeric=True)
    assert [node.id for node in graph.nodes] == ["0", "1", "2"]
    assert [(line.id, line.node_a.id, line.node_b.id) for line in graph.lines] == [(0, "0", "2")]


def test_build_cluster_graphs_bad_entry_has_no_nodes():
    (graph,) = build_cluster_graphs({"x": "oops"}, [WeightOfTwoNodes("a", "b", 1.0)], numeric=False)
    assert graph.id == "x"
    assert graph.nodes == []
    assert graph.lines == []