# edgesim

`edgesim` provides the building blocks for simulating how edge servers pull
container images. Each edge server keeps a local image cache. When an image is
missing from the cache, `EdgeServer.pull_image` looks for it in this order:

1. the first edge registry of its cluster, when network overhead is used,
2. the second edge registry of its cluster, when affinity is used,
3. the remote registry servers.

Each pull returns a time and a `PullSource`. A local hit costs nothing. A pull
from an edge registry costs the image size divided by the server's bandwidth to
that registry. A pull from a remote registry costs that registry's overhead. An
image found nowhere gives `PullSource.NOT_FOUND`.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

* `edgesim.weightedrand`: `Choice` and `Chooser` pick items at random in
  proportion to integer weights. `Chooser.pick` takes an optional
  `random.Random`. `WeightOverflowError` and `NoValidChoicesError` are raised
  for weights that cannot be used.
* `edgesim.graph`: `Graph`, `Node` and `Line`; `generate_random_graph`,
  `generate_random_graph_with_router` and `generate_affinity_graph`;
  `cluster_graph`, `elect_leader_using_overhead` and
  `elect_leader_using_affinity`; Graphviz DOT text from `Graph.to_dot` and
  related methods.
* `edgesim.edge`: `EdgeServer` with its cache (`download_image`,
  `clean_cache`, `pull_image`), `ContainerImage`, `RegistryServer`,
  `EdgeRegistryServer`, `PullSource`, `default_registry_servers` and
  `create_edge_registry_server`. The last builds a leader's registry from the
  most recent pulls in the members' histories.
* `edgesim.records`: `read_json_lines`, `read_weights` and
  `parse_weight_line` read the cluster, leader and bandwidth files.
  `parse_leaders`, `parse_cluster_nodes` and `build_cluster_graphs` turn their
  records into `LeaderOfCluster` lists and cluster graphs.
* `edgesim.deployment`: `registry_weights`, `make_registry_servers` and
  `make_edge_servers` set up a simulation. `deploy_first_registries` and
  `deploy_second_registries` place edge registries on cluster leaders.

## Example

```python
import random

from edgesim.deployment import (
    deploy_first_registries,
    make_edge_servers,
    make_registry_servers,
    registry_weights,
)
from edgesim.records import build_cluster_graphs, parse_leaders, read_weights
from edgesim.weightedrand import Chooser

rng = random.Random(1)
registries = make_registry_servers(5, rng)
servers = make_edge_servers([str(n) for n in range(10)], registries)

weights = read_weights("mkrp-rand-w-10.txt")
clusters = build_cluster_graphs({"0": [0, 1, 2, 3, 4], "1": [5, 6, 7, 8, 9]}, weights, True)
leaders = parse_leaders({"0": 2, "1": 7}, True)
deploy_first_registries(clusters, leaders, servers)

chooser = Chooser(registry_weights(5)[1])
registry = chooser.pick(rng)
image_id = rng.randrange(100) + 1 + (registry - 1) * 100
time, source = servers[0].pull_image(image_id, False, True)
```

Passing a seeded `random.Random` makes results reproducible.

## What the package does not do

The package has no command and no complete experiment runner. It does not loop
over pulling rounds, total the pulling times and sources, print summary figures
or write result files. A caller assembles those from the pieces above.