"""
Unit tests for compiler/layout.py: pure functions, no server required.

Tests cover:
  - build_graph / break_cycles: dangling edges, self loops, back-edge reversal
  - rank_nodes: longest-path ranks
  - layered_layout: layer stacking, no overlap, centering, rankdir handling
"""
import networkx as nx
import pytest

from subwaymap.compiler.layout import apply_layout, break_cycles, build_graph, layered_layout, rank_nodes
from subwaymap.ir.topology import LayoutOptions, NodeKind, Topology, TopologyEdge, TopologyNode


# ── helpers ────────────────────────────────────────────────────────────────────

def make_node(node_id, kind=NodeKind.SERVICE, width=100, height=50):
    return TopologyNode(id=node_id, label=node_id, kind=kind, width=width, height=height)


def make_edge(source, target):
    return TopologyEdge(id=f"{source}->{target}", source=source, target=target)


def make_chain(*ids):
    nodes = [make_node(i) for i in ids]
    edges = [make_edge(a, b) for a, b in zip(ids, ids[1:])]
    return nodes, edges


def overlaps(a, b):
    (ax, ay, aw, ah), (bx, by, bw, bh) = a, b
    return ax < bx + bw and bx < ax + aw and ay < by + bh and by < ay + ah


# ── build_graph / break_cycles ────────────────────────────────────────────────

class TestBuildGraph:
    def test_skips_dangling_edges_and_self_loops(self):
        G = build_graph(["a", "b"], [("a", "b"), ("a", "missing"), ("b", "b")])
        assert set(G.nodes) == {"a", "b"}
        assert list(G.edges) == [("a", "b")]

    def test_accepts_edge_objects(self):
        G = build_graph(["a", "b"], [make_edge("a", "b")])
        assert G.has_edge("a", "b")


class TestBreakCycles:
    def test_acyclic_graph_keeps_every_edge(self):
        G = build_graph(["a", "b", "c"], [("a", "b"), ("b", "c"), ("a", "c")])
        kept, reversed_edges = break_cycles(G, ["a", "b", "c"])
        assert reversed_edges == []
        assert set(kept) == {("a", "b"), ("b", "c"), ("a", "c")}

    def test_back_edge_is_reversed(self):
        G = build_graph(["a", "b", "c"], [("a", "b"), ("b", "c"), ("c", "a")])
        kept, reversed_edges = break_cycles(G, ["a", "b", "c"])
        assert reversed_edges == [("a", "c")]
        dag = nx.DiGraph(kept + reversed_edges)
        assert nx.is_directed_acyclic_graph(dag)

    def test_two_node_cycle(self):
        G = build_graph(["gw", "api"], [("gw", "api"), ("api", "gw")])
        kept, reversed_edges = break_cycles(G, ["gw", "api"])
        assert kept == [("gw", "api")]
        assert reversed_edges == [("gw", "api")]


# ── rank_nodes ────────────────────────────────────────────────────────────────

class TestRankNodes:
    def test_chain_ranks(self):
        nodes, edges = make_chain("a", "b", "c")
        assert rank_nodes(nodes, edges) == {"a": 0, "b": 1, "c": 2}

    def test_longest_path_wins(self):
        nodes = [make_node(i) for i in "abcd"]
        edges = [make_edge("a", "b"), make_edge("b", "c"), make_edge("c", "d"), make_edge("a", "d")]
        assert rank_nodes(nodes, edges)["d"] == 3

    def test_disconnected_nodes_are_sources(self):
        nodes = [make_node("a"), make_node("b")]
        assert rank_nodes(nodes, []) == {"a": 0, "b": 0}

    def test_cycle_still_ranks_every_node(self):
        nodes = [make_node(i) for i in ("gw", "api", "engine")]
        edges = [make_edge("gw", "api"), make_edge("api", "engine"), make_edge("engine", "gw")]
        rank = rank_nodes(nodes, edges)
        assert rank == {"gw": 0, "api": 1, "engine": 2}

    def test_non_reversed_edges_increase_rank(self):
        nodes = [make_node(i) for i in "abcde"]
        edges = [make_edge(*e) for e in [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d"), ("d", "e")]]
        rank = rank_nodes(nodes, edges)
        for edge in edges:
            assert rank[edge.target] > rank[edge.source]


# ── layered_layout ────────────────────────────────────────────────────────────

class TestLayeredLayout:
    def test_empty_input(self):
        assert layered_layout([], []) == {}

    def test_rejects_unknown_rankdir(self):
        with pytest.raises(ValueError):
            layered_layout([make_node("a")], [], LayoutOptions(rankdir="XY"))

    def test_every_node_positioned(self):
        nodes, edges = make_chain("a", "b", "c")
        nodes.append(make_node("lonely"))
        positions = layered_layout(nodes, edges)
        assert set(positions) == {"a", "b", "c", "lonely"}

    def test_lr_layers_advance_along_x(self):
        nodes, edges = make_chain("a", "b", "c")
        positions = layered_layout(nodes, edges, LayoutOptions(ranksep=120))
        assert positions["a"].x == 0
        assert positions["b"].x == 220
        assert positions["c"].x == 440
        # single-node layers are centered on y = 0
        assert all(p.y == -25 for p in positions.values())

    def test_tb_layers_advance_along_y(self):
        nodes, edges = make_chain("a", "b")
        positions = layered_layout(nodes, edges, LayoutOptions(rankdir="TB", ranksep=100))
        assert positions["a"].y == 0
        assert positions["b"].y == 150
        assert positions["a"].x == positions["b"].x == -50

    def test_rl_mirrors_lr(self):
        nodes, edges = make_chain("a", "b", "c")
        lr = layered_layout(nodes, edges, LayoutOptions(rankdir="LR"))
        rl = layered_layout(nodes, edges, LayoutOptions(rankdir="RL"))
        for nid in lr:
            lr_center = lr[nid].x + 50
            rl_center = rl[nid].x + 50
            assert rl_center == -lr_center
            assert rl[nid].y == lr[nid].y

    def test_bt_places_sources_at_bottom(self):
        nodes, edges = make_chain("a", "b")
        positions = layered_layout(nodes, edges, LayoutOptions(rankdir="BT"))
        assert positions["a"].y > positions["b"].y

    def test_layer_is_stacked_with_nodesep_and_centered(self):
        nodes = [make_node("root")] + [make_node(f"leaf{i}") for i in range(3)]
        edges = [make_edge("root", f"leaf{i}") for i in range(3)]
        positions = layered_layout(nodes, edges, LayoutOptions(nodesep=20))

        ys = sorted(positions[f"leaf{i}"].y for i in range(3))
        assert ys == [-95, -25, 45]
        assert ys[1] - ys[0] == 50 + 20

    def test_no_overlap_within_layers(self):
        nodes = [make_node(f"n{i}", width=80 + i * 10, height=40 + i * 5) for i in range(8)]
        edges = [make_edge("n0", f"n{i}") for i in range(1, 8)]
        positions = layered_layout(nodes, edges, LayoutOptions(nodesep=10))
        rects = {n.id: (positions[n.id].x, positions[n.id].y, n.width, n.height) for n in nodes}
        ids = list(rects)
        for i, a in enumerate(ids):
            for b in ids[i + 1:]:
                assert not overlaps(rects[a], rects[b]), (a, b)

    def test_barycenter_follows_parents(self):
        # bottom parent's child should end up below the top parent's child
        nodes = [make_node("p1"), make_node("p2"), make_node("c_of_p2"), make_node("c_of_p1")]
        edges = [make_edge("p1", "c_of_p1"), make_edge("p2", "c_of_p2")]
        positions = layered_layout(nodes, edges)
        assert positions["p1"].y < positions["p2"].y
        assert positions["c_of_p1"].y < positions["c_of_p2"].y

    def test_size_overrides_by_kind_and_id(self):
        nodes = [
            TopologyNode(id="hub", label="Hub", kind=NodeKind.ENGINE),
            TopologyNode(id="svc", label="Svc"),
        ]
        options = LayoutOptions(sizes={"hub": (300, 300), "service": (60, 60)})
        positions = layered_layout(nodes, [make_edge("hub", "svc")], options)
        assert positions["hub"].x == 0
        assert positions["hub"].y == -150
        assert positions["svc"].x == 300 + 120
        assert positions["svc"].y == -30

    def test_cycle_layout_completes(self):
        nodes = [make_node(i) for i in ("engine", "mq")]
        edges = [make_edge("engine", "mq"), make_edge("mq", "engine")]
        positions = layered_layout(nodes, edges)
        assert positions["engine"].x < positions["mq"].x

    def test_apply_layout_uses_topology_options(self):
        nodes, edges = make_chain("a", "b")
        topology = Topology(id="t", title="T", nodes=nodes, edges=edges,
                            layout=LayoutOptions(rankdir="TB", ranksep=10))
        positions = apply_layout(topology)
        assert positions["b"].y == 60
        assert apply_layout(topology, LayoutOptions(ranksep=10))["b"].x == 110

    def test_siblings_keep_input_order(self):
        nodes = [make_node("root"), make_node("c"), make_node("a"), make_node("b")]
        edges = [make_edge("root", "c"), make_edge("root", "a"), make_edge("root", "b")]
        positions = layered_layout(nodes, edges)
        assert positions["c"].y < positions["a"].y < positions["b"].y
