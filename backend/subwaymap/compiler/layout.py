"""
Layered (Sugiyama-style) layout for subway maps.

Single pass, O(nodes + edges):
  1. break cycles by reversing DFS back edges
  2. rank nodes by longest path from the sources
  3. order each layer once by the barycenter of its predecessors
  4. stack layers along the primary axis and nodes along the secondary axis
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import networkx as nx

from subwaymap.ir.topology import LayoutOptions, Position, Topology, TopologyNode
from subwaymap.visual.visual_style import node_size

RANKDIRS = ("LR", "RL", "TB", "BT")

_VISITING = 1
_DONE = 2


def _endpoints(edge) -> Tuple[str, str]:
    if isinstance(edge, tuple):
        return edge
    return edge.source, edge.target


def build_graph(node_ids: Sequence[str], edges: Iterable) -> nx.DiGraph:
    """Directed graph over known nodes; dangling edges and self loops are skipped."""
    G = nx.DiGraph()
    G.add_nodes_from(node_ids)
    for edge in edges:
        source, target = _endpoints(edge)
        if source == target:
            continue
        if source in G and target in G:
            G.add_edge(source, target)
    return G


def break_cycles(G: nx.DiGraph, order: Sequence[str]) -> Tuple[List[Tuple[str, str]], List[Tuple[str, str]]]:
    """
    Depth-first search from the sources (then any unvisited node, in input
    order). Back edges are returned reversed so that kept + reversed is acyclic.
    """
    state: Dict[str, int] = {}
    kept: List[Tuple[str, str]] = []
    reversed_edges: List[Tuple[str, str]] = []

    roots = [n for n in order if G.in_degree(n) == 0] + list(order)

    for root in roots:
        if root in state:
            continue
        state[root] = _VISITING
        stack = [(root, iter(G.successors(root)))]

        while stack:
            node, children = stack[-1]
            child = next(children, None)
            if child is None:
                state[node] = _DONE
                stack.pop()
                continue

            seen = state.get(child)
            if seen is None:
                kept.append((node, child))
                state[child] = _VISITING
                stack.append((child, iter(G.successors(child))))
            elif seen == _VISITING:
                reversed_edges.append((child, node))
            else:
                kept.append((node, child))

    return kept, reversed_edges


def _ranked_dag(node_ids: Sequence[str], edges: Iterable) -> Tuple[Dict[str, int], nx.DiGraph]:
    G = build_graph(node_ids, edges)
    kept, reversed_edges = break_cycles(G, node_ids)

    dag = nx.DiGraph()
    dag.add_nodes_from(node_ids)
    dag.add_edges_from(kept)
    dag.add_edges_from(reversed_edges)

    rank: Dict[str, int] = {}
    for n in nx.topological_sort(dag):
        rank[n] = max((rank[p] + 1 for p in dag.predecessors(n)), default=0)

    return rank, dag


def rank_nodes(nodes: Sequence[TopologyNode], edges: Iterable) -> Dict[str, int]:
    """Longest-path distance of every node from a source of the acyclic graph."""
    rank, _ = _ranked_dag([n.id for n in nodes], edges)
    return rank


def layered_layout(
    nodes: Sequence[TopologyNode],
    edges: Iterable,
    options: Optional[LayoutOptions] = None,
) -> Dict[str, Position]:
    """
    Assign a top-left Position to every node.

    Layers run along the primary axis (x for LR/RL, y for TB/BT) separated
    by ``ranksep``; nodes in a layer are stacked along the secondary axis
    with ``nodesep`` between boxes, centered on 0.
    """
    options = options or LayoutOptions()
    if options.rankdir not in RANKDIRS:
        raise ValueError(f"Unsupported rankdir '{options.rankdir}', expected one of {RANKDIRS}")

    if not nodes:
        return {}

    horizontal = options.rankdir in ("LR", "RL")
    mirrored = options.rankdir in ("RL", "BT")

    node_ids = [n.id for n in nodes]
    input_pos = {nid: i for i, nid in enumerate(node_ids)}
    sizes = {n.id: node_size(n, options.sizes) for n in nodes}

    def primary(nid: str) -> float:
        w, h = sizes[nid]
        return w if horizontal else h

    def secondary(nid: str) -> float:
        w, h = sizes[nid]
        return h if horizontal else w

    rank, dag = _ranked_dag(node_ids, edges)

    layers: Dict[int, List[str]] = defaultdict(list)
    for nid in node_ids:
        layers[rank[nid]].append(nid)

    centers: Dict[str, Tuple[float, float]] = {}  # nid -> (primary, secondary)
    cursor = 0.0

    for r in sorted(layers):
        members = layers[r]
        if r > 0:
            def barycenter(nid: str) -> Tuple[float, int]:
                preds = [centers[p][1] for p in dag.predecessors(nid) if p in centers]
                bary = sum(preds) / len(preds) if preds else 0.0
                return bary, input_pos[nid]

            members = sorted(members, key=barycenter)

        extent = max(primary(nid) for nid in members)
        center_p = cursor + extent / 2
        cursor += extent + options.ranksep

        total = sum(secondary(nid) for nid in members) + options.nodesep * (len(members) - 1)
        offset = -total / 2
        for nid in members:
            s = secondary(nid)
            centers[nid] = (center_p, offset + s / 2)
            offset += s + options.nodesep

    positions: Dict[str, Position] = {}
    for nid in node_ids:
        p, s = centers[nid]
        if mirrored:
            p = -p
        cx, cy = (p, s) if horizontal else (s, p)
        w, h = sizes[nid]
        positions[nid] = Position(x=cx - w / 2, y=cy - h / 2)

    return positions


def apply_layout(topology: Topology, options: Optional[LayoutOptions] = None) -> Dict[str, Position]:
    return layered_layout(topology.nodes, topology.edges, options or topology.layout)
