"""
Output tests for the SVG, minimap, HTML page and D2 renderers.
"""
import re

from subwaymap.catalog.wmap import build_wmap
from subwaymap.compiler import compile_map, compile_to_d2
from subwaymap.compiler.render_d2 import render_d2
from subwaymap.ir.topology import (
    ClusterDef,
    LayoutOptions,
    NodeKind,
    Position,
    ServiceStatus,
    Topology,
    TopologyEdge,
    TopologyNode,
)
from subwaymap.renderer.html_page import render_page
from subwaymap.renderer.svg_renderer import render_minimap, render_svg, smooth_step_path
from subwaymap.visual.visual_style import STATUS_STYLE


def make_topology(layout=None):
    nodes = [
        TopologyNode(id="ubs", label="UBS", kind=NodeKind.ENGINE, position=Position(0, 0),
                     description="Core engine"),
        TopologyNode(id="G", label="G", kind=NodeKind.ROUTER, position=Position(400, 50)),
        TopologyNode(id="svc", label="A<B", color="#C97C84", position=Position(700, 60),
                     description="Load \"balancer\"", status=ServiceStatus.CRITICAL),
        TopologyNode(id="db", label="D", kind=NodeKind.DATABASE, position=Position(900, 60)),
    ]
    edges = [
        TopologyEdge(id="e1", source="ubs", target="G"),
        TopologyEdge(id="e2", source="G", target="svc", color="#C97C84", stroke_width=3),
        TopologyEdge(id="e3", source="svc", target="db", animated=False),
    ]
    clusters = [ClusterDef(name="Work & Co", color="#C97C84", member_ids=["svc", "db"],
                           description="Workstation services cluster")]
    return Topology(id="demo", title="Demo <Map>", subtitle="sub", nodes=nodes, edges=edges,
                    clusters=clusters, layout=layout)


class TestSvg:
    def test_document_and_viewbox(self):
        compiled = compile_map(make_topology())
        svg = render_svg(compiled)
        ext = compiled.extent
        assert svg.startswith("<svg")
        assert svg.endswith("</svg>")
        assert f'viewBox="{ext.x:g} {ext.y:g} {ext.width:g} {ext.height:g}"' in svg

    def test_nodes_carry_id_and_status(self):
        svg = render_svg(compile_map(make_topology()))
        assert 'data-node-id="svc" data-status="critical"' in svg
        assert 'data-node-id="ubs" data-status=""' in svg
        assert STATUS_STYLE[ServiceStatus.CRITICAL]["color"] in svg

    def test_engine_and_router_captions(self):
        svg = render_svg(compile_map(make_topology()))
        assert ">Engine</tspan>" in svg
        assert ">Router</tspan>" in svg

    def test_labels_escaped(self):
        svg = render_svg(compile_map(make_topology()))
        assert "A&lt;B" in svg
        assert "A<B" not in svg
        assert "Work &amp; Co" in svg

    def test_tooltips(self):
        svg = render_svg(compile_map(make_topology()))
        assert "<title>UBS - Core engine</title>" in svg
        assert "<title>Workstation services cluster</title>" in svg
        assert "(Critical)</title>" in svg

    def test_tooltips_can_be_disabled(self):
        svg = render_svg(compile_map(make_topology()), show_tooltips=False)
        assert "<title>" not in svg

    def test_cluster_outline(self):
        svg = render_svg(compile_map(make_topology()))
        assert 'stroke-dasharray="8,4"' in svg
        assert 'data-cluster="Work &amp; Co"' in svg

    def test_edges_animated_and_styled(self):
        svg = render_svg(compile_map(make_topology()))
        assert re.search(r'class="edge edge-animated" data-edge-id="e2"[^>]*stroke="#C97C84" stroke-width="3"', svg)
        assert 'class="edge" data-edge-id="e3"' in svg
        assert "@keyframes dashdraw" in svg

    def test_edges_drawn_before_nodes(self):
        svg = render_svg(compile_map(make_topology()))
        assert svg.index('data-edge-id="e1"') < svg.index('data-node-id="ubs"')
        assert svg.index('data-cluster=') < svg.index('data-edge-id="e1"')

    def test_multiline_label(self):
        topology = make_topology()
        topology.nodes[0].label = "Director Server\n(Inbound)"
        svg = render_svg(compile_map(topology))
        assert ">Director Server</tspan>" in svg
        assert ">(Inbound)</tspan>" in svg

    def test_smooth_step_path(self):
        assert smooth_step_path(0, 0, 100, 50) == "M 0 0 L 50 0 L 50 50 L 100 50"

    def test_wmap_renders_every_node(self):
        svg = render_svg(compile_map(build_wmap()))
        assert svg.count("data-node-id=") == 62
        assert svg.count("data-edge-id=") == 70


class TestMinimap:
    def test_one_rect_per_node(self):
        minimap = render_minimap(compile_map(make_topology()), width=200)
        assert minimap.count("data-minimap-id=") == 4
        assert 'width="200"' in minimap

    def test_colors(self):
        minimap = render_minimap(compile_map(make_topology()))
        assert re.search(r'data-minimap-id="ubs"[^>]*fill="#000000"', minimap)
        assert re.search(r'data-minimap-id="svc"[^>]*fill="#C97C84"', minimap)
        assert re.search(r'data-minimap-id="db"[^>]*fill="#10b981"', minimap)

    def test_empty_map(self):
        compiled = compile_map(Topology(id="empty", title="Empty"))
        assert 'height="0"' in render_minimap(compiled)


class TestHtmlPage:
    def test_page_parts(self):
        html = render_page(compile_map(build_wmap()), interval_ms=1500)
        assert html.startswith("<!DOCTYPE html>")
        assert "WMAP Mag 7 — Subway Map" in html
        assert "Randomize Status" in html
        assert '"apiBase": "/api/maps/wmap"' in html
        assert '"intervalMs": 1500' in html
        assert 'class="subway-map"' in html
        assert 'class="minimap"' in html

    def test_legends(self):
        html = render_page(compile_map(build_wmap()))
        for label in ("Healthy", "Warning", "Critical", "Service Groups", "53 - Route53 DNS for Failover"):
            assert label in html
        assert "<h2>Flow</h2>" not in html

    def test_flow_legend_when_present(self):
        topology = make_topology()
        topology.flow_colors = {"Inbound": "#10b981"}
        html = render_page(compile_map(topology))
        assert "<h2>Flow</h2>" in html

    def test_title_escaped(self):
        html = render_page(compile_map(make_topology()))
        assert "<title>Demo &lt;Map&gt;</title>" in html


class TestD2:
    def test_header_and_direction(self):
        d2 = render_d2(compile_map(make_topology()))
        assert d2.startswith("# Demo <Map>\ndirection: right")

    def test_direction_follows_rankdir(self):
        d2 = render_d2(compile_map(make_topology(layout=LayoutOptions(rankdir="TB"))))
        assert "direction: down" in d2

    def test_shapes_by_kind(self):
        d2 = render_d2(compile_map(make_topology()))
        assert 'ubs: "UBS" { shape: rectangle' in d2
        assert 'G: "G" { shape: oval' in d2
        assert 'svc: "A<B" { shape: circle' in d2
        assert 'db: "D" { shape: cylinder' in d2

    def test_cluster_container_and_paths(self):
        d2 = render_d2(compile_map(make_topology()))
        assert 'Work___Co: "Work & Co" {' in d2
        assert "stroke-dash: 4" in d2
        assert "G -> Work___Co.svc" in d2
        assert "Work___Co.svc -> Work___Co.db" in d2

    def test_edge_style(self):
        d2 = render_d2(compile_map(make_topology()))
        assert "stroke: '#C97C84'; stroke-width: 3; animated: true" in d2
        assert "Work___Co.svc -> Work___Co.db: { style: { stroke: '#000000'; stroke-width: 2 } }" in d2

    def test_status_fill(self):
        d2 = render_d2(compile_map(make_topology()))
        assert f"fill: '{STATUS_STYLE[ServiceStatus.CRITICAL]['color']}'" in d2

    def test_compile_to_d2(self):
        assert compile_to_d2(build_wmap()).count(" -> ") == 70


class TestSvgEdgeHandles:
    def test_endpoints_resolved_without_per_edge_lookups(self, monkeypatch):
        compiled = compile_map(build_wmap())

        def fail(self, node_id):
            raise AssertionError("get_node called while drawing edges")

        monkeypatch.setattr(Topology, "get_node", fail)
        assert render_svg(compiled).count("data-edge-id=") == 70
