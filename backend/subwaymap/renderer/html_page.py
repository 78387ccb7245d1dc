"""
Interactive page for one compiled map.

Everything is inline: the SVG, the minimap, the legends and a small script
that polls the status endpoints and recolors nodes in place.
"""

import json
from html import escape
from typing import List

from subwaymap.compiler.compiler import CompiledMap
from subwaymap.config import STATUS_TICK_INTERVAL_MS
from subwaymap.ir.topology import ServiceStatus
from subwaymap.renderer.svg_renderer import render_minimap, render_svg
from subwaymap.visual.visual_style import STATUS_STYLE

PAGE_CSS = """
  body { margin: 0; font-family: Arial, sans-serif; background: #f9fafb; }
  .card { position: absolute; background: #fff; border-radius: 8px;
          box-shadow: 0 1px 4px rgba(0,0,0,0.15); padding: 12px 16px; z-index: 2; }
  .header { top: 16px; left: 16px; }
  .header h1 { margin: 0; font-size: 20px; }
  .header p { margin: 4px 0 0; color: #6b7280; font-size: 14px; }
  .header button { margin-top: 10px; padding: 6px 12px; border: 0; border-radius: 6px;
                   background: #111827; color: #fff; cursor: pointer; }
  .legend { top: 16px; right: 16px; max-height: 80vh; overflow-y: auto; font-size: 12px; }
  .legend h2 { margin: 8px 0 4px; font-size: 13px; }
  .legend ul { list-style: none; margin: 0; padding: 0; }
  .swatch { display: inline-block; width: 12px; height: 12px; border-radius: 50%;
            margin-right: 6px; vertical-align: middle; }
  .minimap { bottom: 16px; right: 16px; padding: 6px; }
  .canvas { overflow: auto; width: 100vw; height: 100vh; }
"""

TICK_SCRIPT = """
(function () {
  const config = JSON.parse(document.getElementById("map-config").textContent);
  const colors = config.statusColors;

  function apply(payload) {
    Object.entries(payload.statuses).forEach(function ([nodeId, status]) {
      document.querySelectorAll('[data-node-id="' + CSS.escape(nodeId) + '"]').forEach(function (el) {
        el.setAttribute("data-status", status);
        const body = el.querySelector(".node-body");
        if (body) {
          body.setAttribute("fill", colors[status]);
          body.setAttribute("stroke", colors[status]);
        }
      });
    });
  }

  function post(action) {
    return fetch(config.apiBase + "/" + action, { method: "POST" })
      .then(function (r) { return r.json(); })
      .then(apply)
      .catch(function (err) { console.error("[STATUS]", err); });
  }

  document.getElementById("randomize").addEventListener("click", function () { post("randomize"); });
  setInterval(function () { post("tick"); }, config.intervalMs);
})();
"""


def _swatch(color: str) -> str:
    return f'<span class="swatch" style="background:{escape(color, quote=True)}"></span>'


def _legend(compiled: CompiledMap) -> List[str]:
    topology = compiled.topology
    out = ['<div class="card legend">', "<h2>Status</h2>", "<ul>"]
    for status in ServiceStatus:
        style = STATUS_STYLE[status]
        out.append(f"<li>{_swatch(style['color'])}{escape(style['label'])}</li>")
    out.append("</ul>")

    if topology.flow_colors:
        out.extend(["<h2>Flow</h2>", "<ul>"])
        for name, color in topology.flow_colors.items():
            out.append(f"<li>{_swatch(color)}{escape(name)}</li>")
        out.append("</ul>")

    if topology.legend:
        out.append("<h2>Service Groups</h2>")
        for group in topology.legend:
            out.append(f"<h2>{_swatch(group.color)}{escape(group.name)}</h2>")
            out.append("<ul>")
            for entry in group.entries:
                out.append(f"<li>{escape(entry)}</li>")
            out.append("</ul>")

    out.append("</div>")
    return out


def render_page(compiled: CompiledMap, interval_ms: int = STATUS_TICK_INTERVAL_MS) -> str:
    topology = compiled.topology
    config = {
        "mapId": topology.id,
        "apiBase": f"/api/maps/{topology.id}",
        "intervalMs": interval_ms,
        "statusColors": {s.value: STATUS_STYLE[s]["color"] for s in ServiceStatus},
    }
    # Keep the JSON inert inside <script>
    config_json = json.dumps(config).replace("</", "<\\/")

    page = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{escape(topology.title)}</title>",
        f"<style>{PAGE_CSS}</style>",
        "</head>",
        "<body>",
        '<div class="card header">',
        f"<h1>{escape(topology.title)}</h1>",
        f"<p>{escape(topology.subtitle)}</p>",
        '<button id="randomize" type="button">Randomize Status</button>',
        "</div>",
    ]
    page.extend(_legend(compiled))
    page.extend([
        '<div class="canvas">',
        render_svg(compiled),
        "</div>",
        '<div class="card minimap">',
        render_minimap(compiled),
        "</div>",
        f'<script id="map-config" type="application/json">{config_json}</script>',
        f"<script>{TICK_SCRIPT}</script>",
        "</body>",
        "</html>",
    ])
    return "\n".join(page)
