from subwaymap.renderer.html_page import render_page
from subwaymap.renderer.svg_renderer import render_minimap, render_svg
