from subwaymap.compiler.compiler import CompiledMap, compile_map
from subwaymap.compiler.render_d2 import render_d2


def compile_to_d2(topology) -> str:
    return render_d2(compile_map(topology))
