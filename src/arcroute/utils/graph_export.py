"""Graphviz DOT export of a network."""
import logging
from pathlib import Path

from arcroute.network.graph import Network

logger = logging.getLogger(__name__)

REQUIRED_COLOR = 'red'


def _cost_label(cost: float) -> str:
    return str(int(cost)) if float(cost).is_integer() else f"{cost:g}"


def to_dot(network: Network, name: str = 'network') -> str:
    """Render ``network`` as a DOT digraph with 1-based node ids.

    Undirected edges are drawn with ``dir=none``; required nodes and links
    are highlighted.
    """
    required_nodes = set(network.required_nodes)
    lines = [f'digraph "{name}" {{']
    for u in range(network.node_count):
        attrs = f' [color={REQUIRED_COLOR}, style=bold]' if u in required_nodes else ''
        lines.append(f'  {u + 1}{attrs};')

    for link in network.links:
        attrs = [f'label="{_cost_label(link.cost)}"']
        if not link.directed:
            attrs.append('dir=none')
        if link.required:
            attrs.append(f'color={REQUIRED_COLOR}')
            attrs.append('penwidth=2')
        lines.append(f'  {link.u + 1} -> {link.v + 1} [{", ".join(attrs)}];')
    lines.append('}')
    return '\n'.join(lines) + '\n'


def export_dot(network: Network, path: str | Path, name: str = 'network') -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_dot(network, name))
    logger.info(f"Graph exported to {path}")
    return path
