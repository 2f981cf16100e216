from typing import Dict, Optional, Tuple
from .config import DEFAULT_CONFIG, LayoutConfig
from .models import LayoutResult, Node
try:
    import plotly.graph_objects as go
except ImportError:
    go = None

NODE_DIAMETER = 10.0  # in units of draw scale
# vertical offsets of the four labels, as fractions of the node diameter
LABEL_OFFSETS = (0.21, 0.06, -0.09, -0.25)


def render_positions(result: LayoutResult, config: Optional[LayoutConfig] = None) -> Dict[str, Tuple[float, float]]:
    """
    Where each node should be drawn.

    Connected nodes keep their layout positions. Disconnected nodes keep
    their column offsets but are moved to the lower right of the connected
    graph, one spacing step past its right edge and level with its bottom.
    """
    config = config or DEFAULT_CONFIG
    scale = result.draw_scale
    shift_x = result.bounds.right + config.disconnected_spacing * scale
    shift_y = result.bounds.bottom

    positions = {}
    for name, node in result.graph.nodes.items():
        x, y = node.position
        if node.disconnected:
            positions[name] = (x + shift_x, y + shift_y)
        else:
            positions[name] = (x, y)
    return positions


def node_labels(node: Node) -> Tuple[str, str, str, str]:
    meta = node.metadata
    return (meta.name, f"card: {meta.cardinality}", f"rad: {meta.radius:.2f}", f"lfd: {meta.lfd:.2f}")


def visualize_layout(result: LayoutResult, output_filename: Optional[str] = None, show: bool = True,
                     config: Optional[LayoutConfig] = None):
    """Draws the layout with matplotlib: black edges, outlined colored circles and four labels per node."""
    try:
        import matplotlib.pyplot as plt
        from matplotlib.patches import Circle
        from matplotlib.collections import LineCollection
    except ImportError:
        print("Matplotlib is required for visualization.")
        return None

    print("Drawing layout...")
    scale = result.draw_scale
    diameter = NODE_DIAMETER * scale
    positions = render_positions(result, config)

    fig, ax = plt.subplots(figsize=(16, 12))

    lines = [[positions[u], positions[v]] for u, v in result.graph.edges.values()]
    if lines:
        ax.add_collection(LineCollection(lines, colors='black', linewidths=max(scale * 0.5, 0.5), zorder=1))

    font_size = max(scale, 4)
    for name, node in result.graph.nodes.items():
        x, y = positions[name]
        ax.add_patch(Circle((x, y), (diameter + scale / 3.0) / 2.0, facecolor='black', zorder=2))
        ax.add_patch(Circle((x, y), diameter / 2.0, facecolor=node.metadata.color, zorder=3))
        for text, offset in zip(node_labels(node), LABEL_OFFSETS):
            ax.text(x, y + diameter * offset, text, fontsize=font_size, ha='center', va='center',
                    color='white', zorder=4, clip_on=True)

    ax.autoscale()
    ax.set_aspect('equal')
    ax.axis('off')
    plt.title(f"{result.graph.total_nodes} nodes, {len(result.graph.edges)} edges")

    if output_filename:
        print(f"Saving layout to {output_filename}...")
        fig.savefig(output_filename, dpi=150)
    if show:
        plt.show()
    else:
        plt.close(fig)
    return fig


def visualize_layout_interactive(result: LayoutResult, output_filename: str = "layout.html",
                                 config: Optional[LayoutConfig] = None):
    """Writes an interactive Plotly view of the layout to an HTML file."""
    if go is None:
        print("Plotly is not installed. Skipping interactive visualization.")
        return None

    print("Generating interactive visualization...")
    positions = render_positions(result, config)
    fig = go.Figure()

    edge_x = []
    edge_y = []
    for u, v in result.graph.edges.values():
        (x1, y1), (x2, y2) = positions[u], positions[v]
        edge_x.extend([x1, x2, None])
        edge_y.extend([y1, y2, None])
    fig.add_trace(go.Scatter(x=edge_x, y=edge_y, mode='lines', name='Edges',
                             line=dict(color='black', width=1), hoverinfo='skip'))

    node_x = []
    node_y = []
    colors = []
    hover_texts = []
    for name, node in result.graph.nodes.items():
        x, y = positions[name]
        r, g, b = node.metadata.color
        node_x.append(x)
        node_y.append(y)
        colors.append(f'rgb({int(r * 255)},{int(g * 255)},{int(b * 255)})')
        hover_texts.append("<br>".join(node_labels(node) + (f"degree: {node.degree}", node.role.value)))

    fig.add_trace(go.Scatter(
        x=node_x,
        y=node_y,
        mode='markers',
        name='Nodes',
        text=hover_texts,
        hoverinfo='text',
        marker=dict(size=14, color=colors, line=dict(color='black', width=1)),
    ))
    fig.update_layout(
        showlegend=False,
        plot_bgcolor='white',
        xaxis=dict(visible=False),
        yaxis=dict(visible=False, scaleanchor='x'),
    )

    print(f"Saving interactive visualization to {output_filename}...")
    fig.write_html(output_filename)
    return fig
