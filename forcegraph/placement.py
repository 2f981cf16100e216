from typing import Callable, Dict, Optional, Tuple
import random
import time
import numpy as np

from .config import DEFAULT_CONFIG, LayoutConfig
from .errors import UnknownNodeReference
from .models import Bounds, Graph, LayoutResult, Node, NodeMetadata, NodeRole
from .parser import parse_dot_file


def get_node_mass(degree: int, draw_scale: float, config: LayoutConfig = DEFAULT_CONFIG) -> float:
    """Heavier, better connected nodes move less per update."""
    return config.mass_factor * draw_scale * degree


def initialize_layout(nodes: Dict[str, NodeMetadata], edges: Dict[str, Tuple[str, str]],
                      draw_scale: float, config: Optional[LayoutConfig] = None,
                      rng: Optional[random.Random] = None, seed: Optional[int] = None) -> Graph:
    """
    Builds the positioned graph from parsed nodes and edges.

    Disconnected nodes are stacked in a column starting at the origin; they
    sit out the simulation and are moved next to the connected graph when
    drawn. If a node named "root" exists the graph is a tree and root is
    the anchor, otherwise the first connected node is. Every other
    connected node starts at a random point in the configured square.
    """
    config = config or DEFAULT_CONFIG
    config.validate()
    if draw_scale <= 0:
        raise ValueError(f"draw_scale must be positive, got {draw_scale}")
    if rng is None:
        rng = random.Random(seed)

    graph = Graph(draw_scale=draw_scale)
    is_tree = "root" in nodes
    anchor_assigned = False
    disconnected_y = 0.0
    half = config.position_range

    for name, meta in nodes.items():
        if meta.degree == 0:
            graph.add_node(Node(meta, (0.0, disconnected_y), 0.0, NodeRole.DISCONNECTED))
            disconnected_y += config.disconnected_spacing * draw_scale
            continue

        mass = get_node_mass(meta.degree, draw_scale, config)
        if (is_tree and name == "root") or (not is_tree and not anchor_assigned):
            graph.add_node(Node(meta, (0.0, 0.0), mass, NodeRole.ANCHORED))
            anchor_assigned = True
        else:
            position = (rng.uniform(-half, half), rng.uniform(-half, half))
            graph.add_node(Node(meta, position, mass, NodeRole.FREE))

    for key, (source, target) in edges.items():
        for endpoint in (source, target):
            if endpoint not in graph.nodes:
                raise UnknownNodeReference(f"edge {key!r} refers to undeclared node {endpoint!r}")
        graph.add_edge(key, source, target)

    return graph


def relax(graph: Graph, config: Optional[LayoutConfig] = None, iterations: Optional[int] = None,
          max_time_seconds: Optional[float] = None,
          should_stop: Optional[Callable[[int], bool]] = None) -> int:
    """
    Runs force-directed updates over the connected nodes, moving them in place.

    Each update pushes every pair of connected nodes apart, pulls the ends of
    every edge toward the rest length, and moves each free node by
    force * net_force / mass. Anchored and disconnected nodes never move.
    The number of updates is fixed (connected_nodes ** 2 * iteration_factor
    unless given); there is no convergence check.

    Returns the number of updates actually run, which is smaller than
    requested only when max_time_seconds or should_stop cut the loop short.
    """
    config = config or DEFAULT_CONFIG
    nodes = graph.connected_nodes
    n_nodes = len(nodes)
    if iterations is None:
        iterations = n_nodes ** 2 * config.iteration_factor
    if n_nodes == 0 or iterations <= 0:
        return 0

    scale = graph.draw_scale
    rest_length = config.spring_length * scale
    stiffness = config.spring_stiffness * scale
    repulsion = config.repulsion * scale * rest_length ** 2
    min_distance = config.min_distance * scale

    node_indices = {node.name: i for i, node in enumerate(nodes)}
    pos_arr = np.array([node.position for node in nodes], dtype=float)
    free_mask = np.array([not node.anchored for node in nodes], dtype=bool)
    step = config.force / np.array([node.mass for node in nodes], dtype=float)

    edge_pairs = [(node_indices[u], node_indices[v]) for u, v in graph.edges.values() if u != v]
    src = np.array([u for u, _ in edge_pairs], dtype=int)
    dst = np.array([v for _, v in edge_pairs], dtype=int)

    print(f"Running {iterations} force-directed updates over {n_nodes} connected nodes...")
    start_time = time.time()
    completed = 0

    for i in range(iterations):
        if max_time_seconds is not None and time.time() - start_time > max_time_seconds:
            print(f"Stopping relaxation after {max_time_seconds} seconds ({i}/{iterations} updates).")
            break
        if should_stop is not None and should_stop(i):
            print(f"Relaxation stopped early ({i}/{iterations} updates).")
            break

        # delta[i, j] points from node j to node i
        delta = pos_arr[:, np.newaxis, :] - pos_arr[np.newaxis, :, :]
        distance = np.linalg.norm(delta, axis=-1)
        direction = delta / np.where(distance > 0, distance, 1.0)[:, :, np.newaxis]

        repulsive_strength = repulsion / np.maximum(distance, min_distance)
        np.fill_diagonal(repulsive_strength, 0.0)
        force = np.sum(direction * repulsive_strength[:, :, np.newaxis], axis=1)

        if len(src):
            vec = pos_arr[dst] - pos_arr[src]
            length = np.linalg.norm(vec, axis=1)
            unit = vec / np.where(length > 0, length, 1.0)[:, np.newaxis]
            # positive when stretched: source is pulled toward target and vice versa
            pull = (stiffness * (length - rest_length))[:, np.newaxis] * unit
            np.add.at(force, src, pull)
            np.add.at(force, dst, -pull)

        pos_arr[free_mask] += (force * step[:, np.newaxis])[free_mask]
        completed += 1

    for node, (x, y) in zip(nodes, pos_arr):
        node.position = (float(x), float(y))

    print(f"Relaxation finished in {time.time() - start_time:.2f} seconds.")
    return completed


def calculate_bounds(graph: Graph) -> Bounds:
    """Top, bottom, left and right extents of the connected nodes, always including the origin."""
    top = bottom = left = right = 0.0
    for node in graph.connected_nodes:
        x, y = node.position
        if y < bottom:
            bottom = y
        if top < y:
            top = y
        if right < x:
            right = x
        if x < left:
            left = x
    return Bounds(top=top, bottom=bottom, left=left, right=right)


def compute_layout(graph: Graph, config: Optional[LayoutConfig] = None,
                   iterations: Optional[int] = None, max_time_seconds: Optional[float] = None,
                   should_stop: Optional[Callable[[int], bool]] = None) -> LayoutResult:
    """Relaxes an initialized graph and measures it."""
    completed = relax(graph, config, iterations=iterations,
                      max_time_seconds=max_time_seconds, should_stop=should_stop)
    return LayoutResult(graph, calculate_bounds(graph), iterations=completed)


def load_layout(path: str, draw_scale: float, config: Optional[LayoutConfig] = None,
                seed: Optional[int] = None, canonical_edges: bool = False,
                max_time_seconds: Optional[float] = None) -> LayoutResult:
    """
    Parses a graph description file and lays it out.

    Args:
        path: Path to the graph description file
        draw_scale: Drawing scale; node masses, spacing and spring lengths grow with it
        config: Layout parameters (defaults to LayoutConfig())
        seed: Seed for the initial random positions
        canonical_edges: Treat `a -- b` and `b -- a` as the same edge
        max_time_seconds: Optional wall clock limit for relaxation

    Raises:
        GraphLoadError: The file is unreadable or a line is malformed. No
                        layout work is done in that case.
    """
    print(f"Parsing graph from {path}...")
    nodes, edges = parse_dot_file(path, canonical_edges=canonical_edges)
    print(f"Found {len(nodes)} nodes and {len(edges)} edges.")

    graph = initialize_layout(nodes, edges, draw_scale, config, seed=seed)
    print(f"{graph.connected_node_count} connected, {graph.total_disconnected_nodes} disconnected"
          f"{' (tree)' if graph.is_tree else ''}.")
    return compute_layout(graph, config, max_time_seconds=max_time_seconds)
