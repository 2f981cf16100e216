from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple
import networkx as nx

Color = Tuple[float, float, float]
Position = Tuple[float, float]


class NodeRole(Enum):
    ANCHORED = "anchored"
    FREE = "free"
    DISCONNECTED = "disconnected"


class NodeMetadata(NamedTuple):
    """Per-cluster data read from a node line. Frozen once parsing is done."""
    name: str
    cardinality: int
    radius: float
    lfd: float
    color: Color
    degree: int = 0


class Bounds(NamedTuple):
    """Extents of the connected graph measured from the origin."""
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.top - self.bottom


class Node:
    """A positioned graph node. Only the layout engine moves it."""

    def __init__(self, metadata: NodeMetadata, position: Position = (0.0, 0.0),
                 mass: float = 0.0, role: NodeRole = NodeRole.FREE):
        self.metadata = metadata
        self.position: Position = (float(position[0]), float(position[1]))
        self.mass = mass
        self.role = role

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def degree(self) -> int:
        return self.metadata.degree

    @property
    def anchored(self) -> bool:
        return self.role is NodeRole.ANCHORED

    @property
    def disconnected(self) -> bool:
        return self.role is NodeRole.DISCONNECTED

    def __repr__(self):
        return (f"Node(name={self.name!r}, role={self.role.value}, "
                f"pos=({self.position[0]:.2f}, {self.position[1]:.2f}), "
                f"mass={self.mass:.2f}, degree={self.degree})")


class Graph:
    """Nodes keyed by name and edges keyed by their edge key, both in parse order."""

    def __init__(self, draw_scale: float = 1.0):
        self.draw_scale = draw_scale
        self.nodes: Dict[str, Node] = {}
        self.edges: Dict[str, Tuple[str, str]] = {}

    def add_node(self, node: Node):
        self.nodes[node.name] = node

    def add_edge(self, key: str, source: str, target: str):
        self.edges[key] = (source, target)

    @property
    def is_tree(self) -> bool:
        return "root" in self.nodes

    @property
    def total_nodes(self) -> int:
        return len(self.nodes)

    @property
    def total_disconnected_nodes(self) -> int:
        return sum(1 for node in self.nodes.values() if node.disconnected)

    @property
    def connected_nodes(self) -> List[Node]:
        return [node for node in self.nodes.values() if not node.disconnected]

    @property
    def connected_node_count(self) -> int:
        return self.total_nodes - self.total_disconnected_nodes

    @property
    def disconnected_nodes(self) -> List[Node]:
        return [node for node in self.nodes.values() if node.disconnected]

    @property
    def anchor(self) -> Optional[Node]:
        for node in self.nodes.values():
            if node.anchored:
                return node
        return None

    def edge_positions(self) -> Iterator[Tuple[Position, Position]]:
        """Yields the endpoint positions of every edge."""
        for source, target in self.edges.values():
            yield self.nodes[source].position, self.nodes[target].position

    def to_networkx(self) -> nx.MultiGraph:
        """Builds a NetworkX graph carrying node metadata and current positions."""
        G = nx.MultiGraph()
        for name, node in self.nodes.items():
            meta = node.metadata
            G.add_node(name, cardinality=meta.cardinality, radius=meta.radius, lfd=meta.lfd,
                       color=meta.color, pos=node.position, mass=node.mass, role=node.role.value)
        for key, (source, target) in self.edges.items():
            G.add_edge(source, target, key=key)
        return G

    def __repr__(self):
        return (f"Graph(nodes={self.total_nodes}, edges={len(self.edges)}, "
                f"disconnected={self.total_disconnected_nodes}, scale={self.draw_scale})")


class LayoutResult:
    """A relaxed graph together with its bounds. Treat positions as read-only."""

    def __init__(self, graph: Graph, bounds: Bounds, iterations: int = 0):
        self.graph = graph
        self.bounds = bounds
        self.iterations = iterations

    @property
    def draw_scale(self) -> float:
        return self.graph.draw_scale

    def __repr__(self):
        return f"LayoutResult({self.graph!r}, bounds={tuple(self.bounds)}, iterations={self.iterations})"
