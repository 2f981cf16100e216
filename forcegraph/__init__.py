from .config import LayoutConfig
from .errors import (GraphLoadError, GraphFileError, GraphParseError, MalformedNodeLine,
                     MalformedEdgeLine, UnknownNodeReference, InvalidColorFormat)
from .models import NodeRole, NodeMetadata, Node, Graph, Bounds, LayoutResult
from .parser import parse_dot_lines, parse_dot_file, parse_color
from .placement import initialize_layout, relax, calculate_bounds, compute_layout, load_layout
from .visualization import render_positions, visualize_layout, visualize_layout_interactive
