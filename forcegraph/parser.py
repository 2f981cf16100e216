import math
import re
from typing import Dict, Iterable, NamedTuple, Optional, Tuple, Union

from .errors import (GraphFileError, GraphParseError, InvalidColorFormat,
                     MalformedEdgeLine, MalformedNodeLine, UnknownNodeReference)
from .models import Color, NodeMetadata

EDGE_KEY_SEPARATOR = " -- "
LABEL_DELIMITER = "\\n"  # the two characters backslash and n, not a newline
STYLE_KEYWORDS = ("edge", "node", "graph")

NODE_LINE = re.compile(r'^(?P<name>[^\[]*)\[(?P<attrs>.*)\]\s*;?\s*$')
LABEL_ATTR = re.compile(r'\blabel\s*=\s*"(?P<value>(?:[^"\\]|\\.)*)"')
COLOR_ATTR = re.compile(r'\bcolor\s*=\s*"(?P<value>[^"]*)"')
HEX_COLOR = re.compile(r'#(?P<red>[0-9a-fA-F]{2})[0-9a-fA-F]{2}(?P<blue>[0-9a-fA-F]{2})')
CONNECTOR = re.compile(r'->|--')
ATTRIBUTE_STATEMENT = re.compile(r'^\s*\w+\s*=\s*[^\[]*$')
LABEL_FIELDS = (
    ('cardinality', int),
    ('radius', float),
    ('lfd', float),
)


class NodeLine(NamedTuple):
    metadata: NodeMetadata


class EdgeLine(NamedTuple):
    source: str
    target: str
    directed: bool


ParsedLine = Optional[Union[NodeLine, EdgeLine]]


def _strip_whitespace(text: str) -> str:
    return "".join(text.split())


def is_structural(line: str) -> bool:
    return "{" in line or "}" in line


def is_edge(line: str) -> bool:
    return not is_structural(line) and CONNECTOR.search(line) is not None


def is_style(line: str) -> bool:
    """Lines such as `edge [arrowhead=none]` or `rankdir=LR` that style the drawing."""
    head = line.strip().split("[", 1)[0].strip()
    if head in STYLE_KEYWORDS:
        return True
    return ATTRIBUTE_STATEMENT.match(line) is not None


def is_node(line: str) -> bool:
    return (not is_structural(line) and CONNECTOR.search(line) is None
            and bool(line.strip()) and not is_style(line))


def parse_color(hex_str: str) -> Color:
    """
    Reads a `#RRGGBB` color into an RGB triple in [0, 1].

    Only the red and blue channels are taken from the string; green is
    always 0, which is how the clustering tool encodes its two-channel
    color scale.
    """
    match = HEX_COLOR.fullmatch(hex_str.strip()) if hex_str is not None else None
    if match is None:
        raise InvalidColorFormat(f"expected '#RRGGBB', got {hex_str!r}")
    red = int(match.group('red'), 16)
    blue = int(match.group('blue'), 16)
    return (red / 255.0, 0.0, blue / 255.0)


def _parse_number(field: str, text: str, kind):
    try:
        value = kind(text)
    except ValueError:
        raise MalformedNodeLine(f"{field} is not a valid {kind.__name__}: {text!r}") from None
    if kind is float and not math.isfinite(value):
        raise MalformedNodeLine(f"{field} must be finite, got {text!r}")
    return value


def parse_node_line(line: str) -> NodeMetadata:
    """
    Parses a node declaration such as

        c12 [label="c12\\ncardinality 40\\nradius 0.53\\nlfd 1.87", color="#ff0033"]

    into its metadata. Degree starts at zero and is filled in later.
    """
    match = NODE_LINE.match(line)
    if match is None:
        raise MalformedNodeLine("expected '<name> [attributes]'")

    name = _strip_whitespace(match.group('name'))
    if not name:
        raise MalformedNodeLine("node name is empty")

    attrs = match.group('attrs')
    label = LABEL_ATTR.search(attrs)
    if label is None:
        raise MalformedNodeLine("missing label attribute")

    parts = label.group('value').split(LABEL_DELIMITER)
    if len(parts) != len(LABEL_FIELDS) + 1:
        raise MalformedNodeLine(
            f"label must have {len(LABEL_FIELDS) + 1} parts separated by '\\n', found {len(parts)}")

    values = {}
    for (field, kind), part in zip(LABEL_FIELDS, parts[1:]):
        prefix = field + " "
        if not part.startswith(prefix):
            raise MalformedNodeLine(f"expected '{prefix}<value>' in label, got {part!r}")
        values[field] = _parse_number(field, part[len(prefix):].strip(), kind)

    # color lives outside the label; drop the label first so its text cannot match
    color = COLOR_ATTR.search(LABEL_ATTR.sub("", attrs))
    if color is None:
        raise InvalidColorFormat("missing color attribute")

    return NodeMetadata(
        name=name,
        cardinality=values['cardinality'],
        radius=values['radius'],
        lfd=values['lfd'],
        color=parse_color(color.group('value')),
    )


def _clean_endpoint(token: str) -> str:
    token = token.split("[", 1)[0]
    return _strip_whitespace(token).rstrip(";")


def parse_edge_line(line: str) -> EdgeLine:
    """Parses `a -> b` or `a -- b [attrs]` into its endpoint names."""
    connectors = CONNECTOR.findall(line)
    if len(connectors) != 1:
        raise MalformedEdgeLine(f"expected exactly one connector, found {len(connectors)}")

    source_text, target_text = CONNECTOR.split(line)
    source = _clean_endpoint(source_text)
    target = _clean_endpoint(target_text)
    if not source or not target:
        raise MalformedEdgeLine("edge endpoint is empty")
    return EdgeLine(source=source, target=target, directed=connectors[0] == "->")


def parse_line(line: str, line_number: Optional[int] = None) -> ParsedLine:
    """Classifies one line and parses it. Returns None for lines that carry no graph data."""
    try:
        if is_structural(line) or not line.strip():
            return None
        if is_edge(line):
            return parse_edge_line(line)
        if is_style(line):
            return None
        return NodeLine(parse_node_line(line))
    except GraphParseError as e:
        raise e.at(line, line_number)


def edge_key(source: str, target: str, canonical: bool = False) -> str:
    if canonical and target < source:
        source, target = target, source
    return f"{source}{EDGE_KEY_SEPARATOR}{target}"


def parse_dot_lines(lines: Iterable[str], canonical_edges: bool = False
                    ) -> Tuple[Dict[str, NodeMetadata], Dict[str, Tuple[str, str]]]:
    """
    Parse the lines of a graph description.

    Args:
        lines: Text lines, with or without trailing newlines
        canonical_edges: Sort endpoint names before keying, so `a -- b` and
                         `b -- a` are the same edge

    Returns:
        Tuple of (nodes, edges)
        - nodes: Dict mapping node names to metadata with final degrees, in declaration order
        - edges: Dict mapping edge keys to (source, target) name pairs, in declaration order

    The first malformed line aborts the whole parse.
    """
    nodes: Dict[str, NodeMetadata] = {}
    degrees: Dict[str, int] = {}
    edges: Dict[str, Tuple[str, str]] = {}

    for line_number, line in enumerate(lines, start=1):
        parsed = parse_line(line, line_number)
        if parsed is None:
            continue

        if isinstance(parsed, NodeLine):
            name = parsed.metadata.name
            if name in nodes:
                raise MalformedNodeLine(f"node {name!r} is declared twice", line, line_number)
            nodes[name] = parsed.metadata
            degrees[name] = 0
            continue

        for endpoint in (parsed.source, parsed.target):
            if endpoint not in nodes:
                raise UnknownNodeReference(f"edge refers to undeclared node {endpoint!r}",
                                           line, line_number)

        key = edge_key(parsed.source, parsed.target, canonical_edges)
        if key in edges:
            continue
        edges[key] = (parsed.source, parsed.target)
        degrees[parsed.source] += 1
        degrees[parsed.target] += 1

    frozen = {name: meta._replace(degree=degrees[name]) for name, meta in nodes.items()}
    return frozen, edges


def parse_dot_file(path: str, canonical_edges: bool = False
                   ) -> Tuple[Dict[str, NodeMetadata], Dict[str, Tuple[str, str]]]:
    """Reads a graph description file and parses it. See parse_dot_lines."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise GraphFileError(path, getattr(e, 'strerror', None) or str(e)) from e
    return parse_dot_lines(lines, canonical_edges=canonical_edges)
