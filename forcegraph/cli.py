import argparse
import sys

from .config import LayoutConfig
from .errors import GraphLoadError
from .placement import load_layout
from .visualization import visualize_layout, visualize_layout_interactive


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="forcegraph - force-directed layout of cluster graphs")
    parser.add_argument("dot_file", help="Input graph description (.dot) file")
    parser.add_argument("--scale", type=float, default=10.0, help="Drawing scale of the graph (default: 10)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the initial random positions")
    parser.add_argument("--force", type=float, default=None, help="Force applied during each update (default: 0.02)")
    parser.add_argument("--range", dest="position_range", type=float, default=None,
                        help="Half-extent of the initial random positions (default: 500)")
    parser.add_argument("--timeout", type=float, default=None, help="Stop relaxing after this many seconds")
    parser.add_argument("--canonical-edges", action="store_true",
                        help="Treat 'a -- b' and 'b -- a' as the same edge")
    parser.add_argument("--output", "-o", default=None, help="Save a PNG drawing of the layout")
    parser.add_argument("--html", default=None, help="Save an interactive HTML view of the layout")
    parser.add_argument("--no-show", action="store_true", help="Do not open a window with the drawing")
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        config = LayoutConfig().with_overrides(force=args.force, position_range=args.position_range)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    try:
        result = load_layout(args.dot_file, args.scale, config, seed=args.seed,
                             canonical_edges=args.canonical_edges, max_time_seconds=args.timeout)
    except GraphLoadError as e:
        print(f"Failed to load graph: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Invalid argument: {e}", file=sys.stderr)
        return 2

    top, bottom, left, right = result.bounds
    print(f"Layout done after {result.iterations} updates. "
          f"Bounds: top={top:.1f} bottom={bottom:.1f} left={left:.1f} right={right:.1f}")

    if args.html:
        visualize_layout_interactive(result, output_filename=args.html, config=config)
    if args.output or not args.no_show:
        visualize_layout(result, output_filename=args.output, show=not args.no_show, config=config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
