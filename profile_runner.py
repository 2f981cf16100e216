import cProfile
import pstats
import sys
import time
import forcegraph


def profile_func(func, name, *args, **kwargs):
    print(f"Profiling {name}...")
    profiler = cProfile.Profile()
    profiler.enable()
    start = time.time()
    result = func(*args, **kwargs)
    end = time.time()
    profiler.disable()
    print(f"{name} took {end - start:.2f} seconds")

    stats = pstats.Stats(profiler).sort_stats('cumulative')
    stats.print_stats(20)
    return result


def main():
    dot_file = sys.argv[1] if len(sys.argv) > 1 else "graph.dot"
    scale = float(sys.argv[2]) if len(sys.argv) > 2 else 10.0

    print(f"Parsing {dot_file}...")
    nodes, edges = profile_func(forcegraph.parse_dot_file, "parse_dot_file", dot_file)

    graph = forcegraph.initialize_layout(nodes, edges, scale, seed=0)
    result = profile_func(forcegraph.compute_layout, "compute_layout", graph)
    print(f"Bounds: {tuple(result.bounds)}")


if __name__ == "__main__":
    main()
