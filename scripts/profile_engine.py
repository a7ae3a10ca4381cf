"""
Profiling script for graph-scene performance analysis.

Profiles the force-directed engine and scene reconciliation on random graphs
of increasing size.

Usage:
    python scripts/profile_engine.py [--profile]
"""

import cProfile
import io
import pstats
import random
import sys
import time
from pstats import SortKey

from graph_scene import (
    GraphEdgeList,
    GraphPanel,
    InlineExecutor,
    ManualScheduler,
    SceneConfig,
    SpringGravityStrategy,
)


def create_graph(n_nodes, n_edges, seed=42):
    """Create a random graph with n nodes and approximately n_edges edges."""
    rng = random.Random(seed)
    g = GraphEdgeList()
    vertices = [g.insert_vertex(f"v{i}") for i in range(n_nodes)]
    for i in range(n_edges):
        u, v = rng.choice(vertices), rng.choice(vertices)
        if u is not v:
            g.insert_edge(u, v, f"e{i}")
    return g


def create_panel(graph, strategy=None):
    panel = GraphPanel(
        graph,
        config=SceneConfig(random_seed=42),
        strategy=strategy,
        executor=InlineExecutor(),
        scheduler=ManualScheduler(),
    )
    panel.initialize(1200, 900)
    panel.set_automatic_layout_enabled(True)
    return panel


# =============================================================================
# Engine Profiles
# =============================================================================


def profile_engine(n_nodes, n_edges, ticks=30, strategy=None):
    panel = create_panel(create_graph(n_nodes, n_edges), strategy)
    panel.scheduler.fire(ticks)


def profile_engine_small():
    """Profile engine: small graph (20 nodes, 30 edges)."""
    profile_engine(20, 30)


def profile_engine_medium():
    """Profile engine: medium graph (100 nodes, 200 edges)."""
    profile_engine(100, 200)


def profile_engine_large():
    """Profile engine: large graph (500 nodes, 1000 edges)."""
    profile_engine(500, 1000, ticks=5)


def profile_engine_gravity():
    """Profile engine with the gravity model (100 nodes)."""
    profile_engine(100, 200, strategy=SpringGravityStrategy())


# =============================================================================
# Reconciliation Profiles
# =============================================================================


def profile_reconcile_growth():
    """Grow a 50 node graph to 550 nodes, refreshing after every 10 inserts."""
    rng = random.Random(7)
    g = create_graph(50, 80)
    panel = create_panel(g)
    for batch in range(50):
        for i in range(10):
            v = g.insert_vertex(f"n{batch}-{i}")
            g.insert_edge(v, rng.choice(g.vertices()), f"n{batch}-{i}-e")
        panel.refresh_blocking()


def profile_reconcile_churn():
    """Remove and re-add vertices of a 300 node graph."""
    rng = random.Random(11)
    g = create_graph(300, 600)
    panel = create_panel(g)
    for step in range(100):
        g.remove_vertex(rng.choice(g.vertices()))
        v = g.insert_vertex(f"c{step}")
        g.insert_edge(v, rng.choice(g.vertices()), f"c{step}-e")
        panel.refresh_blocking()


def benchmark_scenario(name, func, profile=True):
    """Benchmark a scenario and print timing."""
    print(f"\n{'-'*60}")
    print(f"  {name}")
    print('-'*60)

    if profile:
        profiler = cProfile.Profile()
        start_time = time.time()
        profiler.enable()
        func()
        profiler.disable()
        elapsed = time.time() - start_time

        s = io.StringIO()
        ps = pstats.Stats(profiler, stream=s).sort_stats(SortKey.CUMULATIVE)
        ps.print_stats(10)

        print(f"Time: {elapsed:.3f}s")
        print("\nTop 10 functions:")
        for line in s.getvalue().split('\n')[5:16]:
            if line.strip():
                print(line)

        return elapsed, profiler
    else:
        start_time = time.time()
        func()
        elapsed = time.time() - start_time
        print(f"Time: {elapsed:.3f}s")
        return elapsed, None


def main():
    """Run all profiling scenarios."""
    print("=" * 60)
    print("  graph-scene Performance Profiling")
    print("=" * 60)

    profile = "--profile" in sys.argv[1:]
    scenarios = [
        ("Engine: Small (20 nodes)", profile_engine_small),
        ("Engine: Medium (100 nodes)", profile_engine_medium),
        ("Engine: Large (500 nodes)", profile_engine_large),
        ("Engine: Gravity (100 nodes)", profile_engine_gravity),
        ("Reconcile: Growth (550 nodes)", profile_reconcile_growth),
        ("Reconcile: Churn (300 nodes)", profile_reconcile_churn),
    ]

    results = {}
    for name, func in scenarios:
        try:
            elapsed, _ = benchmark_scenario(name, func, profile=profile)
            results[name] = elapsed
        except Exception as e:
            print(f"  ERROR: {e}")
            results[name] = None

    print("\n" + "=" * 60)
    print("  Summary")
    print("=" * 60)
    print(f"\n{'Scenario':<35} {'Time':>10}")
    print("-" * 47)
    for name, elapsed in results.items():
        if elapsed is not None:
            print(f"{name:<35} {elapsed:>10.3f}s")
        else:
            print(f"{name:<35} {'ERROR':>10}")


if __name__ == "__main__":
    main()
