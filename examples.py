#!/usr/bin/env python3
"""
Examples of using the stockflow layout engine.

Run this file to lay out a few example diagrams and save PNG previews.
"""

import logging

from stockflow import DiagramLayout, EdgeSpec, NodeSpec, render_to_png, svg_path


def _stocks(*ids, width=100, height=50):
    return {node_id: NodeSpec(node_id, width, height) for node_id in ids}


def example_chain():
    """Simple chain: Population -> Infected -> Recovered"""
    print("Example 1: Chain")

    nodes = _stocks("Population", "Infected", "Recovered")
    edges = [
        EdgeSpec("infection", "Population", "Infected"),
        EdgeSpec("recovery", "Infected", "Recovered"),
    ]

    geometry = DiagramLayout().run(nodes, edges)
    for edge_id, r in sorted(geometry.routes.items()):
        print(f"  {edge_id}: {svg_path(r)}")
    render_to_png(geometry.placements, geometry.routes, "example_chain.png", 2)
    print("  Saved: example_chain.png\n")


def example_feedback_loop():
    """Inventory loop with a cloud source and an unconnected note"""
    print("Example 2: Feedback Loop")

    nodes = _stocks("Inventory", "Backlog", "Orders")
    nodes["Supply"] = NodeSpec("Supply", 40, 40)
    nodes["Note"] = NodeSpec("Note", 160, 30)
    edges = [
        EdgeSpec("production", "Supply", "Inventory"),
        EdgeSpec("shipments", "Inventory", "Orders"),
        EdgeSpec("ordering", "Orders", "Backlog"),
        EdgeSpec("fulfilment", "Backlog", "Inventory"),
    ]

    engine = DiagramLayout()
    geometry = engine.run(nodes, edges, debug=True)
    print(engine.get_trace().summary())
    render_to_png(geometry.placements, geometry.routes, "example_loop.png", 2)
    print("  Saved: example_loop.png\n")


def example_disconnected():
    """Two independent models stacked in one canvas"""
    print("Example 3: Disconnected Models")

    nodes = _stocks("Water", "Ice", "Savings", "Spending")
    edges = [
        EdgeSpec("freezing", "Water", "Ice"),
        EdgeSpec("melting", "Ice", "Water"),
        EdgeSpec("withdrawals", "Savings", "Spending"),
    ]

    geometry = DiagramLayout().run(nodes, edges)
    render_to_png(
        geometry.placements, geometry.routes, "example_disconnected.png", 2
    )
    print("  Saved: example_disconnected.png\n")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    print("=" * 50)
    print("Stock and Flow Layout Examples")
    print("=" * 50 + "\n")

    example_chain()
    example_feedback_loop()
    example_disconnected()

    print("All examples saved!")
