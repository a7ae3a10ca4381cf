"""
In-memory graph sources.

Reference implementations of the GraphSource protocol, thread-safe so that
background workers can mutate them while a panel reconciles:
- GraphEdgeList: undirected graph backed by vertex and edge lists
- DigraphEdgeList: directed variant with inbound/outbound queries
"""

from .edge_list import DigraphEdgeList, GraphEdgeList

__all__ = ["GraphEdgeList", "DigraphEdgeList"]
