"""
Call graph between the functions of a package.

Uses networkx as the single source of truth for caller/callee relations.
The graph is purely structural - call resolution lives in the signature
sources that build it.
"""
from typing import Iterable

import networkx as nx


class CallGraph:
    """
    Directed graph of calls between catalog functions.

    Nodes are function ids; an edge (a, b) means function `a` calls
    function `b` at least once. Self-calls are not recorded.
    """

    def __init__(self, function_ids: Iterable[str] = ()):
        self._graph = nx.DiGraph()
        for function_id in function_ids:
            self.add_function(function_id)

    # --- Node management ---

    def add_function(self, function_id: str) -> None:
        """Add a function node."""
        self._graph.add_node(function_id)

    def add_call(self, caller: str, callee: str) -> None:
        """Record that `caller` calls `callee`. Repeated calls collapse into one edge."""
        if caller == callee:
            return
        self._graph.add_edge(caller, callee)

    # --- Queries ---

    def n_callers(self, function_id: str) -> int:
        """Reverse call degree: number of distinct functions calling this one."""
        if function_id not in self._graph:
            return 0
        return self._graph.in_degree(function_id)

    # --- Stats ---

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()
