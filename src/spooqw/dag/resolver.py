"""Step graph — edges, layout levels, topological order, cycle detection."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field

from spooqw.pipeline.models import Step
from spooqw.pipeline.types import EdgeKind

logger = logging.getLogger("spooqw.dag")


@dataclass
class StepNode:
    """A step in the dependency graph. Edge lists keep insertion order."""
    id: str
    kind: str
    upstream: list[str] = field(default_factory=list)
    downstream: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    kind: EdgeKind

    def to_dict(self) -> dict:
        return {"source": self.source, "target": self.target, "kind": self.kind.value}


class CycleError(Exception):
    """Raised when ordering is requested for a graph with a cycle."""
    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Dependency cycle detected: {' → '.join(cycle)}")


class StepGraph:
    """Dependency graph over a pipeline's steps.

    Explicit edges come from `source` and `dependsOn`; references to ids
    that are not in the graph are ignored (the validator reports them).
    Implicit edges link a step to the one before it when it declares no
    upstream at all. They are display hints and take no part in ordering
    or cycle detection.
    """

    def __init__(self):
        self._nodes: dict[str, StepNode] = {}
        self._edges: list[Edge] = []

    @classmethod
    def from_steps(cls, steps: list[Step], implicit: bool = True) -> "StepGraph":
        graph = cls()
        for step in steps:
            graph.add_step(step.id, step.kind)

        for step in steps:
            if step.source:
                graph.add_dependency(step.source, step.id, EdgeKind.SOURCE)
            for dep in step.depends_on or []:
                if dep != step.source:
                    graph.add_dependency(dep, step.id, EdgeKind.DEPENDS_ON)

        if implicit:
            for current, following in zip(steps, steps[1:]):
                if not following.source and not following.depends_on:
                    graph._edges.append(Edge(current.id, following.id, EdgeKind.IMPLICIT))
        return graph

    def add_step(self, step_id: str, kind: str) -> None:
        if step_id not in self._nodes:
            self._nodes[step_id] = StepNode(id=step_id, kind=kind)

    def add_dependency(self, upstream: str, downstream: str, kind: EdgeKind = EdgeKind.DEPENDS_ON) -> None:
        """Add an edge: downstream reads from upstream."""
        if upstream not in self._nodes or downstream not in self._nodes:
            logger.debug(f"Ignoring edge {upstream} → {downstream}: unknown step")
            return
        if downstream in self._nodes[upstream].downstream:
            return
        self._nodes[upstream].downstream.append(downstream)
        self._nodes[downstream].upstream.append(upstream)
        self._edges.append(Edge(upstream, downstream, kind))

    @property
    def nodes(self) -> dict[str, StepNode]:
        return self._nodes

    def edges(self, include_implicit: bool = True) -> list[Edge]:
        if include_implicit:
            return list(self._edges)
        return [e for e in self._edges if e.kind is not EdgeKind.IMPLICIT]

    def get_upstream(self, step_id: str) -> set[str]:
        """Get all transitive upstream steps."""
        return self._walk(step_id, lambda node: node.upstream)

    def get_downstream(self, step_id: str) -> set[str]:
        """Get all transitive downstream steps."""
        return self._walk(step_id, lambda node: node.downstream)

    def _walk(self, start: str, neighbours) -> set[str]:
        visited = set()
        queue = deque([start])
        while queue:
            node = queue.popleft()
            if node in visited or node not in self._nodes:
                continue
            visited.add(node)
            queue.extend(neighbours(self._nodes[node]))
        visited.discard(start)
        return visited

    def detect_cycles(self) -> list[str] | None:
        """Detect cycles with an iterative DFS. Returns the cycle path or None.

        The path starts and ends on the same step, e.g. ["a", "b", "a"].
        """
        WHITE, GRAY, BLACK = 0, 1, 2
        color = {n: WHITE for n in self._nodes}

        for root in self._nodes:
            if color[root] != WHITE:
                continue
            color[root] = GRAY
            path = [root]
            stack = [iter(self._nodes[root].downstream)]

            while stack:
                child = next(stack[-1], None)
                if child is None:
                    color[path.pop()] = BLACK
                    stack.pop()
                    continue
                if color[child] == GRAY:
                    return path[path.index(child):] + [child]
                if color[child] == WHITE:
                    color[child] = GRAY
                    path.append(child)
                    stack.append(iter(self._nodes[child].downstream))
        return None

    def topological_sort(self) -> list[str]:
        """Return step ids upstream first; ties keep declaration order.

        Raises CycleError if a cycle is detected.
        """
        return [step_id for group in self._kahn_groups() for step_id in group]

    def parallel_groups(self) -> list[list[str]]:
        """Return execution groups — steps in one group have no edges between them.

        Each group only depends on steps in earlier groups.
        """
        return self._kahn_groups()

    def _kahn_groups(self) -> list[list[str]]:
        cycle = self.detect_cycles()
        if cycle:
            raise CycleError(cycle)

        in_degree = {n: len(self._nodes[n].upstream) for n in self._nodes}
        current_group = [n for n, d in in_degree.items() if d == 0]
        groups = []

        while current_group:
            groups.append(current_group)
            ready = set()
            for node in current_group:
                for child in self._nodes[node].downstream:
                    in_degree[child] -= 1
                    if in_degree[child] == 0:
                        ready.add(child)
            # Declaration order within a group
            current_group = [n for n in self._nodes if n in ready]

        return groups

    def levels(self) -> dict[str, int]:
        """Layout level per step: 0 for roots, else one below its deepest upstream.

        Safe on cyclic graphs: a step reached again while its own level is
        still being computed counts as level 0.
        """
        levels: dict[str, int] = {}
        for root in self._nodes:
            if root in levels:
                continue
            in_progress = {root}
            stack = [(root, iter(self._nodes[root].upstream))]
            while stack:
                node, pending = stack[-1]
                parent = next(pending, None)
                if parent is None:
                    stack.pop()
                    in_progress.discard(node)
                    upstream = self._nodes[node].upstream
                    levels[node] = 1 + max((levels.get(p, 0) for p in upstream), default=-1)
                    continue
                if parent in levels or parent in in_progress:
                    continue
                in_progress.add(parent)
                stack.append((parent, iter(self._nodes[parent].upstream)))
        return {n: levels[n] for n in self._nodes}

    def to_dict(self) -> dict:
        """Serialize the graph for JSON output. Raises CycleError on cycles."""
        levels = self.levels()
        return {
            "nodes": [
                {"id": node.id, "kind": node.kind, "level": levels[node.id]}
                for node in self._nodes.values()
            ],
            "edges": [edge.to_dict() for edge in self._edges],
            "order": self.topological_sort(),
            "groups": self.parallel_groups(),
        }
