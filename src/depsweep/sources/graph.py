"""Package graph: every reachable (root, version) node and its requirements.

The graph is rebuilt from the version source for each solve request, so no
state carries over from one candidate version to the next.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable

from depsweep.core.versions import Constraint, Version


# ---------------------------------------------------------------------------
# PackageNode: A vertex in the graph
# ---------------------------------------------------------------------------


@dataclass
class PackageNode:
    """A source root at one specific version, with its declared requirements."""

    root: str
    version: Version
    requires: dict[str, Constraint] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# PackageGraph
# ---------------------------------------------------------------------------


class PackageGraph:
    """All candidate versions of every source root a project can reach.

    Thread safety: This class is NOT thread-safe. Each solve builds its own.
    """

    def __init__(self) -> None:
        self._nodes: dict[tuple[str, str], PackageNode] = {}
        self._order: dict[str, list[str]] = {}

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    def add(self, node: PackageNode) -> None:
        """Add a node, replacing any node with the same (root, version)."""
        key = (node.root, node.version.name)
        if key not in self._nodes:
            self._order.setdefault(node.root, []).append(node.version.name)
        self._nodes[key] = node

    def declare(self, root: str) -> None:
        """Record *root* as loaded, even when it has no versions."""
        self._order.setdefault(root, [])

    def has_root(self, root: str) -> bool:
        return root in self._order

    def versions(self, root: str) -> list[Version]:
        """Return the versions of *root* in catalog order."""
        return [self._nodes[(root, name)].version for name in self._order.get(root, [])]

    def node(self, root: str, name: str) -> PackageNode | None:
        return self._nodes.get((root, name))

    def nodes(self) -> Iterable[PackageNode]:
        return self._nodes.values()

    def matching(self, root: str, constraint: Constraint) -> list[Version]:
        """Return the versions of *root* that satisfy *constraint*."""
        return [v for v in self.versions(root) if constraint.matches(v)]

    def reachable(self, selected: dict[str, str], starts: Iterable[str]) -> set[str]:
        """BFS over the selected versions, starting from *starts*.

        Args:
            selected: Chosen version name per root.
            starts: Roots the project requires directly.

        Returns:
            The roots reachable through requirements of selected versions.
        """
        seen: set[str] = set()
        queue: deque[str] = deque(r for r in starts if r in selected)
        while queue:
            root = queue.popleft()
            if root in seen:
                continue
            seen.add(root)
            node = self._nodes.get((root, selected[root]))
            if node is None:
                continue
            for dep in node.requires:
                if dep in selected and dep not in seen:
                    queue.append(dep)
        return seen
