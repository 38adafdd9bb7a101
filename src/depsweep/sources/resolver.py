"""SAT-based resolver over a ``LocalRegistry``.

Encodes "pick one version per reachable source root such that every
requirement holds and the target is pinned" as a Boolean satisfiability
instance and hands it to a CDCL solver (Glucose3 via python-sat).

Encoding, for the graph of every version of every reachable root:

1. One variable per (root, version).
2. At most one version per root.
3. The pinned target version is a unit clause.
4. Each project requirement: at least one satisfying version.
5. Each dependency edge: selecting a version implies selecting one of the
   versions satisfying its constraint.

Lock pins are passed as solver assumptions. When the locked versions cannot
be kept, the instance is solved again without them.
"""

from __future__ import annotations

import logging
import shutil
from collections import defaultdict, deque
from pathlib import Path

from pysat.solvers import Solver

from depsweep.exceptions import SolveError, SourceError, WriteError
from depsweep.sources.base import LockedProject, Resolver, Solution, SolveRequest
from depsweep.sources.graph import PackageGraph, PackageNode
from depsweep.sources.registry import LocalRegistry

logger = logging.getLogger(__name__)


class SatResolver(Resolver):
    """Resolver backed by a SAT solver and a local registry.

    Args:
        registry: The version source the graph is read from.
        solver_name: python-sat solver identifier.
    """

    def __init__(self, registry: LocalRegistry, solver_name: str = "g3") -> None:
        self._registry = registry
        self._solver_name = solver_name

    # -- solving ------------------------------------------------------------

    def solve(self, request: SolveRequest) -> Solution:
        graph = self._build_graph(request)
        self._check_requirements(graph, request)
        logger.debug(
            "Solving %s@%s over %d candidate versions",
            request.target, request.pin, graph.node_count,
        )

        var_map: dict[tuple[str, str], int] = {}
        inv_map: dict[int, tuple[str, str]] = {}
        for next_var, node in enumerate(graph.nodes(), start=1):
            var_map[(node.root, node.version.name)] = next_var
            inv_map[next_var] = (node.root, node.version.name)

        clauses = self._encode(graph, request, var_map)
        assumptions = [
            var_map[(root, name)]
            for root, name in sorted(request.lock.items())
            if root != request.target and (root, name) in var_map
        ]

        solver = Solver(name=self._solver_name, bootstrap_with=clauses)
        try:
            found = solver.solve(assumptions=assumptions)
            if not found and assumptions:
                logger.debug(
                    "Lock pins cannot be kept with %s@%s; solving without them",
                    request.target, request.pin,
                )
                found = solver.solve()
            if not found:
                raise SolveError("; ".join(self._diagnose(graph, request)))
            model = solver.get_model()
        finally:
            solver.delete()

        selected = dict(inv_map[lit] for lit in model if lit > 0 and lit in inv_map)
        keep = graph.reachable(selected, [*request.requirements, request.target])
        projects = tuple(
            LockedProject(root, graph.node(root, selected[root]).version)
            for root in sorted(keep)
        )
        return Solution(projects=projects)

    def _build_graph(self, request: SolveRequest) -> PackageGraph:
        """Load every version of every root reachable from the request."""
        graph = PackageGraph()
        queue: deque[str] = deque([request.target, *request.requirements])
        while queue:
            root = queue.popleft()
            if root == request.import_root or graph.has_root(root):
                continue
            try:
                entries = self._registry.entries(root)
            except SourceError as exc:
                raise SolveError(f"cannot load versions of {root}: {exc}") from exc
            for version, requires in entries:
                requires = {
                    dep: c for dep, c in requires.items() if dep != request.import_root
                }
                graph.add(PackageNode(root, version, requires))
                queue.extend(dep for dep in requires if not graph.has_root(dep))
            graph.declare(root)
        return graph

    def _check_requirements(self, graph: PackageGraph, request: SolveRequest) -> None:
        if graph.node(request.target, request.pin.name) is None:
            raise SolveError(f"{request.target} has no version {request.pin}")
        for root, constraint in request.requirements.items():
            if root == request.import_root:
                continue
            if not graph.matching(root, constraint):
                available = ", ".join(v.name for v in graph.versions(root)) or "none"
                raise SolveError(
                    f"No version of {root} satisfies constraint {constraint} "
                    f"(available: {available})"
                )

    @staticmethod
    def _encode(
        graph: PackageGraph,
        request: SolveRequest,
        var_map: dict[tuple[str, str], int],
    ) -> list[list[int]]:
        clauses: list[list[int]] = []

        per_root: dict[str, list[int]] = defaultdict(list)
        for (root, _), var in var_map.items():
            per_root[root].append(var)
        for vars_list in per_root.values():
            for i in range(len(vars_list)):
                for j in range(i + 1, len(vars_list)):
                    clauses.append([-vars_list[i], -vars_list[j]])

        clauses.append([var_map[(request.target, request.pin.name)]])

        for root, constraint in request.requirements.items():
            if root == request.import_root:
                continue
            clauses.append([var_map[(root, v.name)] for v in graph.matching(root, constraint)])

        for node in graph.nodes():
            var = var_map[(node.root, node.version.name)]
            for dep, constraint in node.requires.items():
                satisfying = [var_map[(dep, v.name)] for v in graph.matching(dep, constraint)]
                clauses.append([-var] + satisfying)

        return clauses

    @staticmethod
    def _diagnose(graph: PackageGraph, request: SolveRequest) -> list[str]:
        """Describe why no solution exists, most specific reasons first."""
        msgs: list[str] = []
        pinned = graph.node(request.target, request.pin.name)
        target_ref = f"{request.target}@{request.pin}"

        for dep, constraint in pinned.requires.items():
            if not graph.matching(dep, constraint):
                msgs.append(
                    f"{target_ref} requires {dep} {constraint} "
                    "but no satisfying version exists"
                )

        for root, constraint in request.requirements.items():
            if root == request.import_root:
                continue
            acceptable = graph.matching(root, constraint)
            excluding = [
                v for v in acceptable
                if request.target in graph.node(root, v.name).requires
                and not graph.node(root, v.name).requires[request.target].matches(request.pin)
            ]
            if acceptable and len(excluding) == len(acceptable):
                msgs.append(
                    f"every acceptable version of {root} excludes {target_ref}"
                )

        if not msgs:
            msgs.append(
                "unsatisfiable constraint: no consistent set of versions exists "
                f"with {target_ref}"
            )
        return msgs

    # -- export -------------------------------------------------------------

    def export(self, solution: Solution, vendor_dir: Path) -> None:
        """Copy each resolved source tree to ``<vendor_dir>/<root>``."""
        try:
            vendor_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise WriteError(f"cannot create {vendor_dir}: {exc}") from exc
        for project in solution.projects:
            src = self._registry.tree_path(project.root, project.version)
            if not src.is_dir():
                raise WriteError(
                    f"no cached source tree for {project.root}@{project.version} at {src}"
                )
            try:
                shutil.copytree(src, vendor_dir / project.root)
            except (OSError, shutil.Error) as exc:
                raise WriteError(
                    f"cannot write {project.root}@{project.version}: {exc}"
                ) from exc
