"""Hierarchy index for the Page Resolver.

This module holds the in-memory page tree: parent pointers, the set of site
roots, and the root-to-domain bindings. The index is built once per run from
decoded rows and is immutable afterwards, so it can be tested without a data
source.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Set, Tuple

from ..models.data_structures import DomainRow, PageRow
from ..utils.error_handlers import CycleError


logger = logging.getLogger(__name__)


# Returned by root() when the parent chain breaks before reaching a root.
NO_ROOT: int = 0


@dataclass(frozen=True)
class HierarchyIndex:
    """Read-only page tree with domain bindings.

    Attributes:
        parents: Page id to parent page id.
        roots: Ids flagged as site root, plus every id whose parent is 0.
        domains: Root page id to bound domain name.
        children: Parent page id to its child ids in ascending order.

    Example:
        >>> index = build_index(
        ...     [PageRow(1, 0, True), PageRow(2, 1), PageRow(3, 2)],
        ...     [DomainRow(1, "example.com")],
        ... )
        >>> index.root(3)
        1
        >>> index.descendants(1)
        [2, 3]
    """

    parents: Mapping[int, int]
    roots: FrozenSet[int]
    domains: Mapping[int, str]
    children: Mapping[int, Tuple[int, ...]] = field(repr=False)

    def __len__(self) -> int:
        return len(self.parents)

    def __contains__(self, uid: object) -> bool:
        return uid in self.parents

    def is_root(self, uid: int) -> bool:
        """Returns True if the page is a site root."""
        return uid in self.roots

    def root(self, uid: int) -> int:
        """Finds the site root that owns a page.

        Follows parent pointers from ``uid`` until a root is reached.

        Args:
            uid: Page id to resolve.

        Returns:
            ``uid`` itself when it is a root, the first root on its parent
            chain otherwise, or NO_ROOT (0) when the chain reaches an id that
            has no row in the pages relation.

        Raises:
            CycleError: If the parent chain revisits a page before reaching a
                root.
        """
        if self.is_root(uid):
            return uid

        path: List[int] = [uid]
        visited: Set[int] = {uid}
        current = uid
        while True:
            if current not in self.parents:
                logger.debug(f"Broken parent chain at page {current} (from {uid})")
                return NO_ROOT
            current = self.parents[current]
            if self.is_root(current):
                return current
            path.append(current)
            if current in visited:
                raise CycleError(uid, path)
            visited.add(current)

    def descendants(self, uid: int) -> List[int]:
        """Collects every page below ``uid`` at any depth.

        Traversal is depth-first pre-order: each child is followed by its own
        subtree, siblings in ascending id order. ``uid`` itself is never part
        of the result.

        Args:
            uid: Page id whose subtree is collected.

        Returns:
            Descendant ids, each exactly once. Empty for a leaf or an unknown
            id.

        Raises:
            CycleError: If the walk reaches a page twice, which only happens
                when the parent pointers form a cycle.
        """
        result: List[int] = []
        visited: Set[int] = {uid}
        # Stack holds (node, path from uid to node) pairs.
        stack: List[Tuple[int, Tuple[int, ...]]] = [
            (child, (uid, child)) for child in reversed(self.children.get(uid, ()))
        ]

        while stack:
            node, path = stack.pop()
            if node in visited:
                raise CycleError(uid, path)
            visited.add(node)
            result.append(node)
            for child in reversed(self.children.get(node, ())):
                stack.append((child, path + (child,)))

        return result

    def domain(self, root_id: int) -> str:
        """Returns the domain bound to a root id, or an empty string."""
        return self.domains.get(root_id, "")

    def resolve_domain(self, uid: int) -> str:
        """Returns the domain of the root owning ``uid``, or an empty string."""
        return self.domain(self.root(uid))


def build_parent_map(
    page_rows: Iterable[PageRow],
) -> Tuple[Dict[int, int], Set[int]]:
    """Builds the parent map and root set from page rows.

    A later row for the same uid replaces the earlier parent pointer.

    Args:
        page_rows: Decoded rows of the pages relation.

    Returns:
        Tuple of (parent map, root id set).
    """
    parents: Dict[int, int] = {}
    roots: Set[int] = set()
    for row in page_rows:
        parents[row.uid] = row.pid
        if row.is_root or row.pid == 0:
            roots.add(row.uid)
    return parents, roots


def build_domain_map(domain_rows: Iterable[DomainRow]) -> Dict[int, str]:
    """Binds one domain name per root id.

    Rows must arrive in priority order. The first row for a root wins unless
    a later row is forced, in which case the forced row replaces it.

    Args:
        domain_rows: Decoded rows of the domains relation, in priority order.

    Returns:
        Root id to domain name.
    """
    domains: Dict[int, str] = {}
    for row in domain_rows:
        if row.root_id in domains and not row.forced:
            logger.debug(
                f"Skipping domain {row.domain_name!r} for root {row.root_id}: "
                f"already bound to {domains[row.root_id]!r}"
            )
            continue
        domains[row.root_id] = row.domain_name
    return domains


def build_children_map(parents: Mapping[int, int]) -> Dict[int, Tuple[int, ...]]:
    """Inverts the parent map into sorted child tuples."""
    grouped: Dict[int, List[int]] = {}
    for uid, pid in parents.items():
        grouped.setdefault(pid, []).append(uid)
    return {pid: tuple(sorted(uids)) for pid, uids in grouped.items()}


def build_index(
    page_rows: Iterable[PageRow], domain_rows: Iterable[DomainRow]
) -> HierarchyIndex:
    """Builds the immutable hierarchy index.

    Args:
        page_rows: Decoded rows of the pages relation.
        domain_rows: Decoded rows of the domains relation, in priority order.

    Returns:
        HierarchyIndex over the given rows.
    """
    parents, roots = build_parent_map(page_rows)
    domains = build_domain_map(domain_rows)
    children = build_children_map(parents)

    index = HierarchyIndex(
        parents=MappingProxyType(parents),
        roots=frozenset(roots),
        domains=MappingProxyType(domains),
        children=MappingProxyType(children),
    )
    logger.info(
        f"Built hierarchy index: {len(parents)} pages, "
        f"{len(roots)} roots, {len(domains)} domains"
    )
    return index
