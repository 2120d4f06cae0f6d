"""Selection combinator for the Page Resolver.

Merges the explicit page id and the ids returned by the argument query into
the final id sequence, applying the children-expansion and root-collapse
transforms.
"""

import logging
from typing import List, Optional, Sequence

from ..utils.error_handlers import NoSelectionError
from .hierarchy_index import HierarchyIndex


logger = logging.getLogger(__name__)


def _transform_seed(
    index: HierarchyIndex,
    seed: int,
    expand_to_children: bool,
    collapse_to_root: bool,
) -> List[int]:
    ids: List[int] = []
    if expand_to_children:
        ids.extend(index.descendants(seed))
    if collapse_to_root:
        ids.append(index.root(seed))
    return ids


def combine_selection(
    index: HierarchyIndex,
    explicit_id: Optional[int] = None,
    query_ids: Optional[Sequence[int]] = None,
    expand_to_children: bool = False,
    collapse_to_root: bool = False,
) -> List[int]:
    """Build the final ordered id sequence.

    The explicit id is handled first, then the query ids:

    * children flag: each seed contributes its descendants;
    * roots flag: each seed contributes its root;
    * both flags: for the explicit id its descendants then its root; for query
      ids all descendants first, then all roots;
    * neither flag: the explicit id is kept as is, and query ids, when given,
      replace everything selected so far.

    ``query_ids`` being an empty list is different from None: it means the
    query ran and matched nothing, which in identity mode empties the result.

    Args:
        index: Hierarchy index to resolve against.
        explicit_id: Single seed id. Ignored unless greater than 0.
        query_ids: Ids from the argument query, or None when no query ran.
        expand_to_children: Apply children expansion.
        collapse_to_root: Apply root collapse.

    Returns:
        Final id sequence. May contain duplicates when seeds overlap.

    Raises:
        NoSelectionError: If the final sequence is empty.
        CycleError: If a seed sits on a cyclic parent chain.
    """
    identity = not expand_to_children and not collapse_to_root
    selected: List[int] = []

    if explicit_id is not None and explicit_id > 0:
        if identity:
            selected.append(explicit_id)
        else:
            selected.extend(
                _transform_seed(
                    index, explicit_id, expand_to_children, collapse_to_root
                )
            )

    if query_ids is not None:
        if identity:
            selected = list(query_ids)
        else:
            if expand_to_children:
                for qid in query_ids:
                    selected.extend(index.descendants(qid))
            if collapse_to_root:
                for qid in query_ids:
                    selected.append(index.root(qid))

    if not selected:
        raise NoSelectionError()

    logger.info(f"Selected {len(selected)} ids")
    return selected
