"""
Data structures shared across the page resolver.

Rows read from the data source are decoded into the frozen dataclasses below
before they reach the hierarchy index, so the index never sees driver types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class OutputMode(str, Enum):
    """How the final id selection is rendered."""

    URL = "url"
    ID_LIST = "id_list"


@dataclass(frozen=True)
class PageRow:
    """One row of the pages relation.

    Attributes:
        uid: Page id.
        pid: Parent page id, 0 for a top-level page.
        is_root: Whether the page is flagged as a site root.
    """

    uid: int
    pid: int
    is_root: bool = False


@dataclass(frozen=True)
class DomainRow:
    """One row of the domains relation.

    Attributes:
        root_id: Id of the root page the domain is bound to.
        domain_name: Host name published for that root.
        forced: Whether this binding overrides an earlier one.
    """

    root_id: int
    domain_name: str
    forced: bool = False


@dataclass(frozen=True)
class AssociatedRow:
    """Extra column values captured for an id by an ad-hoc query."""

    uid: int
    values: Tuple[str, ...] = ()


@dataclass
class ResolveRequest:
    """Everything one resolver run needs besides configuration.

    Attributes:
        dsn: Connection string for the data source.
        explicit_id: Single page id to start from, 0 for none.
        query: Optional SQL text yielding page ids in its first column.
        n_fields: Number of extra columns ``query`` projects after the id.
        expand_to_children: Replace each seed by its descendants.
        collapse_to_root: Replace each seed by its root page.
        output_mode: URL lines or a single id list.
    """

    dsn: str
    explicit_id: int = 0
    query: Optional[str] = None
    n_fields: int = 0
    expand_to_children: bool = False
    collapse_to_root: bool = False
    output_mode: OutputMode = OutputMode.URL

    def __post_init__(self) -> None:
        """Validate request values.

        Raises:
            ValueError: If n_fields is negative, or set without a query.
        """
        if self.query is not None and not self.query.strip():
            self.query = None
        if self.n_fields < 0:
            raise ValueError(f"n_fields must be non-negative, got {self.n_fields}")
        if self.n_fields > 0 and not self.query:
            raise ValueError("n_fields requires a query that projects the fields")


@dataclass
class ResolveResult:
    """Outcome of one resolver run.

    Attributes:
        selected_ids: Final id sequence after selection.
        lines: Rendered output lines.
        skipped_ids: Ids dropped in URL mode because their root has no domain.
    """

    selected_ids: List[int]
    lines: List[str]
    skipped_ids: List[int] = field(default_factory=list)
