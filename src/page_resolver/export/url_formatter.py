"""URL Formatter Module.

Renders the final id selection either as a single delimited id list or as one
line per id: a page URL, or a double-quoted CSV row carrying the id's
associated values.

Classes:
    URLFormatter: Formats resolved ids for output.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Optional, Sequence

from ..processing.hierarchy_index import HierarchyIndex
from ..utils.config_loader import DEFAULT_URL_TEMPLATE


logger = logging.getLogger(__name__)


DEFAULT_ID_SEPARATOR = ", "
CSV_FIELD_SEPARATOR = ","


def quote_field(value: str) -> str:
    """Wrap a value in double quotes, escaping embedded quotes as ``\\"``."""
    return '"' + value.replace('"', '\\"') + '"'


@dataclass
class FormatStats:
    """Counters for one formatting pass.

    Attributes:
        written: Lines produced.
        skipped_ids: Ids dropped because their root has no domain.
    """

    written: int = 0
    skipped_ids: List[int] = field(default_factory=list)


class URLFormatter:
    """Formats resolved page ids.

    Attributes:
        index: Hierarchy index used to find each id's root and domain.
        url_template: ``str.format`` template with ``{domain}`` and ``{uid}``.
        id_separator: Separator for id-list output.

    Example:
        >>> formatter = URLFormatter(index)
        >>> list(formatter.url_lines([3]))
        ['https://example.com/index.php?id=3']
    """

    def __init__(
        self,
        index: HierarchyIndex,
        url_template: str = DEFAULT_URL_TEMPLATE,
        id_separator: str = DEFAULT_ID_SEPARATOR,
    ) -> None:
        self.index = index
        self.url_template = url_template
        self.id_separator = id_separator
        self.stats = FormatStats()

    def format_id_list(self, ids: Sequence[int]) -> str:
        """Join ids into one line, e.g. ``"4, 7, 9"``."""
        return self.id_separator.join(str(uid) for uid in ids)

    def format_url(self, domain: str, uid: int) -> str:
        return self.url_template.format(domain=domain, uid=uid)

    def url_lines(
        self,
        ids: Iterable[int],
        n_fields: int = 0,
        values_for: Optional[Callable[[int], List[str]]] = None,
    ) -> Iterator[str]:
        """Yield one output line per id whose root has a domain.

        Ids whose root has no bound domain are skipped without output.

        Args:
            ids: Final id selection.
            n_fields: Number of associated values per row. With 0 each line
                is the bare URL; otherwise a CSV row of the quoted URL and
                ``n_fields`` quoted values.
            values_for: Lookup for an id's associated values. Missing or
                short value lists are padded with empty strings.

        Yields:
            Output lines without trailing newline.

        Raises:
            CycleError: If an id sits on a cyclic parent chain.
        """
        self.stats = FormatStats()
        for uid in ids:
            domain = self.index.resolve_domain(uid)
            if not domain:
                logger.debug(f"No domain for page {uid}, skipping")
                self.stats.skipped_ids.append(uid)
                continue

            url = self.format_url(domain, uid)
            if n_fields > 0:
                yield self._csv_row(url, uid, n_fields, values_for)
            else:
                yield url
            self.stats.written += 1

        if self.stats.skipped_ids:
            logger.info(
                f"Skipped {len(self.stats.skipped_ids)} ids without a domain"
            )

    def _csv_row(
        self,
        url: str,
        uid: int,
        n_fields: int,
        values_for: Optional[Callable[[int], List[str]]],
    ) -> str:
        values = list(values_for(uid)) if values_for else []
        values = (values + [""] * n_fields)[:n_fields]
        fields = [quote_field(url)] + [quote_field(value) for value in values]
        return CSV_FIELD_SEPARATOR.join(fields)
