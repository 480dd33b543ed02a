"""Extension registry with precomputed dependency adjacency.

Extension sets are plain ``int`` bitmasks where bit ``i`` stands for the
extension with id ``i``. Ids are dense, so the number of extensions and the
bitmask width are checked against each other once, when the catalog is
built.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from ..core.models import DependencyEdge, ExtensionRecord
from ..utils.graphs import CircularDependencyError, topological_sort

logger = logging.getLogger(__name__)

# Number of bits available for extension ids.
EXTENSION_BITSET_WIDTH = 62


class CatalogError(ValueError):
    """Raised when static catalog data is inconsistent."""

    pass


def iter_bits(mask: int) -> Iterator[int]:
    """Yield the ids set in ``mask``, lowest first."""
    index = 0
    while mask:
        if mask & 1:
            yield index
        mask >>= 1
        index += 1


def _dedupe(ids: list[int]) -> tuple[int, ...]:
    return tuple(dict.fromkeys(ids))


class ExtensionCatalog:
    """Immutable registry of extensions and their dependency edges.

    Adjacency is built once in the constructor; ``prerequisites`` and
    ``dependents`` are tuple lookups afterwards.
    """

    def __init__(
        self,
        records: Iterable[ExtensionRecord],
        edges: Iterable[DependencyEdge] = (),
        aliases: dict[str, str] | None = None,
        width: int = EXTENSION_BITSET_WIDTH,
    ):
        self._records: tuple[ExtensionRecord, ...] = tuple(records)
        self._edges: tuple[DependencyEdge, ...] = tuple(edges)
        self._aliases: dict[str, str] = dict(aliases or {})
        self._width = width

        if len(self._records) > width:
            raise CatalogError(
                f"{len(self._records)} extensions do not fit in a "
                f"{width}-bit extension set"
            )

        self._by_name: dict[str, ExtensionRecord] = {}
        for index, record in enumerate(self._records):
            if record.id != index:
                raise CatalogError(
                    f"Extension ids must be dense and ordered: "
                    f"'{record.name}' has id {record.id}, expected {index}"
                )
            if record.name in self._by_name:
                raise CatalogError(f"Duplicate extension name '{record.name}'")
            self._by_name[record.name] = record

        count = len(self._records)
        prerequisites: list[list[int]] = [[] for _ in range(count)]
        dependents: list[list[int]] = [[] for _ in range(count)]
        for edge in self._edges:
            for endpoint in (edge.earlier, edge.later):
                if not 0 <= endpoint < count:
                    raise CatalogError(
                        f"Dependency edge {edge.earlier}->{edge.later} "
                        f"references unknown extension id {endpoint}"
                    )
            prerequisites[edge.later].append(edge.earlier)
            dependents[edge.earlier].append(edge.later)

        try:
            topological_sort(
                list(range(count)), [(e.earlier, e.later) for e in self._edges]
            )
        except CircularDependencyError as exc:
            names = [self._records[i].name for i in exc.remaining]
            raise CatalogError(
                f"Cyclic extension dependencies involving: {names}"
            ) from exc

        self._prerequisites = tuple(_dedupe(p) for p in prerequisites)
        self._dependents = tuple(_dedupe(d) for d in dependents)

        logger.debug(
            "Built extension catalog: %d extensions, %d edges",
            count,
            len(self._edges),
        )

    # ── Record lookup ──

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ExtensionRecord]:
        return iter(self._records)

    @property
    def width(self) -> int:
        return self._width

    @property
    def edges(self) -> tuple[DependencyEdge, ...]:
        return self._edges

    @property
    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def ids(self) -> range:
        """All extension ids in canonical catalog order."""
        return range(len(self._records))

    def get(self, ext_id: int) -> ExtensionRecord:
        return self._records[ext_id]

    def find(self, name: str) -> ExtensionRecord | None:
        """Look up an extension by exact canonical name."""
        return self._by_name.get(name)

    def resolve_alias(self, name: str) -> str:
        return self._aliases.get(name, name)

    def parse_extension(self, name: str) -> ExtensionRecord | None:
        """Look up an extension by alias or canonical name."""
        return self.find(self.resolve_alias(name))

    # ── Adjacency ──

    def prerequisites(self, ext_id: int) -> tuple[int, ...]:
        """Ids that ``ext_id`` directly depends on."""
        return self._prerequisites[ext_id]

    def dependents(self, ext_id: int) -> tuple[int, ...]:
        """Ids that directly depend on ``ext_id``."""
        return self._dependents[ext_id]

    # ── Bitmask helpers ──

    def bitset(self, items: Iterable[str | int]) -> int:
        """Build a bitmask from extension names or ids.

        Raises:
            CatalogError: If a name or id is not in the catalog.
        """
        mask = 0
        for item in items:
            if isinstance(item, int):
                if not 0 <= item < len(self._records):
                    raise CatalogError(f"Unknown extension id {item}")
                mask |= 1 << item
                continue
            record = self.find(item)
            if record is None:
                raise CatalogError(f"Unknown extension '{item}'")
            mask |= 1 << record.id
        return mask

    def names(self, mask: int) -> list[str]:
        return [self._records[i].name for i in iter_bits(mask)]

    def extension_features(self, mask: int) -> list[str]:
        """Positive feature tokens for every extension set in ``mask``."""
        return [self._records[i].feature for i in iter_bits(mask)]

    def arch_ext_feature(self, token: str, negation_prefix: str = "no") -> str | None:
        """Map 'name' to its enable token and 'noname' to its disable token."""
        negated = token.startswith(negation_prefix)
        base = token[len(negation_prefix) :] if negated else token
        record = self.parse_extension(base)
        if record is None:
            return None
        return record.neg_feature if negated else record.feature
