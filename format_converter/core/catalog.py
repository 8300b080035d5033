"""Format compatibility catalog and target selection."""

from difflib import get_close_matches
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import structlog

from format_converter.core.constants import DEFAULT_FORMAT_TABLE
from format_converter.core.exceptions import InvalidSelectionError
from format_converter.models.conversion import SourceCategory

logger = structlog.get_logger()


def normalize_extension(value: str) -> str:
    """Lower-case an extension and make sure it carries the leading dot."""
    value = value.strip().lower()
    if value and not value.startswith("."):
        value = f".{value}"
    return value


class FormatCatalog:
    """Immutable mapping from a source extension to its legal targets.

    Built once at startup and passed explicitly to whoever needs it. Lookups
    are case-insensitive; keys and targets are stored normalized.
    """

    def __init__(self, table: Mapping[str, Iterable[str]]):
        normalized: Dict[str, Tuple[str, ...]] = {}
        for source, targets in table.items():
            key = normalize_extension(source)
            if not key:
                raise ValueError("Catalog keys must be non-empty extensions")
            ordered: List[str] = []
            for target in targets:
                ext = normalize_extension(target)
                if ext and ext not in ordered:
                    ordered.append(ext)
            normalized[key] = tuple(ordered)

        self._table = MappingProxyType(normalized)
        self._all_targets = self._collect_targets(normalized)

    @classmethod
    def default(cls) -> "FormatCatalog":
        return cls(DEFAULT_FORMAT_TABLE)

    @staticmethod
    def _collect_targets(table: Mapping[str, Tuple[str, ...]]) -> Tuple[str, ...]:
        seen: Dict[str, None] = {}
        for targets in table.values():
            for target in targets:
                seen.setdefault(target, None)
        return tuple(seen)

    @property
    def table(self) -> Mapping[str, Tuple[str, ...]]:
        return self._table

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._table)

    def is_supported(self, extension: str) -> bool:
        """True iff the extension is a catalog key."""
        return normalize_extension(extension) in self._table

    def is_known_target(self, extension: str) -> bool:
        return normalize_extension(extension) in self._all_targets

    def list_all_targets(self) -> Tuple[str, ...]:
        """Every known target, de-duplicated in first-seen order.

        Not filtered by source format.
        """
        return self._all_targets

    def targets_for(self, extension: str) -> Tuple[str, ...]:
        return self._table.get(normalize_extension(extension), ())

    def category_for(self, extension: str) -> SourceCategory:
        return SourceCategory.from_extension(normalize_extension(extension))

    def select_target(
        self,
        choice: Union[int, str],
        targets: Optional[Sequence[str]] = None,
    ) -> str:
        """Resolve a 1-based menu choice into a target extension.

        Args:
            choice: Menu number, as typed by the user or already parsed
            targets: Menu being answered; defaults to list_all_targets()

        Raises:
            InvalidSelectionError: non-numeric, zero, negative or past the end
        """
        options = self.list_all_targets() if targets is None else tuple(targets)
        raw = str(choice).strip()

        try:
            index = int(raw)
        except ValueError:
            raise InvalidSelectionError(
                f"Selection must be a number, got {raw!r}",
                details={"raw_input": raw, "option_count": len(options)},
            )

        if not 1 <= index <= len(options):
            raise InvalidSelectionError(
                f"Selection must be between 1 and {len(options)}",
                details={"raw_input": raw, "option_count": len(options)},
            )

        return options[index - 1]

    def suggest(self, extension: str) -> Optional[str]:
        """Closest catalog key to a mistyped extension, if any."""
        matches = get_close_matches(
            normalize_extension(extension), self.keys(), n=1, cutoff=0.6
        )
        return matches[0] if matches else None

    def asymmetries(self) -> List[Tuple[str, str]]:
        """Pairs (source, target) where target is a key that does not list source back."""
        pairs = []
        for source, targets in self._table.items():
            for target in targets:
                if target in self._table and source not in self._table[target]:
                    pairs.append((source, target))
        return pairs

    def symmetric(self) -> "FormatCatalog":
        """A copy where every key-to-key edge also exists in reverse."""
        missing = self.asymmetries()
        table = {source: list(targets) for source, targets in self._table.items()}
        for source, target in missing:
            table[target].append(source)

        catalog = FormatCatalog(table)
        logger.debug(
            "Built symmetric format catalog",
            added_edges=len(missing),
            key_count=len(table),
        )
        return catalog

    def __contains__(self, extension: object) -> bool:
        return isinstance(extension, str) and self.is_supported(extension)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"FormatCatalog(keys={len(self._table)}, targets={len(self._all_targets)})"
