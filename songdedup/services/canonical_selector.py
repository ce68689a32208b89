"""Keeper selection for duplicate groups.

Ranking, first difference wins:
1. Media score, descending (audio counts 2, image counts 1)
2. Creation time, ascending (created_at, else updated_at, else epoch)
3. Title, ascending (accent- and case-insensitive, then lowercase before
   uppercase)
4. Record id, ascending

The ranking is a total order over distinct records, so the keeper does not
depend on the order members arrive in.
"""

import unicodedata
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union

from songdedup.models.dedup import (
    DuplicateGroup,
    DuplicateReport,
    GroupResolution,
    KeeperSelection,
    RemovalPlan,
)
from songdedup.models.song import SongRecord, Timestamp
from songdedup.observability.logging import get_logger
from songdedup.observability.metrics import RECORDS_MARKED_FOR_REMOVAL
from songdedup.utils.exceptions import EmptyGroupError

logger = get_logger("canonical_selector")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: Optional[Timestamp]) -> datetime:
    """Parse a record timestamp, falling back to the epoch.

    Accepts datetimes and ISO 8601 strings (a trailing "Z" is allowed).
    Naive values are taken as UTC. Missing or unparseable values map to
    1970-01-01T00:00:00Z so ranking always completes.
    """
    if value is None:
        return EPOCH

    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("unparseable_timestamp", value=value)
            return EPOCH

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def creation_time(record: SongRecord) -> datetime:
    """When a record was created, as far as its timestamps tell."""
    return parse_timestamp(record.created_at or record.updated_at)


def _collation_key(title: str) -> str:
    # Strip combining marks so "Éclair" sorts beside "eclair"
    decomposed = unicodedata.normalize("NFD", title)
    stripped = "".join(
        char for char in decomposed if unicodedata.category(char) != "Mn"
    )
    return stripped.casefold()


def rank_key(record: SongRecord) -> Tuple[int, datetime, str, str, str]:
    """Sort key placing the preferred keeper first."""
    return (
        -record.media_score,
        creation_time(record),
        _collation_key(record.title),
        # Case ties: lowercase first
        record.title.swapcase(),
        record.id,
    )


def select_keepers(
    group: Union[DuplicateGroup, Sequence[SongRecord]],
) -> KeeperSelection:
    """Pick the record to keep from a duplicate group.

    Args:
        group: DuplicateGroup or plain sequence of records

    Returns:
        KeeperSelection with the top-ranked keeper and the rest, in rank
        order, as removable.

    Raises:
        EmptyGroupError: If the group has no records
    """
    records = group.records if isinstance(group, DuplicateGroup) else list(group)
    if not records:
        raise EmptyGroupError("Cannot select a keeper from an empty group")

    ranked = sorted(records, key=rank_key)
    return KeeperSelection(keeper=ranked[0], removable=ranked[1:])


def build_removal_plan(
    report: DuplicateReport,
    collections: Optional[Iterable[str]] = None,
    protect_keepers: bool = False,
) -> RemovalPlan:
    """Resolve every group of a report into one removal set.

    Removable ids are unioned across groups and collections. A record kept
    in one group but removable in another is listed in conflicts; it stays
    in removal_ids unless protect_keepers is set.

    Args:
        report: Report to resolve
        collections: Collection names to include (all when omitted)
        protect_keepers: Never remove a record kept by any group

    Returns:
        RemovalPlan for the caller to apply.

    Raises:
        ValueError: If an unknown collection name is given
    """
    names = dict(report.iter_collections())
    selected: List[str] = list(names) if collections is None else list(collections)
    unknown = [name for name in selected if name not in names]
    if unknown:
        raise ValueError(f"Unknown collections: {', '.join(unknown)}")

    resolutions: List[GroupResolution] = []
    removal_ids: Set[str] = set()
    keeper_ids: Set[str] = set()

    for name in selected:
        for group in names[name]:
            selection = select_keepers(group)
            resolutions.append(
                GroupResolution(
                    collection=name,
                    keeper_id=selection.keeper.id,
                    removable_ids=selection.removable_ids,
                )
            )
            keeper_ids.add(selection.keeper.id)
            removal_ids.update(selection.removable_ids)

    conflicts = removal_ids & keeper_ids
    if protect_keepers:
        removal_ids -= conflicts

    if conflicts:
        logger.warning(
            "removal_conflicts_detected",
            conflicts=len(conflicts),
            protected=protect_keepers,
        )

    RECORDS_MARKED_FOR_REMOVAL.inc(len(removal_ids))
    logger.info(
        "removal_plan_built",
        groups=len(resolutions),
        removals=len(removal_ids),
        conflicts=len(conflicts),
    )

    return RemovalPlan(
        removal_ids=removal_ids,
        resolutions=resolutions,
        conflicts=conflicts,
        protect_keepers=protect_keepers,
    )
