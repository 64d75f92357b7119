"""BulkStatus — Status Field Resolution.

Two lookups over the same ordered candidate list:

* ``resolve_status_field`` is the write path. It always yields a field name,
  falling back to ``status`` so an update can introduce the field.
* ``get_status_value`` is the read path. It yields ``None`` when no candidate
  is present, and ``already_target`` treats that as "not at target".
"""

from typing import Any, Mapping, Optional, Sequence

DEFAULT_STATUS_FIELD = "status"

# Distinguishes an absent key from present-but-falsy values (False, 0, "", null).
MISSING = object()


def resolve_status_field(
    record: Mapping[str, Any], candidate_fields: Sequence[str]
) -> str:
    """Return the first candidate present in ``record``, else the default."""
    for field in candidate_fields:
        if record.get(field, MISSING) is not MISSING:
            return field
    return DEFAULT_STATUS_FIELD


def get_status_value(
    record: Mapping[str, Any], candidate_fields: Sequence[str]
) -> Optional[Any]:
    for field in candidate_fields:
        value = record.get(field, MISSING)
        if value is not MISSING:
            return value
    return None


def already_target(
    record: Mapping[str, Any], candidate_fields: Sequence[str], target: str
) -> bool:
    """Check whether ``record`` already carries ``target`` as its status.

    List-like status values match by membership, scalars by equality.
    Missing or null status never matches.
    """
    current = get_status_value(record, candidate_fields)
    if current is None:
        return False
    if isinstance(current, (list, tuple, set, frozenset)):
        return target in current
    return current == target
