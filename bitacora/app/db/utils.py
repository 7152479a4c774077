# bitacora/app/db/utils.py
from typing import Any, Dict, Optional, Set


def apply_dict_updates(entity: object, update_data: Dict[str, Any], excluded_attrs: Optional[Set[str]] = None) -> None:
    """
    Copy key/value pairs from ``update_data`` onto an ORM entity.

    Keys listed in ``excluded_attrs`` and keys the entity does not have are
    skipped, so request payloads can't overwrite ids, owners or hashes.
    """
    excluded_attrs = excluded_attrs or set()
    for key, value in update_data.items():
        if key in excluded_attrs:
            continue
        if hasattr(entity, key):
            setattr(entity, key, value)
