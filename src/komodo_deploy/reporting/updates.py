#!/usr/bin/env python3
"""
Normalize Komodo execution results into an update id -> status mapping.

Results arrive per target, each either a single record or a list of records.
Records are classified into UpdateRecord (a completed Komodo Update) or
ErrorRecord (anything else, e.g. an ``Err`` batch item); only UpdateRecords
make it into the mapping.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Union


@dataclass(frozen=True)
class UpdateRecord:
    """A well-formed Komodo Update."""

    id: str
    status: Any
    operation: Any


@dataclass(frozen=True)
class ErrorRecord:
    """Any result that is not a well-formed Update."""

    data: Any


ResultRecord = Union[UpdateRecord, ErrorRecord]


def flatten_results(results: Iterable[Any]) -> List[Any]:
    """Expand list results in place, keeping order."""
    flat: List[Any] = []
    for result in results:
        if isinstance(result, list):
            flat.extend(result)
        else:
            flat.append(result)
    return flat


def is_valid_record(item: Any) -> bool:
    """True for mappings with an ``operation`` field and a string ``_id.$oid``."""
    if not isinstance(item, Mapping) or "operation" not in item:
        return False
    raw_id = item.get("_id")
    return isinstance(raw_id, Mapping) and isinstance(raw_id.get("$oid"), str)


def classify(item: Any) -> ResultRecord:
    if is_valid_record(item):
        return UpdateRecord(
            id=item["_id"]["$oid"],
            status=item.get("status"),
            operation=item["operation"],
        )
    return ErrorRecord(data=item)


def build_status_map(results: Iterable[Any]) -> Dict[str, Any]:
    """
    Build the update id -> status mapping from raw per-target results.

    Malformed results are dropped. Later duplicates of an id overwrite
    earlier ones.
    """
    status_map: Dict[str, Any] = {}
    for record in map(classify, flatten_results(results)):
        if isinstance(record, UpdateRecord):
            status_map[record.id] = record.status
    return status_map
