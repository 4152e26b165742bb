"""Candidate deduplication and default/optional partitioning."""

from dataclasses import dataclass, field

from crdforge.interfaces.schema import FieldDefinition
from crdforge.strategies.schema.collector import Candidate

DEFAULT_MAX_DEFAULT_FIELDS = 64


@dataclass(frozen=True)
class RankedFields:
    """Result of ranking a candidate list.

    Attributes:
        defaults: Fields surfaced up front, at most the default cap.
        optionals: Every other field, disjoint from defaults.
        ordered: All deduplicated candidates in rank order.
    """

    defaults: list[FieldDefinition]
    optionals: list[FieldDefinition]
    ordered: list[Candidate] = field(default_factory=list)


def dedupe_candidates(candidates: list[Candidate]) -> list[Candidate]:
    """Merge candidates that share a path, keeping first-seen order.

    Required and default flags are OR-ed; a later duplicate that brings the
    first default also brings its value; blank description and type are
    filled from duplicates; the shallowest depth wins.
    """
    merged: dict[str, Candidate] = {}
    for candidate in candidates:
        path = candidate.field.path
        existing = merged.get(path)
        if existing is None:
            merged[path] = Candidate(
                field=candidate.field.model_copy(),
                required=candidate.required,
                depth=candidate.depth,
                has_default=candidate.has_default,
            )
            continue

        updates: dict[str, object] = {}
        if candidate.has_default and not existing.has_default:
            existing.has_default = True
            updates["value"] = candidate.field.value
        if not existing.field.description:
            updates["description"] = candidate.field.description
        if existing.field.type is None and candidate.field.type is not None:
            updates["type"] = candidate.field.type
        if updates:
            existing.field = existing.field.model_copy(update=updates)

        existing.required = existing.required or candidate.required
        existing.depth = min(existing.depth, candidate.depth)

    return list(merged.values())


def _rank_key(candidate: Candidate) -> tuple[bool, bool, int, str]:
    return (not candidate.required, not candidate.has_default, candidate.depth, candidate.field.path)


def rank_candidates(
    candidates: list[Candidate],
    max_defaults: int = DEFAULT_MAX_DEFAULT_FIELDS,
) -> RankedFields:
    """Split candidates into capped defaults and the remaining optionals.

    Candidates are sorted required first, then default-backed, then shallow,
    then by path. Required or default-backed candidates fill the default list;
    if room is left it is backfilled in rank order so small schemas show
    everything up front.

    Args:
        candidates: Raw candidates from the collector.
        max_defaults: Cap on the default list.

    Returns:
        Disjoint default and optional field lists plus the rank order.
    """
    ordered = sorted(dedupe_candidates(candidates), key=_rank_key)

    defaults: list[FieldDefinition] = []
    optionals: list[FieldDefinition] = []
    promoted: set[str] = set()

    for candidate in ordered:
        if (candidate.required or candidate.has_default) and len(defaults) < max_defaults:
            defaults.append(candidate.field)
            promoted.add(candidate.field.path)
            continue
        optionals.append(candidate.field)

    for candidate in ordered:
        if len(defaults) >= max_defaults:
            break
        if candidate.field.path in promoted:
            continue
        defaults.append(candidate.field)
        promoted.add(candidate.field.path)

    optionals = [item for item in optionals if item.path not in promoted]
    return RankedFields(defaults=defaults, optionals=optionals, ordered=ordered)


def dedupe_fields(fields: list[FieldDefinition]) -> list[FieldDefinition]:
    """Drop blank and repeated paths; the first occurrence wins."""
    seen: set[str] = set()
    out: list[FieldDefinition] = []
    for item in fields:
        if not item.path.strip() or item.path in seen:
            continue
        seen.add(item.path)
        out.append(item)
    return out
