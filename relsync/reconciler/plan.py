"""Diff recorded state against desired state."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from relsync.reconciler.errors import ReplacementRequiredError
from relsync.relationship.models import RelationshipTriple
from relsync.relationship.parser import parse


class PlanAction(str, Enum):
    noop = "noop"
    create = "create"
    delete = "delete"
    replace = "replace"


class Plan(BaseModel):
    """What it takes to move one managed relationship to its desired state."""

    model_config = ConfigDict(frozen=True)

    action: PlanAction
    prior: RelationshipTriple | None = None
    desired: RelationshipTriple | None = None


def _coerce(value: RelationshipTriple | str | None) -> RelationshipTriple | None:
    if value is None or isinstance(value, RelationshipTriple):
        return value
    return parse(value)


def make_plan(
    prior: RelationshipTriple | str | None,
    desired: RelationshipTriple | str | None,
) -> Plan:
    """Compare recorded state with desired state.

    Triples are compared after parsing, so spellings that normalize to the
    same relationship (``group:eng#...`` vs ``group:eng``) are a no-op.
    Any difference is a replacement: relationships are never updated in place.
    """
    prior_triple = _coerce(prior)
    desired_triple = _coerce(desired)

    if prior_triple is None and desired_triple is None:
        action = PlanAction.noop
    elif prior_triple is None:
        action = PlanAction.create
    elif desired_triple is None:
        action = PlanAction.delete
    elif prior_triple == desired_triple:
        action = PlanAction.noop
    else:
        action = PlanAction.replace

    return Plan(action=action, prior=prior_triple, desired=desired_triple)


def ensure_unchanged(
    prior: RelationshipTriple | str, planned: RelationshipTriple | str
) -> RelationshipTriple:
    """Return the prior triple if *planned* is the same relationship.

    Raises:
        ParseError: if either side is text that does not parse.
        ReplacementRequiredError: if *planned* differs from *prior*.
    """
    prior_triple = _coerce(prior)
    planned_triple = _coerce(planned)
    if prior_triple != planned_triple:
        raise ReplacementRequiredError(str(prior_triple), str(planned_triple))
    return prior_triple
