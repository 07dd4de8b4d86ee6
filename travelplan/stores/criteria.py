"""
Filter criteria for the stores.

Callers describe *what* they want as small immutable values and the stores
compile them into SQLAlchemy clauses, so no query-builder syntax leaks out of
the store layer:

    AnyOf(Eq("receiver_id", user.id), Eq("receiver_email", user.email))
"""
from dataclasses import dataclass
from typing import Any, Iterable, Tuple, Union

from sqlalchemy import and_, false, func, not_, or_, true


@dataclass(frozen=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True)
class In:
    field: str
    values: Tuple[Any, ...]


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match."""
    field: str
    text: str


@dataclass(frozen=True)
class HasMember:
    """Row has a membership record for the given user (trips only)."""
    user_id: int


@dataclass(frozen=True)
class AnyOf:
    options: Tuple["Criterion", ...]

    def __init__(self, *options: "Criterion"):
        object.__setattr__(self, "options", tuple(options))


@dataclass(frozen=True)
class Not:
    criterion: "Criterion"


Criterion = Union[Eq, In, Contains, HasMember, AnyOf, Not]


def _column(model, field: str):
    column = getattr(model, field, None)
    if column is None:
        raise ValueError(f"{model.__name__} has no field '{field}'")
    return column


def compile_criterion(model, criterion: Criterion):
    """Translate one criterion into a SQLAlchemy clause on `model`."""
    if isinstance(criterion, Eq):
        column = _column(model, criterion.field)
        if criterion.value is None:
            return column.is_(None)
        return column == criterion.value

    if isinstance(criterion, In):
        if not criterion.values:
            return false()
        return _column(model, criterion.field).in_(criterion.values)

    if isinstance(criterion, Contains):
        return func.lower(_column(model, criterion.field)).contains(
            criterion.text.lower(), autoescape=True
        )

    if isinstance(criterion, HasMember):
        return _column(model, "members").any(user_id=criterion.user_id)

    if isinstance(criterion, AnyOf):
        if not criterion.options:
            return false()
        return or_(*(compile_criterion(model, option) for option in criterion.options))

    if isinstance(criterion, Not):
        return not_(compile_criterion(model, criterion.criterion))

    raise TypeError(f"Unsupported criterion: {criterion!r}")


def compile_criteria(model, criteria: Iterable[Criterion]):
    """AND together a sequence of criteria. An empty sequence matches everything."""
    clauses = [compile_criterion(model, criterion) for criterion in criteria]
    if not clauses:
        return true()
    return and_(*clauses)
