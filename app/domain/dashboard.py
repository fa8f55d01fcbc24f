"""
app/domain/dashboard.py

Dashboard application state and its single update boundary.

All state changes go through ``reduce(state, action)``, which returns a new
state and never mutates the old one. Aggregations read the state (or one of
its slices) explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence, Union

from app.domain.assortment import CATEGORIES, CompetitorData


class ViewMode(str, Enum):
    OVERVIEW = "overview"
    COMPARISON = "comparison"
    DRILLDOWN = "drilldown"


def _frozen_mapping(values: Mapping[str, str] | None = None) -> Mapping[str, str]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class DashboardState:
    """
    Everything the presentation shell renders from.

    ``in_flight`` holds the ids with an outstanding refresh;
    ``refresh_errors`` holds the last failure message per id.
    """

    competitors: tuple[CompetitorData, ...] = ()
    selected_id: str | None = None
    view_mode: ViewMode = ViewMode.OVERVIEW
    search_term: str = ""
    comparison_category: str = CATEGORIES[0]
    in_flight: frozenset[str] = frozenset()
    refresh_errors: Mapping[str, str] = field(default_factory=_frozen_mapping)


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoadCompetitors:
    competitors: tuple[CompetitorData, ...]


@dataclass(frozen=True)
class SelectBrand:
    brand_id: str


@dataclass(frozen=True)
class SetSearchTerm:
    term: str


@dataclass(frozen=True)
class SetViewMode:
    mode: ViewMode


@dataclass(frozen=True)
class SetComparisonCategory:
    category: str


@dataclass(frozen=True)
class RefreshStarted:
    brand_id: str


@dataclass(frozen=True)
class RefreshSucceeded:
    brand_id: str
    record: CompetitorData


@dataclass(frozen=True)
class RefreshFailed:
    brand_id: str
    message: str


@dataclass(frozen=True)
class DismissRefreshError:
    brand_id: str


Action = Union[
    LoadCompetitors,
    SelectBrand,
    SetSearchTerm,
    SetViewMode,
    SetComparisonCategory,
    RefreshStarted,
    RefreshSucceeded,
    RefreshFailed,
    DismissRefreshError,
]


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------


def _has_competitor(state: DashboardState, brand_id: str) -> bool:
    return any(record.id == brand_id for record in state.competitors)


def _without_error(errors: Mapping[str, str], brand_id: str) -> Mapping[str, str]:
    return _frozen_mapping({key: value for key, value in errors.items() if key != brand_id})


def reduce(state: DashboardState, action: Action) -> DashboardState:
    """
    Apply *action* to *state* and return the next state.

    Actions naming an unknown brand id, or an unknown comparison category,
    leave the state unchanged.
    """

    if isinstance(action, LoadCompetitors):
        competitors = tuple(action.competitors)
        selected = state.selected_id
        if selected is None or not any(record.id == selected for record in competitors):
            selected = competitors[0].id if competitors else None
        return replace(state, competitors=competitors, selected_id=selected)

    if isinstance(action, SelectBrand):
        if not _has_competitor(state, action.brand_id):
            return state
        return replace(state, selected_id=action.brand_id)

    if isinstance(action, SetSearchTerm):
        return replace(state, search_term=action.term)

    if isinstance(action, SetViewMode):
        return replace(state, view_mode=ViewMode(action.mode))

    if isinstance(action, SetComparisonCategory):
        if action.category not in CATEGORIES:
            return state
        return replace(state, comparison_category=action.category)

    if isinstance(action, RefreshStarted):
        if not _has_competitor(state, action.brand_id):
            return state
        return replace(
            state,
            in_flight=state.in_flight | {action.brand_id},
            refresh_errors=_without_error(state.refresh_errors, action.brand_id),
        )

    if isinstance(action, RefreshSucceeded):
        # The replacement keeps the slot's id so selection stays put.
        record = replace(action.record, id=action.brand_id)
        return replace(
            state,
            competitors=tuple(
                record if existing.id == action.brand_id else existing
                for existing in state.competitors
            ),
            in_flight=state.in_flight - {action.brand_id},
            refresh_errors=_without_error(state.refresh_errors, action.brand_id),
        )

    if isinstance(action, RefreshFailed):
        errors = dict(state.refresh_errors)
        if _has_competitor(state, action.brand_id):
            errors[action.brand_id] = action.message
        return replace(
            state,
            in_flight=state.in_flight - {action.brand_id},
            refresh_errors=_frozen_mapping(errors),
        )

    if isinstance(action, DismissRefreshError):
        return replace(state, refresh_errors=_without_error(state.refresh_errors, action.brand_id))

    raise TypeError(f"Unsupported dashboard action: {type(action).__name__}")


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------


def find_competitor(state: DashboardState, brand_id: str) -> CompetitorData | None:
    for record in state.competitors:
        if record.id == brand_id:
            return record
    return None


def selected_competitor(state: DashboardState) -> CompetitorData | None:
    if state.selected_id is None:
        return None
    return find_competitor(state, state.selected_id)


def filter_competitors(records: Sequence[CompetitorData], term: str) -> list[CompetitorData]:
    """
    Case-insensitive substring match on brand name only.
    """

    needle = term.lower()
    if not needle:
        return list(records)
    return [record for record in records if needle in record.name.lower()]


def visible_competitors(state: DashboardState) -> list[CompetitorData]:
    """
    Sidebar list after the search filter; aggregations ignore this view.
    """

    return filter_competitors(state.competitors, state.search_term)


def is_analyzing(state: DashboardState, brand_id: str | None = None) -> bool:
    if brand_id is None:
        return bool(state.in_flight)
    return brand_id in state.in_flight


def highlighted_id(state: DashboardState) -> str | None:
    """
    Sidebar highlight; comparison mode shows no per-brand selection.
    """

    if state.view_mode is ViewMode.COMPARISON:
        return None
    return state.selected_id
