"""Streamlit frontend for RetailIntel.

Replaceable UI layer: all display logic lives here. Every state change goes
through the session's DashboardService, which applies the reducer.
Launched through ``streamlit_app.py`` at the repository root.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd
import streamlit as st

from app.domain.assortment import CATEGORIES, CompetitorData
from app.domain.dashboard import (
    DismissRefreshError,
    SelectBrand,
    SetComparisonCategory,
    SetSearchTerm,
    SetViewMode,
    ViewMode,
    find_competitor,
    highlighted_id,
    is_analyzing,
    selected_competitor,
    visible_competitors,
)
from app.logging_utils import configure_logging
from app.services import aggregation_service
from app.services.analyzer_service import AnalysisError
from app.services.dashboard_service import DashboardService, RefreshInProgressError
from frontend import charts

_VIEW_LABELS = {
    ViewMode.OVERVIEW: "Overview",
    ViewMode.COMPARISON: "Comparison",
    ViewMode.DRILLDOWN: "Matrix",
}


# ── Backend handles ────────────────────────────────────────────────────────
@st.cache_resource(show_spinner=False)
def _load_analyzer():
    from app.config import get_dashboard_settings  # noqa: PLC0415
    from app.services.analyzer_service import get_competitor_analyzer  # noqa: PLC0415

    configure_logging(get_dashboard_settings().log_level)
    return get_competitor_analyzer()


def _service() -> DashboardService:
    """Per-session service; each browser session gets its own seeded collection."""
    if "service" not in st.session_state:
        from app.services.dashboard_service import create_dashboard_service  # noqa: PLC0415

        st.session_state.service = create_dashboard_service(analyzer=_load_analyzer())
    return st.session_state.service


# ── Callbacks ──────────────────────────────────────────────────────────────
def _on_search_change() -> None:
    _service().dispatch(SetSearchTerm(term=st.session_state.search_box))


def _on_view_change() -> None:
    _service().dispatch(SetViewMode(mode=st.session_state.view_radio))


def _on_category_change() -> None:
    _service().dispatch(SetComparisonCategory(category=st.session_state.category_select))


def _run_refresh(brand_id: str) -> None:
    service = _service()
    record = find_competitor(service.state, brand_id)
    label = record.name if record else "brand"
    with st.spinner(f"Analyzing {label}: mapping live catalog into price tiers…"):
        try:
            service.refresh(brand_id)
        except RefreshInProgressError:
            st.toast(f"{label} is already being analyzed.")
        except AnalysisError:
            # Recorded in state; rendered as a banner on the next run.
            pass


# ── Sidebar ────────────────────────────────────────────────────────────────
def _render_sidebar(service: DashboardService) -> None:
    with st.sidebar:
        st.title("RetailIntel")
        st.caption("Competitor pricing and assortment")
        st.divider()

        st.text_input(
            "Search brands",
            value=service.state.search_term,
            key="search_box",
            on_change=_on_search_change,
            placeholder="e.g. Todd",
        )

        st.caption("MONITORED SITES · FULL PRICE")
        state = service.state
        active = highlighted_id(state)
        visible = visible_competitors(state)
        if not visible:
            st.info("No brands match this search.")
        for comp in visible:
            cols = st.columns([1, 4])
            cols[0].image(comp.logo, width=32)
            label = f"{comp.name} · {comp.total_styles:,} styles"
            if is_analyzing(state, comp.id):
                label += " · analyzing"
            if cols[1].button(
                label,
                key=f"brand_{comp.id}",
                type="primary" if comp.id == active else "secondary",
                use_container_width=True,
            ):
                service.dispatch(SelectBrand(brand_id=comp.id))
                st.rerun()

        st.divider()
        st.caption("Catalog scanning filters for MSRP only.")


# ── Helper renderers ───────────────────────────────────────────────────────
def _render_refresh_banner(service: DashboardService, record: CompetitorData) -> None:
    message: Optional[str] = service.state.refresh_errors.get(record.id)
    if not message:
        return
    st.error(f"Analysis of {record.name} failed: {message}")
    cols = st.columns([1, 1, 6])
    if cols[0].button("Retry", key=f"retry_{record.id}"):
        _run_refresh(record.id)
        st.rerun()
    if cols[1].button("Dismiss", key=f"dismiss_{record.id}"):
        service.dispatch(DismissRefreshError(brand_id=record.id))
        st.rerun()


def _render_sources(record: CompetitorData) -> None:
    if not record.sources:
        return
    with st.expander(f"Data sources ({len(record.sources)})"):
        for source in record.sources:
            st.markdown(f"- [{source.title}]({source.uri})")


def _render_header(record: CompetitorData) -> None:
    cols = st.columns([1, 6, 2])
    cols[0].image(record.logo, width=56)
    with cols[1]:
        st.subheader(record.name)
        st.caption(f"{record.url} · updated {record.last_updated}")
    with cols[2]:
        if st.button("Refresh analysis", key=f"refresh_{record.id}", type="primary", use_container_width=True):
            _run_refresh(record.id)
            st.rerun()


def _render_stat_cards(record: CompetitorData) -> None:
    summary = aggregation_service.brand_summary(record)
    cols = st.columns(4)
    cols[0].metric("Total styles", f"{summary['total_styles']:,}")
    cols[1].metric("Dominant category", summary["dominant_category"] or "—")
    cols[2].metric("Median price tier", summary["median_bucket"] or "—")
    cols[3].metric("Share $400+", f"{summary['high_tier_share']:.0%}")


def _render_overview(service: DashboardService, record: Optional[CompetitorData]) -> None:
    if record is None:
        st.info("Select a brand in the sidebar to see its assortment.")
        return

    _render_header(record)
    _render_refresh_banner(service, record)
    _render_sources(record)
    _render_stat_cards(record)

    left, right = st.columns([3, 2])
    with left:
        st.markdown("**Price distribution**")
        st.plotly_chart(
            charts.price_distribution_chart(aggregation_service.price_distribution(record)),
            use_container_width=True,
            key="overview_price_distribution",
        )
    with right:
        st.markdown("**Category mix**")
        mix = aggregation_service.category_mix(record)
        if mix:
            st.plotly_chart(
                charts.category_mix_chart(mix),
                use_container_width=True,
                key="overview_category_mix",
            )
        else:
            st.info("No category data for this brand yet.")

    st.markdown("**Assortment deep dive**")
    deep_dive = aggregation_service.assortment_deep_dive(record)
    if deep_dive:
        st.dataframe(
            charts.styled_table(deep_dive, "category", charts.deep_dive_cell_style),
            use_container_width=True,
        )
    else:
        st.info("No category data for this brand yet.")


def _render_comparison(service: DashboardService) -> None:
    state = service.state
    records = state.competitors
    if not records:
        st.info("No brands are being tracked.")
        return

    market = aggregation_service.market_summary(records)
    cols = st.columns(2)
    volume = market["volume_leader"]
    premium = market["premium_leader"]
    if volume:
        cols[0].metric("Volume leader", volume["name"], f"{volume['total_styles']:,} styles", delta_color="off")
    if premium:
        cols[1].metric(
            "Premium leader",
            premium["name"],
            f"{premium['high_tier_share']:.0%} at $400+",
            delta_color="off",
        )

    left, right = st.columns(2)
    with left:
        st.markdown("**Total styles by brand**")
        st.plotly_chart(
            charts.cross_brand_assortment_chart(aggregation_service.cross_brand_assortment(records)),
            use_container_width=True,
            key="comparison_assortment",
        )
    with right:
        st.markdown("**Pricing architecture**")
        st.plotly_chart(
            charts.pricing_curve_chart(aggregation_service.pricing_curve(records)),
            use_container_width=True,
            key="comparison_pricing_curve",
        )

    st.markdown("**Category drilldown**")
    current = state.comparison_category
    st.selectbox(
        "Category",
        options=list(CATEGORIES),
        index=CATEGORIES.index(current),
        key="category_select",
        on_change=_on_category_change,
    )
    st.plotly_chart(
        charts.category_drilldown_chart(aggregation_service.category_drilldown(records, current)),
        use_container_width=True,
        key="comparison_drilldown",
    )

    st.markdown("**Category assortment matrix**")
    st.dataframe(
        charts.styled_table(
            aggregation_service.category_heatmap(records),
            "category",
            charts.heatmap_cell_style,
        ),
        use_container_width=True,
        height=35 * (len(CATEGORIES) + 1) + 3,
    )


def _render_matrix(service: DashboardService, record: Optional[CompetitorData]) -> None:
    if record is None:
        st.info("Select a brand in the sidebar to see its catalog matrix.")
        return

    st.subheader(f"{record.name} · catalog matrix")
    _render_refresh_banner(service, record)
    rows = aggregation_service.catalog_matrix(record)
    st.plotly_chart(
        charts.catalog_matrix_chart(rows),
        use_container_width=True,
        key="matrix_catalog",
    )
    with st.expander("Matrix table"):
        st.dataframe(pd.DataFrame(rows).set_index("category"), use_container_width=True)


# ── Page ───────────────────────────────────────────────────────────────────
def main() -> None:
    st.set_page_config(
        page_title="RetailIntel",
        page_icon="🧥",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    service = _service()
    _render_sidebar(service)

    state = service.state
    st.radio(
        "View",
        options=list(_VIEW_LABELS),
        index=list(_VIEW_LABELS).index(state.view_mode),
        format_func=_VIEW_LABELS.get,
        horizontal=True,
        key="view_radio",
        on_change=_on_view_change,
        label_visibility="collapsed",
    )

    if state.view_mode is ViewMode.COMPARISON:
        _render_comparison(service)
    elif state.view_mode is ViewMode.DRILLDOWN:
        _render_matrix(service, selected_competitor(state))
    else:
        _render_overview(service, selected_competitor(state))
