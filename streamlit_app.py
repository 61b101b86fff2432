"""Streamlit dashboard for Heavy Metal Pollution Indices."""

from __future__ import annotations

from typing import Sequence

import pandas as pd
import plotly.graph_objects as go
import pydeck as pdk
import streamlit as st

from app.config import configure_logging, get_ingestion_settings, get_map_settings, get_report_settings
from app.domain.water_sample import FILTER_ALL, FilterSpec, Sample
from app.services.aggregation_service import compute_stats, top_polluted
from app.services.csv_ingestion_service import (
    CSVHeaderValidationError,
    describe_upload,
    get_sample_ingestion_service,
)
from app.services.filter_service import filter_samples
from app.services.report_export_service import (
    ReportExportError,
    build_export_rows,
    build_report_pdf,
    to_csv_text,
)
from app.state import SampleStore
from hmpi.standards import CATEGORIES, CATEGORY_COLORS, METALS

st.set_page_config(page_title="HMPI Dashboard", page_icon="HM", layout="wide")

STAGES = ("Home", "Upload", "Analysis")


@st.cache_resource(show_spinner=False)
def _init_logging() -> bool:
    configure_logging()
    return True


def _hex_to_rgb(color: str) -> list[int]:
    color = color.lstrip("#")
    return [int(color[i : i + 2], 16) for i in (0, 2, 4)]


def _samples_frame(samples: Sequence[Sample]) -> pd.DataFrame:
    """Flatten samples into a frame with per-category marker colors."""
    frame = pd.DataFrame([sample.to_record() for sample in samples])
    if frame.empty:
        return frame
    frame["color"] = frame["category"].map(lambda category: _hex_to_rgb(CATEGORY_COLORS[category]))
    return frame


def _render_map(samples: Sequence[Sample]) -> None:
    map_settings = get_map_settings()
    frame = _samples_frame(samples)
    layers: list[pdk.Layer] = []
    if not frame.empty:
        layers.append(
            pdk.Layer(
                "ScatterplotLayer",
                frame,
                id="samples",
                get_position="[Longitude, Latitude]",
                get_fill_color="color",
                get_radius=60,
                radius_min_pixels=6,
                pickable=True,
                stroked=True,
                get_line_color=[255, 255, 255],
            )
        )

    tooltip = {
        "html": (
            "<b>{Location}</b><br/>"
            "Fe: {Fe}, Mn: {Mn}, As: {As}, Pb: {Pb}, Cd: {Cd}<br/>"
            "Index: {index} ({category})"
        ),
    }
    st.pydeck_chart(
        pdk.Deck(
            layers=layers,
            initial_view_state=pdk.ViewState(
                latitude=map_settings.center_latitude,
                longitude=map_settings.center_longitude,
                zoom=map_settings.zoom,
            ),
            tooltip=tooltip,
        ),
        width="stretch",
    )


def _render_pie(counts: dict[str, int]) -> None:
    figure = go.Figure(
        go.Pie(
            labels=list(CATEGORIES),
            values=[counts[category] for category in CATEGORIES],
            marker={"colors": [CATEGORY_COLORS[category] for category in CATEGORIES]},
            sort=False,
        )
    )
    figure.update_layout(height=280, margin={"l": 10, "r": 10, "t": 10, "b": 10})
    st.plotly_chart(figure, width="stretch")


_init_logging()

if "store" not in st.session_state:
    st.session_state.store = SampleStore()
if "stage" not in st.session_state:
    st.session_state.stage = "Home"
if "file_label" not in st.session_state:
    st.session_state.file_label = None
if "upload_error" not in st.session_state:
    st.session_state.upload_error = None

store: SampleStore = st.session_state.store


with st.sidebar:
    st.header("HMPI Dashboard")
    st.caption("Heavy Metal Pollution Indices")
    st.session_state.stage = st.radio(
        "View",
        options=STAGES,
        index=STAGES.index(st.session_state.stage),
    )
    if st.button("Reset to demo data", width="stretch"):
        store.reset()
        st.session_state.file_label = None
        st.session_state.upload_error = None
        st.rerun()


samples = store.current.samples
stats = compute_stats(samples)
top = top_polluted(samples)

if st.session_state.stage == "Home":
    st.title("Heavy Metal Pollution Indices")
    st.write("Interactive map, instant analysis, and exportable reports.")
    col1, col2, col3 = st.columns(3)
    col1.metric("Quick Stats", f"{stats.sample_count} Samples")
    col2.metric("Unsafe Percentage", f"{stats.percentages['Unsafe']}%")
    col3.metric("Top Polluted", top.location if top is not None else "—")

elif st.session_state.stage == "Upload":
    st.title("Upload Samples")
    left, right = st.columns(2)

    with left:
        uploaded_file = st.file_uploader(
            "Upload CSV",
            type=["csv"],
            help="Columns: Location, Latitude, Longitude, Fe, Mn, As, Pb, Cd",
        )
        if uploaded_file is not None:
            data = uploaded_file.getvalue()
            label = describe_upload(uploaded_file.name, len(data))
            if label != st.session_state.file_label:
                try:
                    summary = get_sample_ingestion_service().ingest_csv(
                        data=data,
                        source_name=uploaded_file.name,
                    )
                except CSVHeaderValidationError as exc:
                    st.session_state.upload_error = str(exc)
                else:
                    store.replace(
                        samples=summary.samples,
                        source_name=uploaded_file.name,
                        preview=summary.preview,
                        validation_errors=summary.validation_errors,
                    )
                    st.session_state.upload_error = None
                st.session_state.file_label = label

        if st.session_state.upload_error:
            st.error(st.session_state.upload_error)
        if st.session_state.file_label:
            st.markdown(f"Selected: **{st.session_state.file_label}**")

        preview = store.current.preview
        if preview.rows:
            st.dataframe(
                pd.DataFrame(preview.rows, columns=preview.columns),
                width="stretch",
            )
        issues = store.current.validation_errors
        if issues:
            with st.expander(f"{len(issues)} data issue(s)"):
                st.dataframe(
                    pd.DataFrame(
                        [
                            {"row": e.row_number, "column": e.column, "issue": e.message, "value": e.value}
                            for e in issues
                        ]
                    ),
                    width="stretch",
                )
        if get_ingestion_settings().strict_validation:
            st.caption("Strict validation is on: rows with data issues are excluded.")

    with right:
        st.subheader("Preview & Analysis")
        current = store.current.filter_spec
        metal = st.radio(
            "Metal",
            options=(FILTER_ALL, *METALS),
            index=(FILTER_ALL, *METALS).index(current.metal),
            horizontal=True,
        )
        category = st.selectbox(
            "Category",
            options=(FILTER_ALL, *CATEGORIES),
            index=(FILTER_ALL, *CATEGORIES).index(current.category),
        )
        spec = FilterSpec(metal=metal, category=category)
        if spec != current:
            store.set_filter(spec)
        if st.button("Compute", type="primary"):
            st.session_state.stage = "Analysis"
            st.rerun()

else:
    st.title("Analysis")
    map_col, summary_col = st.columns([2, 1])
    visible = filter_samples(samples, store.current.filter_spec)

    with map_col:
        st.subheader("Interactive Map")
        _render_map(visible)
        st.caption(
            f"Showing {len(visible)} of {stats.sample_count} sample(s) "
            f"(metal: {store.current.filter_spec.metal}, category: {store.current.filter_spec.category})."
        )

    with summary_col:
        st.subheader("Summary Statistics")
        st.write(f"Total Samples: {stats.sample_count}")
        for name in CATEGORIES:
            st.write(f"{name}: {stats.counts[name]} ({stats.percentages[name]}%)")
        _render_pie(stats.counts)

        try:
            report_bytes = build_report_pdf(samples, stats)
        except ReportExportError:
            st.error("Failed to generate PDF. Check the logs for details.")
        else:
            st.download_button(
                label="Export Report",
                data=report_bytes,
                file_name=get_report_settings().filename,
                mime="application/pdf",
                width="stretch",
            )
        st.download_button(
            label="Download CSV",
            data=to_csv_text(build_export_rows(samples)).encode("utf-8"),
            file_name="hmpi_samples.csv",
            mime="text/csv",
            width="stretch",
        )

    st.dataframe(_samples_frame(visible).drop(columns=["color"], errors="ignore"), width="stretch")
