import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import List, Optional, Tuple

from streamlit_autorefresh import st_autorefresh

from kpi_board.charts import kpi_site_chart
from kpi_board.classify import classify_label
from kpi_board.config import KpiBoardError, KpiSettings, configure_logging
from kpi_board.poller import KpiPoller
from kpi_board.presenter import KpiTable, TablePresenter
from kpi_board.sources import resolve_client_source

HIGHLIGHT_CSS = "background-color: #fffd8c; transition: background 0.25s;"


# ---------- UI / layout helpers ----------
def inject_base_styles():
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .card-actions {font-size: 0.9rem;color: #2563eb;}
        </style>
        """,
        unsafe_allow_html=True,
    )


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
            <div class="card-actions">{actions or ""}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def column_title(slot: str) -> str:
    site, kind = slot.rsplit("-", 1)
    return f"{site.upper()} {kind.capitalize()}"


def styled_table(table: KpiTable, highlighted: List[Tuple[str, str]]):
    frame = table.to_frame()

    def _highlight(df: pd.DataFrame) -> pd.DataFrame:
        css = pd.DataFrame("", index=df.index, columns=df.columns)
        for label, slot in highlighted:
            if label in css.index and slot in css.columns:
                css.at[label, slot] = HIGHLIGHT_CSS
        return css

    return frame.style.apply(_highlight, axis=None).relabel_index(
        [column_title(c) for c in frame.columns], axis="columns"
    )


def get_poller(settings: KpiSettings, url: Optional[str]) -> KpiPoller:
    key = f"poller::{url or ''}"
    poller = st.session_state.get(key)
    if poller is None:
        source = resolve_client_source(settings, url)
        poller = KpiPoller(source, TablePresenter(KpiTable()), interval=settings.poll_interval)
        st.session_state[key] = poller
    return poller


# ---------- UI setup ----------
st.set_page_config(page_title="KPI Board", layout="wide")
settings = KpiSettings.from_env()
configure_logging(settings.log_level)
inject_base_styles()
st.title("Tablero de KPIs")
st.caption("Metas y resultados por regional, actualizados desde la planilla compartida.")

with st.sidebar:
    st.markdown("### Fuente")
    url = st.text_input("KPI endpoint o CSV publicado (opcional)", "").strip() or None
    auto_refresh = st.checkbox("Actualizar automáticamente", value=True)

try:
    poller = get_poller(settings, url)
except KpiBoardError as exc:
    st.error(f"Configuración incompleta ({exc.code}). Defina KPI_API_URL, KPI_CSV_URL o SERVICE_ACCOUNT_KEY y SPREADSHEET_ID.")
    st.stop()

if auto_refresh:
    st_autorefresh(interval=int(poller.interval * 1000), key="kpi_board_refresh")

poller.poll_once()
table = poller.presenter.table

with card("KPIs", actions=poller.last_success.strftime("%H:%M:%S") if poller.last_success else None):
    if poller.last_error:
        st.warning(f"Última lectura fallida: {poller.last_error}. Se muestran los valores anteriores.")
    st.dataframe(styled_table(table, table.highlighted()), use_container_width=True)

with card("Meta vs Real por regional"):
    choice = st.selectbox("KPI", options=table.labels, index=0)
    if classify_label(choice) is not None:
        st.altair_chart(kpi_site_chart(choice, table.row_values(choice)), use_container_width=True)
