"""
SRAG Surveillance Dashboard
KPI cards and case series by state or municipality
"""
import streamlit as st
import pandas as pd
import plotly.express as px
from dotenv import load_dotenv

from srag_dashboard.core.db import get_engine
from srag_dashboard.repositories import CaseRepository
from srag_dashboard.services.charts import ChartFilters, ChartsService, GroupByType, PeriodType
from srag_dashboard.services.metrics import MetricsService

load_dotenv()

st.set_page_config(page_title="SRAG Dashboard", layout="wide")

PERIOD_LABELS = {PeriodType.DAILY: "Diário", PeriodType.MONTHLY: "Mensal", PeriodType.YEARLY: "Anual"}
GROUP_LABELS = {GroupByType.STATE: "Estado", GroupByType.MUNICIPALITY: "Município"}

# Database connection
@st.cache_resource
def get_repository():
    try:
        return CaseRepository(get_engine())
    except Exception as e:
        st.error(f"Cannot connect to database: {e}")
        return None

@st.cache_data(ttl=60)
def load_metrics(_repo):
    return MetricsService(_repo).get_dashboard_metrics()

@st.cache_data(ttl=60)
def load_options(_repo):
    charts = ChartsService(_repo)
    return charts.get_available_states(), charts.get_available_municipalities()

@st.cache_data(ttl=60)
def load_series(_repo, period, group_by, state, municipality):
    filters = ChartFilters(period=period, group_by=group_by, state=state, municipality=municipality)
    return pd.DataFrame(ChartsService(_repo).get_cases_chart_data(filters))

# Main app
st.title("Painel SRAG")
st.markdown("Síndrome Respiratória Aguda Grave - notificações OpenDataSUS")
st.markdown("---")

repo = get_repository()
if not repo:
    st.stop()

# KPI cards
metrics = load_metrics(repo)
col1, col2, col3, col4 = st.columns(4)

col1.metric("Taxa de aumento de casos", metrics.case_growth_rate.value)
col1.caption(metrics.case_growth_rate.context)

col2.metric("Taxa de mortalidade", metrics.mortality_rate.value)
col2.caption(metrics.mortality_rate.context)

col3.metric("Taxa de ocupação de UTI", metrics.icu_occupancy_rate.value)
col3.caption(metrics.icu_occupancy_rate.context)

col4.metric("Taxa de vacinação", metrics.vaccination_rate.value)
col4.caption(metrics.vaccination_rate.context)

st.markdown("---")

# Chart filters
st.subheader("Casos notificados")
states, municipalities = load_options(repo)

col1, col2, col3 = st.columns(3)
with col1:
    period = st.radio("Período", list(PeriodType), index=1, format_func=PERIOD_LABELS.get)
with col2:
    group_by = st.radio("Agrupar por", list(GroupByType), format_func=GROUP_LABELS.get)

state = municipality = None
with col3:
    if group_by is GroupByType.MUNICIPALITY:
        names = {m["code"]: m["name"] for m in municipalities}
        municipality = st.selectbox(
            "Município (obrigatório)", list(names), format_func=names.get,
            index=None, placeholder="Selecione um município",
        )
    else:
        choice = st.selectbox("Estado (opcional)", ["Todos"] + states)
        state = None if choice == "Todos" else choice

if group_by is GroupByType.MUNICIPALITY and not municipality:
    st.info("Selecione um município para ver a série")
    st.stop()

series = load_series(repo, period.value, group_by.value, state, municipality)

if series.empty:
    st.info("Nenhum caso encontrado para os filtros selecionados")
else:
    fig = px.line(
        series,
        x="date",
        y="cases",
        color="region",
        markers=True,
        labels={"date": "Data", "cases": "Casos", "region": GROUP_LABELS[group_by]},
    )
    fig.update_layout(height=450, xaxis_type="category")
    st.plotly_chart(fig, use_container_width=True)
    st.caption(f"Total no período: {int(series['cases'].sum())} casos")

st.markdown("---")
st.caption("SRAG Dashboard - re-run the seed to refresh data")
