# backflow_insights/dashboard.py

import asyncio
import sys
import os
from datetime import date, timedelta

import streamlit as st
import pandas as pd
import matplotlib.pyplot as plt

# --- Path Correction ---
_pkg_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.append(os.path.abspath(os.path.join(_pkg_dir, '..')))
from backflow_insights import config
from backflow_insights.data_processing import build_repository
from backflow_insights.insights import PredictiveAnalyticsEngine
from backflow_insights.schemas import CustomerBehaviorSample
from backflow_insights.summary import simulate_scenario
from backflow_insights.utils import format_prediction_confidence

# --- Page Configuration ---
st.set_page_config(page_title="Backflow Predictive Insights", page_icon="🚰", layout="wide", initial_sidebar_state="expanded")

# --- Caching Functions ---
@st.cache_resource
def load_engine():
    try:
        return PredictiveAnalyticsEngine(repository=build_repository())
    except Exception as e:
        st.error(f"Error building insights engine: {e}")
        return None

def run_insights(engine, timeframe):
    return asyncio.run(engine.generate_predictive_insights(timeframe))

# --- Helper Functions ---
RISK_ALERTS = {'critical': 'error', 'high': 'error', 'medium': 'warning', 'low': 'success'}

def churn_frame(assessments):
    return pd.DataFrame([{
        'Customer': a.customer_id,
        'Probability': a.churn_probability,
        'Risk': a.risk_level,
        'Value at risk': a.estimated_value_at_risk,
        'Factors': ", ".join(a.key_factors),
    } for a in assessments])

# --- Load Assets ---
engine = load_engine()

# --- Sidebar ---
st.sidebar.title("⚙️ Settings")
timeframe = st.sidebar.selectbox("Forecast horizon", options=list(config.FORECAST_TIMEFRAMES), index=1)
st.sidebar.caption(f"Data source: `{config.DATA_SOURCE}`")
st.sidebar.divider()
st.sidebar.info("Forecasts and scores are rule-based; factor placeholders are configured in `config.py`.")

# --- Main App ---
st.title("🚰 Backflow Testing Predictive Insights")
st.markdown("Demand, churn, maintenance and revenue outlook for the business.")

if engine is None:
    st.error("Insights engine not loaded. Check the data source settings.")
    st.stop()

with st.spinner("Generating insights..."):
    insights = run_insights(engine, timeframe)

tab1, tab2, tab3, tab4 = st.tabs(["📈 **Demand**", "👥 **Churn**", "🔧 **Maintenance**", "💰 **Revenue & Risk**"])

with tab1:
    st.header("Demand Forecast")
    forecast_df = pd.DataFrame([p.model_dump() for p in insights.demand_forecast])
    col1, col2 = st.columns(2)
    col1.metric(label="**Total predicted appointments**", value=int(forecast_df['predicted_appointments'].sum()))
    avg_confidence = float(forecast_df['confidence'].mean())
    col2.metric(label="**Average confidence**", value=f"{avg_confidence:.0%}", delta=format_prediction_confidence(avg_confidence), delta_color="off")

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.plot(forecast_df['period'], forecast_df['predicted_appointments'], color='cornflowerblue', label='Predicted appointments')
    ax.set_title(f"Predicted Appointments ({timeframe})")
    ax.set_xlabel("Date")
    ax.set_ylabel("Appointments")
    ax.legend()
    ax.grid(axis='y', alpha=0.5)
    st.pyplot(fig)

    st.subheader("Single Day Estimate")
    day = st.date_input("Day", value=date.today() + timedelta(days=1))
    point = engine.demand.estimate(day)
    st.write(f"**{point.predicted_appointments}** appointments expected (confidence {point.confidence:.0%}).")
    for recommendation in point.recommendations:
        st.markdown(f"- {recommendation}")

with tab2:
    st.header("Customers at Risk of Churning")
    if insights.churn_risk:
        st.dataframe(churn_frame(insights.churn_risk), use_container_width=True)
        fig, ax = plt.subplots()
        counts = pd.Series([a.risk_level for a in insights.churn_risk]).value_counts()
        ax.bar(counts.index, counts.values, color=['salmon' if level == 'high' else 'orange' for level in counts.index])
        ax.set_title("At-risk Customers by Risk Level")
        ax.set_ylabel("Customers")
        st.pyplot(fig)
    else:
        st.success("No customers above the low-risk band.", icon="✅")

    st.divider()
    st.subheader("Score a Customer")
    with st.form("churn_form"):
        frequency = st.slider("Appointments per year", 0.0, 12.0, 2.0, step=0.5)
        value = st.number_input("Average service value", min_value=0.0, value=300.0, step=25.0)
        last_service = st.date_input("Last service date", value=date.today() - timedelta(days=120))
        total_services = st.slider("Total services", 0, 50, 5)
        cancellation = st.slider("Cancellation rate", 0.0, 1.0, 0.05, step=0.01)
        payment = st.selectbox("Payment history", options=['excellent', 'good', 'fair', 'poor'])
        satisfaction = st.slider("Satisfaction score", 1.0, 5.0, 4.0, step=0.1)
        submitted = st.form_submit_button("Assess Churn Risk", type="primary")
    if submitted:
        assessment = engine.churn.score(CustomerBehaviorSample(
            customer_id="dashboard_input",
            appointment_frequency=frequency,
            average_service_value=value,
            last_service_date=last_service,
            total_services=total_services,
            cancellation_rate=cancellation,
            payment_history=payment,
            customer_satisfaction_score=satisfaction,
        ))
        alert = {'high': st.error, 'medium': st.warning, 'low': st.success}[assessment.risk_level]
        alert(f"**{assessment.risk_level.title()} risk** ({assessment.churn_probability:.0%})")
        st.write("Key factors:", ", ".join(assessment.key_factors) or "none")
        st.write("Retention strategies:")
        for strategy in assessment.retention_strategies:
            st.markdown(f"- {strategy}")

with tab3:
    st.header("Equipment Maintenance Alerts")
    if not insights.maintenance_alerts:
        st.success("All equipment is in the low-risk band.", icon="✅")
    for alert in insights.maintenance_alerts:
        getattr(st, RISK_ALERTS[alert.risk_level])(
            f"**{alert.equipment_type}** ({alert.equipment_id}): {alert.risk_level} risk, "
            f"predicted failure {alert.predicted_failure_date.isoformat()}"
        )
        with st.expander(f"Details for {alert.equipment_id}"):
            st.write(f"Maintenance window: {alert.maintenance_window.start} to {alert.maintenance_window.end}")
            st.write(f"Estimated failure cost: ${alert.cost_impact:,.0f} (confidence {alert.confidence:.0%})")
            for recommendation in alert.recommendations:
                st.markdown(f"- {recommendation}")

with tab4:
    revenue = insights.revenue_optimization
    st.header("Revenue Optimization")
    col1, col2, col3 = st.columns(3)
    col1.metric(label="**Current monthly revenue**", value=f"${revenue.current_revenue:,.0f}")
    col2.metric(label="**Optimized revenue**", value=f"${revenue.optimized_revenue:,.0f}")
    col3.metric(label="**Potential gain**", value=f"${revenue.potential_gain:,.0f}")
    st.dataframe(pd.DataFrame([s.model_dump() for s in revenue.strategies]), use_container_width=True)

    st.divider()
    st.subheader("Business Risks")
    st.dataframe(pd.DataFrame([r.model_dump() for r in insights.risk_assessment]), use_container_width=True)

    st.divider()
    st.subheader("What-if Scenarios")
    scenario_name = st.selectbox("Scenario", options=sorted(config.SCENARIOS))
    scenario = simulate_scenario(scenario_name)
    st.markdown(f"**{scenario['description']}** (ROI {scenario['roi']}x, breakeven {scenario['breakeven']})")
    st.json(scenario['impact'])
