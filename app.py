"""
FleetOptimizer Command - What-If Dashboard
==========================================

Dashboard for projecting fleet-wide outcomes from a proposed fleet plan.

Features:
- Sidebar simulation parameters (drivers, shift start, hour cap)
- Tunable operating economics
- KPI tiles and revenue/cost/performance breakdown
- Fleet data tables (drivers, routes, orders)
"""

import streamlit as st
import pandas as pd
import os
from typing import Optional

from fleet_optimizer import config
from fleet_optimizer.errors import ConfigurationError, InvalidInputError
from fleet_optimizer.fleet import FleetData, build_snapshot, load_fleet, sample_fleet
from fleet_optimizer.models import SimulationInput, SimulationResult, TrafficLevel
from fleet_optimizer.simulation import SimulationSession
from fleet_optimizer.utils import format_currency

DATA_DIR = "data"

# =============================================================================
# PAGE CONFIG
# =============================================================================

st.set_page_config(
    page_title="FleetOptimizer Command",
    page_icon="🚚",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main .block-container {
        padding-top: 2rem;
        padding-bottom: 2rem;
    }

    .kpi-card {
        background: linear-gradient(135deg, #f97316 0%, #ea580c 100%);
        border-radius: 16px;
        padding: 1.5rem;
        color: white;
        text-align: center;
        box-shadow: 0 10px 40px rgba(234, 88, 12, 0.3);
    }

    .kpi-card.green {
        background: linear-gradient(135deg, #11998e 0%, #38ef7d 100%);
        box-shadow: 0 10px 40px rgba(17, 153, 142, 0.3);
    }

    .kpi-card.amber {
        background: linear-gradient(135deg, #f7b733 0%, #fc4a1a 100%);
    }

    .kpi-value {
        font-size: 2.2rem;
        font-weight: 800;
        margin: 0.5rem 0;
    }

    .kpi-label {
        font-size: 0.9rem;
        opacity: 0.9;
        text-transform: uppercase;
        letter-spacing: 1px;
    }

    .section-header {
        font-size: 1.5rem;
        font-weight: 700;
        margin: 2rem 0 1rem 0;
        padding-bottom: 0.5rem;
        border-bottom: 3px solid #f97316;
    }

    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
</style>
""", unsafe_allow_html=True)

# =============================================================================
# DATA LOADING
# =============================================================================


@st.cache_data(show_spinner=False)
def load_fleet_data(data_dir: str) -> FleetData:
    """Load and cache fleet data, falling back to the sample fleet."""
    if os.path.isdir(data_dir):
        return load_fleet(data_dir)
    return sample_fleet()


def get_session() -> SimulationSession:
    """Return this browser session's SimulationSession, creating it once."""
    if "simulation_session" not in st.session_state:
        st.session_state["simulation_session"] = SimulationSession(
            build_snapshot(load_fleet_data(DATA_DIR))
        )
    return st.session_state["simulation_session"]


# =============================================================================
# SIDEBAR
# =============================================================================

def render_economics(session: SimulationSession) -> Optional[config.EngineConfig]:
    """Render the economics expander; returns None if the values are invalid."""
    current = session.engine_config
    with st.sidebar.expander("💰 Operating Economics", expanded=False):
        options = {
            "base_fuel_cost": st.number_input("Base fuel cost", min_value=0.0,
                                              value=current.base_fuel_cost, step=500.0),
            "per_driver_fuel_rate": st.number_input("Fuel per driver", min_value=0.0,
                                                    value=current.per_driver_fuel_rate, step=50.0),
            "per_late_penalty": st.number_input("Penalty per late delivery", min_value=0.0,
                                                value=current.per_late_penalty, step=50.0),
            "per_on_time_bonus": st.number_input("Bonus per on-time delivery", min_value=0.0,
                                                 value=current.per_on_time_bonus, step=10.0),
            "on_time_bonus_threshold": st.slider("Bonus threshold (on-time rate)", min_value=0.5,
                                                 max_value=1.0, value=current.on_time_bonus_threshold,
                                                 step=0.01),
            "average_route_value": st.number_input("Revenue per delivery", min_value=0.0,
                                                   value=current.average_route_value, step=50.0),
            "default_average_route_time_minutes": current.default_average_route_time_minutes,
        }
    try:
        return current.replace(**options)
    except ConfigurationError as e:
        st.sidebar.error(f"Invalid economics: {e}")
        return None


def render_sidebar(session: SimulationSession) -> None:
    """Render the parameter form and handle Run / Reset."""
    st.sidebar.markdown("## ▶️ Simulation Parameters")
    st.sidebar.markdown("---")

    inputs = session.inputs
    driver_count = st.sidebar.number_input(
        "Number of Available Drivers",
        min_value=config.MIN_DRIVERS,
        max_value=config.MAX_DRIVERS,
        value=int(inputs.driver_count),
        step=1,
    )
    start_time = st.sidebar.time_input("Route Start Time", value=inputs.shift_start_time)
    max_hours = st.sidebar.number_input(
        "Max Hours per Driver per Day",
        min_value=0.5,
        max_value=config.MAX_HOURS_PER_DAY,
        value=float(inputs.max_hours_per_day),
        step=0.5,
    )

    use_history = st.sidebar.checkbox(
        "Use order history for revenue",
        value=False,
        help="Revenue per delivery follows the mean order value instead of the configured value"
    )

    engine_config = render_economics(session)

    st.sidebar.markdown("---")
    col1, col2 = st.sidebar.columns(2)
    run_clicked = col1.button("Run Simulation", use_container_width=True, disabled=engine_config is None)
    reset_clicked = col2.button("Reset", use_container_width=True)

    if reset_clicked:
        session.reset()
        st.rerun()

    if run_clicked and engine_config is not None:
        try:
            session.run(
                SimulationInput(
                    driver_count=int(driver_count),
                    shift_start_time=start_time,
                    max_hours_per_day=float(max_hours),
                ),
                fleet=build_snapshot(load_fleet_data(DATA_DIR), use_order_history=use_history),
                engine_config=engine_config,
            )
            st.toast("Simulation complete")
        except InvalidInputError as e:
            # Previous result stays on screen
            st.sidebar.error(str(e))


# =============================================================================
# RESULTS
# =============================================================================

def kpi_card(label: str, value: str, style: str = "") -> str:
    return f"""
    <div class="kpi-card {style}">
        <div class="kpi-label">{label}</div>
        <div class="kpi-value">{value}</div>
    </div>
    """


def render_kpi_row(result: SimulationResult) -> None:
    """Render the four KPI tiles."""
    col1, col2, col3, col4 = st.columns(4)
    col1.markdown(kpi_card("Projected Profit", format_currency(result.total_profit), "green"),
                  unsafe_allow_html=True)
    col2.markdown(kpi_card("Efficiency Score", f"{result.efficiency_score:.1f}%",
                           "green" if result.efficiency_score > 85 else "amber"),
                  unsafe_allow_html=True)
    col3.markdown(kpi_card("On-Time Rate", f"{result.on_time_deliveries}/{result.total_deliveries}", "green"),
                  unsafe_allow_html=True)
    col4.markdown(kpi_card("Active Drivers", str(result.driver_count)), unsafe_allow_html=True)


def render_breakdown(result: SimulationResult) -> None:
    """Render the revenue / cost / performance breakdown."""
    st.markdown('<div class="section-header">📊 Breakdown</div>', unsafe_allow_html=True)
    col1, col2, col3 = st.columns(3)

    with col1:
        st.subheader("Revenue")
        st.dataframe(pd.DataFrame([
            {"Item": "Base Revenue", "Amount": format_currency(result.revenue)},
            {"Item": "Bonuses", "Amount": "+" + format_currency(result.bonuses)},
            {"Item": "Total Profit", "Amount": format_currency(result.total_profit)},
        ]), hide_index=True, use_container_width=True)

    with col2:
        st.subheader("Costs")
        st.dataframe(pd.DataFrame([
            {"Item": "Fuel Costs", "Amount": format_currency(result.fuel_cost)},
            {"Item": "Penalties", "Amount": "-" + format_currency(result.penalties)},
            {"Item": "Total Costs", "Amount": format_currency(result.total_costs)},
        ]), hide_index=True, use_container_width=True)

    with col3:
        st.subheader("Performance")
        st.dataframe(pd.DataFrame([
            {"Metric": "On-Time Rate", "Value": f"{result.on_time_rate * 100:.1f}%"},
            {"Metric": "Avg per Driver", "Value": f"{result.deliveries_per_driver:.1f} orders"},
            {"Metric": "Profit per Order", "Value": format_currency(result.profit_per_delivery)},
            {"Metric": "Avg Route Time", "Value": f"{result.average_elapsed_minutes:.1f} min"},
            {"Metric": "Traffic Mix", "Value": result.traffic_mix()},
            {"Metric": "Shift", "Value": f"{result.shift_start_time.strftime('%H:%M')}"
                                         f" - {result.shift_end_time.strftime('%H:%M')}"},
        ]), hide_index=True, use_container_width=True)


def render_fleet_tables(fleet: FleetData) -> None:
    """Render the read-only fleet data behind the simulation."""
    with st.expander("Fleet Data", expanded=False):
        tab_drivers, tab_routes, tab_orders = st.tabs(["Drivers", "Routes", "Orders"])
        with tab_drivers:
            st.dataframe(pd.DataFrame([vars(d) for d in fleet.drivers]), hide_index=True,
                         use_container_width=True)
        with tab_routes:
            routes_df = pd.DataFrame([vars(r) for r in fleet.routes])
            if not routes_df.empty:
                routes_df["traffic_level"] = routes_df["traffic_level"].map(lambda t: t.value)
            st.dataframe(routes_df, hide_index=True, use_container_width=True)
        with tab_orders:
            st.dataframe(pd.DataFrame([vars(o) for o in fleet.orders]), hide_index=True,
                         use_container_width=True)


def render_fleet_summary(session: SimulationSession) -> None:
    fleet = session.fleet
    share = fleet.traffic_share()
    summary = "Active route traffic mix: " + ", ".join(
        f"{level.value} {share[level] * 100:.0f}%" for level in TrafficLevel
    )
    if fleet.average_driver_efficiency is not None:
        summary += (f" | {fleet.driver_count} active drivers on roster,"
                    f" avg efficiency {fleet.average_driver_efficiency:.1f}%")
    st.caption(summary)


# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    """Main application entry point."""
    st.markdown("""
    <div style="padding: 1rem 0 1.5rem 0;">
        <h1 style="font-size: 2.6rem; font-weight: 800; margin-bottom: 0.25rem;">FleetOptimizer Command</h1>
        <p style="font-size: 1.1rem; color: #666;">
            Fleet simulation engine: project deliveries, reliability and profit for a fleet plan
        </p>
    </div>
    """, unsafe_allow_html=True)

    session = get_session()
    render_sidebar(session)

    inputs = session.inputs
    st.markdown(
        f"**Current configuration:** {inputs.driver_count} drivers, "
        f"start {inputs.shift_start_time.strftime('%H:%M')}, up to {inputs.max_hours_per_day:g}h each"
    )
    render_fleet_summary(session)

    if session.result is None:
        st.info("👈 Set the fleet plan in the sidebar, then click **Run Simulation**.")
    else:
        st.markdown('<div class="section-header">Simulation Results</div>', unsafe_allow_html=True)
        render_kpi_row(session.result)
        render_breakdown(session.result)

    render_fleet_tables(load_fleet_data(DATA_DIR))


if __name__ == "__main__":
    main()
