"""
Colombian Time Convertor - Streamlit UI
Step-by-step flow: family → time → event → people → Colombians → spicy → results.
One step per rerun; the wizard lives in session state.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

import streamlit as st
import pandas as pd
import plotly.graph_objects as go

sys.path.insert(0, str(Path(__file__).resolve().parent))

from config import AppSettings, CulturalFamily, EventCategory, MAX_TOTAL_PARTICIPANTS
from defaults import colombian_rules, current_time
from export import format_timestamp, result_workbook, share_result, share_text
from model import delay_components
from wizard import InvalidTransition, WizardController, WizardStep

SETTINGS = AppSettings()
logging.basicConfig(
    level=SETTINGS.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
COL_YELLOW = "#FFD700"
COL_RED = "#DA291C"
COL_BLUE = "#0033A0"
COL_GREEN = "#00A86B"
COL_CORAL = "#FF6F61"
COL_BROWN = "#4B2E2E"
COL_LIGHT = "#FFF8DC"


def _rgba(hex_color: str, opacity: float) -> str:
    h = hex_color.lstrip("#")
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    return f"rgba({r},{g},{b},{opacity})"


# ---------------------------------------------------------------------------
# Page config & CSS
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Colombian Time Convertor",
    page_icon="🇨🇴",
    layout="centered",
    initial_sidebar_state="collapsed",
)

st.markdown(f"""
<style>
    .stApp {{ background: linear-gradient(180deg, {COL_YELLOW} 0%, {_rgba(COL_YELLOW, 0.55)} 100%); }}
    [data-testid="collapsedControl"] {{ display: none; }}
    [data-testid="stToolbar"] {{ display: none; }}

    button[kind="primary"], .stDownloadButton button {{
        background-color: {COL_BLUE} !important; border-color: {COL_BLUE} !important;
        color: {COL_LIGHT} !important;
    }}

    .ctc-header {{ text-align: center; margin-bottom: 0.6rem; }}
    .ctc-header h1 {{ margin: 0; color: {COL_BLUE}; font-size: 2rem; font-weight: 800; }}
    .ctc-header p {{ margin: 0.2rem 0 0 0; color: {COL_BROWN}; font-size: 1rem; }}

    .dots {{ display: flex; justify-content: center; gap: 0.5rem; margin: 0.6rem 0 1rem 0; }}
    .dot {{ width: 12px; height: 12px; border-radius: 50%; background: {_rgba(COL_BROWN, 0.3)}; }}
    .dot.on {{ background: {COL_BLUE}; }}

    .card {{
        background: {COL_LIGHT}; border-radius: 16px; padding: 1.2rem 1.4rem;
        box-shadow: 0 4px 8px {_rgba(COL_BROWN, 0.2)}; margin-bottom: 1rem; text-align: center;
    }}
    .card .label {{ font-size: 0.9rem; font-weight: 600; color: {COL_BROWN}; }}
    .card .value {{ font-size: 1.4rem; color: {COL_BROWN}; }}
    .card .value.big {{ font-size: 1.8rem; font-weight: 800; color: {COL_BLUE}; }}

    .quip {{ text-align: center; font-style: italic; color: {COL_CORAL}; }}
    .quip.hot {{ color: {COL_RED}; }}
</style>
""", unsafe_allow_html=True)


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------
def _now():
    return current_time(SETTINGS.timezone)


if "wizard" not in st.session_state or not isinstance(st.session_state.wizard, WizardController):
    st.session_state.wizard = WizardController(rules=colombian_rules(), clock=_now)


def _fmt(ts) -> str:
    return format_timestamp(ts, SETTINGS.time_format)


def _go(action):
    try:
        action()
    except InvalidTransition as exc:
        logger.warning("Ignored navigation: %s", exc)
    st.rerun()


# ---------------------------------------------------------------------------
# Header (every step)
# ---------------------------------------------------------------------------
def _render_header(wiz: WizardController):
    dots = "".join(
        f'<div class="dot{" on" if step <= wiz.current_step else ""}"></div>'
        for step in range(int(WizardStep.TIME), int(WizardStep.RESULTS) + 1)
    )
    st.markdown(f"""
    <div class="ctc-header">
        <h1>Colombian Time</h1>
        <p>Convertor</p>
    </div>
    <div class="dots">{dots}</div>
    """, unsafe_allow_html=True)
    st.markdown(f"#### {wiz.title}")


def _nav(wiz: WizardController, next_label: str = "Next"):
    c_back, c_next = st.columns(2)
    with c_back:
        if wiz.can_retreat and st.button("‹ Back", use_container_width=True):
            _go(wiz.retreat)
    with c_next:
        if st.button(next_label, use_container_width=True, type="primary", disabled=not wiz.can_advance):
            _go(wiz.advance)


# ═══════════════════════════════════════════════════════════════════════════
# STEP 0: FAMILY
# ═══════════════════════════════════════════════════════════════════════════
def _step_family(wiz: WizardController):
    for family in CulturalFamily:
        label = f"{family.flag}  {family.label}"
        if not family.is_available:
            st.button(f"🔒 {label} (coming soon)", key=f"fam_{family.value}",
                      disabled=True, use_container_width=True)
            continue
        if st.button(label, key=f"fam_{family.value}", use_container_width=True, type="primary"):
            if wiz.select_family(family):
                _go(wiz.advance)


# ═══════════════════════════════════════════════════════════════════════════
# STEP 1: TIME
# ═══════════════════════════════════════════════════════════════════════════
def _step_time(wiz: WizardController):
    inputs = wiz.inputs
    requested = pd.Timestamp(inputs.requested_time)
    today = _now().date()
    day = st.date_input("Date", value=requested.date(), min_value=min(today, requested.date()))
    at = st.time_input("Time", value=requested.time(), step=300)
    combined = pd.Timestamp(datetime.combine(day, at))
    if requested.tzinfo is not None:
        combined = combined.tz_localize(requested.tzinfo, ambiguous=False, nonexistent="shift_forward")
    inputs.requested_time = combined
    _nav(wiz)


# ═══════════════════════════════════════════════════════════════════════════
# STEP 2: EVENT
# ═══════════════════════════════════════════════════════════════════════════
def _step_event(wiz: WizardController):
    inputs = wiz.inputs
    options = list(EventCategory)
    choice = st.radio(
        "Event type",
        options,
        index=options.index(inputs.event_category),
        format_func=lambda c: f"{c.emoji} {c.label}",
        label_visibility="collapsed",
    )
    inputs.event_category = choice
    kind = "Informal" if choice.is_informal else "Formal"
    st.markdown(f"""
    <div class="card">
        <div class="label">Selected Event</div>
        <div class="value">{choice.emoji} {choice.label} &middot; {kind}</div>
    </div>
    """, unsafe_allow_html=True)
    _nav(wiz)


# ═══════════════════════════════════════════════════════════════════════════
# STEP 3: TOTAL PARTICIPANTS
# ═══════════════════════════════════════════════════════════════════════════
def _step_total(wiz: WizardController):
    inputs = wiz.inputs
    inputs.total_participants = st.number_input(
        "People in the group",
        min_value=1,
        max_value=MAX_TOTAL_PARTICIPANTS,
        value=inputs.total_participants,
        step=1,
        help=f"Maximum {MAX_TOTAL_PARTICIPANTS} people",
    )
    _nav(wiz)


# ═══════════════════════════════════════════════════════════════════════════
# STEP 4: COLOMBIAN PARTICIPANTS
# ═══════════════════════════════════════════════════════════════════════════
def _step_colombian(wiz: WizardController):
    inputs = wiz.inputs
    st.markdown('<div class="card"><div class="value big">🇨🇴</div></div>', unsafe_allow_html=True)
    if inputs.total_participants == 1:
        inputs.colombian_participants = int(st.checkbox(
            "The one person is Colombian", value=inputs.colombian_participants == 1,
        ))
    else:
        inputs.colombian_participants = st.slider(
            f"How many are Colombian? (out of {inputs.total_participants})",
            min_value=0,
            max_value=inputs.total_participants,
            value=inputs.colombian_participants,
        )
    if inputs.colombian_participants > 0:
        st.markdown('<p class="quip">😅 Ah, now we\'re getting somewhere!</p>', unsafe_allow_html=True)
    _nav(wiz)


# ═══════════════════════════════════════════════════════════════════════════
# STEP 5: SPICY FACTOR
# ═══════════════════════════════════════════════════════════════════════════
def _step_spicy(wiz: WizardController):
    inputs = wiz.inputs
    st.markdown("Are there any spicy hot-blooded Colombian women in the group?")
    answer = st.radio(
        "Spicy factor",
        ["😇 No", "🌶️ ¡Sí!"],
        index=1 if inputs.spicy_factor_present else 0,
        horizontal=True,
        label_visibility="collapsed",
    )
    inputs.spicy_factor_present = answer.endswith("¡Sí!")
    if inputs.spicy_factor_present:
        st.markdown('<p class="quip hot">🔥 ¡Ay, Dios mío! We\'re in trouble now!</p>', unsafe_allow_html=True)
    _nav(wiz, next_label="Calculate Colombian Time")


# ═══════════════════════════════════════════════════════════════════════════
# STEP 6: RESULTS
# ═══════════════════════════════════════════════════════════════════════════
def _step_results(wiz: WizardController):
    inputs = wiz.inputs
    result = wiz.result

    st.markdown(f"""
    <div class="card">
        <div class="label">Original Time</div>
        <div class="value">{_fmt(inputs.requested_time)}</div>
    </div>
    <div class="card">
        <div class="label">Colombian Time</div>
        <div class="value big">{_fmt(result.arrival_time)}</div>
        <div class="label">+{result.delay_minutes} minutes</div>
    </div>
    """, unsafe_allow_html=True)

    st.markdown("##### Calculation Breakdown")
    st.markdown(result.breakdown.text)
    if inputs.spicy_factor_present:
        st.markdown('<p class="quip hot">+ Spicy Colombian women bonus 🌶️</p>', unsafe_allow_html=True)
    if not result.breakdown.is_consistent:
        st.caption(
            f"Note: the terms above add up to {result.breakdown.stated_minutes} minutes; "
            f"the applied delay is {result.delay_minutes} minutes."
        )

    parts = delay_components(inputs, wiz.rules)
    if parts:
        fig = go.Figure(go.Waterfall(
            x=[lbl for lbl, _ in parts] + ["Total"],
            y=[m for _, m in parts] + [0],
            measure=["relative"] * len(parts) + ["total"],
            increasing=dict(marker=dict(color=COL_GREEN)),
            totals=dict(marker=dict(color=COL_BLUE)),
            connector=dict(line=dict(color=_rgba(COL_BROWN, 0.4))),
        ))
        fig.update_layout(
            height=320,
            margin=dict(l=20, r=20, t=30, b=20),
            plot_bgcolor=COL_LIGHT, paper_bgcolor=COL_LIGHT,
            font=dict(size=12, color=COL_BROWN),
            yaxis=dict(title="Minutes", gridcolor="#E8EAED"),
            showlegend=False,
        )
        st.plotly_chart(fig, use_container_width=True)

    # ── Share & download ──
    st.divider()
    text = share_text(inputs, result, _fmt)
    with st.expander("Share Result"):
        st.code(text, language=None)
        share_result(
            lambda body: st.download_button(
                "Download as text", data=body, file_name="colombian_time.txt",
                mime="text/plain", use_container_width=True,
            ),
            text,
        )
    st.download_button(
        "Download as Excel",
        data=result_workbook(inputs, result, _fmt, wiz.rules),
        file_name="Colombian_Time.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        use_container_width=True,
    )

    if st.button("⟳  Start Over", use_container_width=True):
        _go(wiz.reset)


# ═══════════════════════════════════════════════════════════════════════════
# Router
# ═══════════════════════════════════════════════════════════════════════════
PAGES = {
    WizardStep.FAMILY: _step_family,
    WizardStep.TIME: _step_time,
    WizardStep.EVENT: _step_event,
    WizardStep.TOTAL_PARTICIPANTS: _step_total,
    WizardStep.COLOMBIAN_PARTICIPANTS: _step_colombian,
    WizardStep.SPICY_FACTOR: _step_spicy,
    WizardStep.RESULTS: _step_results,
}

_wizard = st.session_state.wizard
_render_header(_wizard)
PAGES[_wizard.step](_wizard)
