import os
from datetime import datetime

import streamlit as st
import streamlit.components.v1 as components

# --- 🔗 IMPORT CLIENT SETTINGS ---
import client_settings as cs
from backend import IntakeForm, IntakeSubmitter
from config import FORM_FIELDS, NOTES_MAX_LENGTH, SERVICE_TYPES, SOURCE_OPTIONS, STAFF_MEMBERS
from dispatcher import make_duplicate_lookup
from duplicates import DuplicateProber
from logger import load_logs, log_submission
from models import SubmissionState
from shortcuts import focus_script, submit_shortcut_script
from storage import JsonFileStore, LocalFallbackStore

st.set_page_config(page_title=cs.APP_TITLE, page_icon=cs.PAGE_ICON)


def read_secret(name):
    """Environment first, then .streamlit/secrets.toml."""
    value = os.environ.get(name)
    if value:
        return value
    try:
        return st.secrets.get(name)
    except FileNotFoundError:
        return None


@st.cache_resource
def get_store():
    # One store per server process, shared by every browser session
    return LocalFallbackStore(JsonFileStore(cs.LOCAL_STORE_PATH), recent_limit=cs.RECENT_CLIENTS_LIMIT)


def widget_key(field):
    return f"f_{field}"


def label_for(field):
    field_info = FORM_FIELDS[field]
    return field_info["description"] + (" *" if field_info["required"] else "")


def focus_field(field):
    components.html(focus_script(label_for(field)), height=0, width=0)


def register_submit_shortcut():
    components.html(submit_shortcut_script("submit"), height=0, width=0)


# --- STATE INITIALIZATION ---
if "intake" not in st.session_state:
    check_url = read_secret("DUPLICATE_CHECK_URL")
    lookup = make_duplicate_lookup(check_url, cs.WEBHOOK_TIMEOUT) if check_url else None
    submitter = IntakeSubmitter(get_store(), webhook_url=read_secret("WEBHOOK_URL"))
    st.session_state.intake = IntakeForm(submitter, DuplicateProber(lookup=lookup, delay=cs.DUPLICATE_CHECK_DELAY))
    st.session_state.intake.focus = "name"
    st.session_state.notification = None

form = st.session_state.intake
for field, value in form.values.items():
    if widget_key(field) not in st.session_state:
        st.session_state[widget_key(field)] = value


# --- CALLBACKS ---
def sync_widgets():
    for field, value in st.session_state.intake.values.items():
        st.session_state[widget_key(field)] = value


def on_field_change(field):
    intake = st.session_state.intake
    had_error = field in intake.errors
    intake.set_field(field, st.session_state[widget_key(field)])
    if had_error:
        intake.check_field(field)
    sync_widgets()


def record_outcome(result):
    st.session_state.notification = result.notification
    if result.state == SubmissionState.SUCCESS:
        log_submission(result.payload.name, result.payload.service_type, "Success")
    elif result.state == SubmissionState.FAILED:
        log_submission(result.payload.name, result.payload.service_type, "Failed")
    sync_widgets()


def submit_intake():
    record_outcome(st.session_state.intake.submit())


def retry_intake():
    notification = st.session_state.notification
    if notification is not None and notification.retry is not None:
        record_outcome(st.session_state.intake.retry(notification))


def replay_pending():
    sent, remaining = st.session_state.intake.submitter.replay_pending()
    st.session_state.replay_summary = f"Sent {sent}, still pending {remaining}."


def clear_pending():
    st.session_state.intake.submitter.clear_pending()
    st.session_state.replay_summary = "Pending queue cleared."


# --- WIDGET HELPERS ---
def show_error(field):
    if field in form.errors:
        st.caption(f":red[{form.errors[field]}]")


def text_field(field, widget=st.text_input, **kwargs):
    widget(
        label_for(field),
        key=widget_key(field),
        placeholder=FORM_FIELDS[field]["placeholder"],
        on_change=on_field_change,
        args=(field,),
        **kwargs,
    )
    show_error(field)


def select_field(field, options, blank=True):
    placeholder = FORM_FIELDS[field]["placeholder"]
    st.selectbox(
        label_for(field),
        [""] + options if blank else options,
        key=widget_key(field),
        format_func=lambda value: value or placeholder,
        on_change=on_field_change,
        args=(field,),
    )
    show_error(field)


@st.fragment(run_every=cs.DUPLICATE_CHECK_DELAY if form.prober and form.prober.lookup else None)
def duplicate_banner():
    warning = st.session_state.intake.duplicate_warning
    if warning:
        with st.container(border=True):
            st.warning(f"**Possible duplicate client**\n\n{warning}")
            st.link_button("View Existing Client", cs.CRM_SHEET_URL)


# --- SIDEBAR ---
with st.sidebar:
    st.header(cs.APP_TITLE)
    st.caption(cs.TAGLINE)
    st.info(cs.ACCESS_BADGE)
    st.link_button("📊 View Dashboard", cs.CRM_SHEET_URL)

    # Stays reachable while the main submit button is scrolled out of view
    st.button("📨 Submit Client", on_click=submit_intake, disabled=form.is_submitting, key="floating_submit")

    pending = form.submitter.store.load_pending()
    with st.expander(f"⏳ Pending Submissions ({len(pending)})"):
        if pending:
            st.dataframe([p.model_dump() for p in pending])
        c1, c2 = st.columns(2)
        c1.button("🔁 Replay", on_click=replay_pending, disabled=not pending)
        c2.button("🗑️ Clear", on_click=clear_pending, disabled=not pending)
        if st.session_state.get("replay_summary"):
            st.caption(st.session_state.replay_summary)

    with st.expander("💼 Activity Log"):
        st.dataframe(load_logs())

# --- MAIN ---
st.title(f"📝 {cs.OFFICE_NAME}")
st.write(cs.INTRO_TEXT)

notification = st.session_state.notification
if notification is not None:
    message = f"**{notification.title}**\n\n{notification.description}"
    if notification.level == "success":
        st.success(message)
        st.toast(notification.title)
    elif notification.level == "error":
        st.error(message)
        if notification.sticky:
            st.button("🔁 Retry", on_click=retry_intake, key="retry_submit")
    else:
        st.info(message)
    if not notification.sticky:
        st.session_state.notification = None

duplicate_banner()

text_field("name")
text_field("email")
text_field("phone")
select_field("service_type", SERVICE_TYPES)
select_field("source", SOURCE_OPTIONS)
if form.referred_by_enabled:
    text_field("referred_by")
text_field("notes", widget=st.text_area, max_chars=NOTES_MAX_LENGTH)
select_field("assigned_to", STAFF_MEMBERS, blank=False)

st.button(
    "📨 Create Client & Send Welcome Email",
    on_click=submit_intake,
    disabled=form.is_submitting,
    type="primary",
    key="submit",
)
register_submit_shortcut()
st.caption(f"This will send an email to: **{form.values['email'] or 'client'}**")

if form.focus:
    focus_field(form.focus)
    form.focus = None

# --- RECENT CLIENTS ---
if form.recent_clients:
    st.divider()
    st.subheader("✅ Last 5 Clients Added")
    for client in form.recent_clients:
        added = datetime.fromisoformat(client.timestamp.replace("Z", "+00:00")).astimezone()
        st.markdown(f"**{client.name}** - {client.service_type} · {added.strftime('%I:%M:%S %p')}")

st.caption(cs.FOOTER_TEXT)
