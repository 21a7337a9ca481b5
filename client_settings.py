# ==========================================
# ⚙️ CLIENT CONFIGURATION FILE
# ==========================================
# Edit this file to re-brand the intake desk for a new office.
# The webhook URL itself is a secret: set WEBHOOK_URL in the environment
# or in .streamlit/secrets.toml.

# --- BRANDING ---
APP_TITLE = "Client Intake System"       # Shows in browser tab
PAGE_ICON = "📊"                          # Browser tab icon
OFFICE_NAME = "New Client Intake"        # Shows above the form
TAGLINE = "Phone & Walk-In Clients"
ACCESS_BADGE = "Staff Access Only"

# --- PAYLOAD STAMPS ---
# Static until the desk has real logins
SUBMITTED_BY = "staff_user"
FORM_VERSION = "staff_v1"

# --- LINKS ---
CRM_SHEET_URL = "https://docs.google.com/spreadsheets/d/YOUR_CRM_SHEET_ID"

# --- TUNABLES ---
WEBHOOK_TIMEOUT = 15.0           # seconds
DUPLICATE_CHECK_DELAY = 1.0      # seconds of quiet before a duplicate probe
RECENT_CLIENTS_LIMIT = 5
LOCAL_STORE_PATH = "intake_store.json"

# --- COPY ---
INTRO_TEXT = (
    "Enter client information below. A welcome email with document upload "
    "instructions will be sent automatically."
)
FOOTER_TEXT = "Internal use only • Client will receive automated welcome email with upload link"
