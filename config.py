# config.py

# -------------------------------------------------
# 📋 THE FORM: "New Client Intake"
# -------------------------------------------------
SERVICE_TYPES = [
    "Personal Tax Return",
    "Business Tax Return",
    "Personal + Business",
    "Self-Employed / 1099",
    "Rental Property",
    "Investment Income",
    "Estate/Trust",
    "Amended Return",
]

SOURCE_OPTIONS = [
    "Phone Call",
    "Walk-In",
    "Referral (Client)",
    "Referral (Partner)",
    "Google Search",
    "Social Media",
    "Other",
]

STAFF_MEMBERS = [
    "Unassigned",
    "Sarah Johnson",
    "Mike Chen",
    "Alex Rodriguez",
]

DEFAULT_ASSIGNEE = "Unassigned"

# Any source containing this marker unlocks the "Referred By" field
REFERRAL_MARKER = "Referral"

NOTES_MAX_LENGTH = 500
PHONE_DIGITS = 10

# The "Master List" of fields, in the order they are rendered
FORM_FIELDS = {
    "name": {"description": "Full Name", "placeholder": "John Smith", "required": True},
    "email": {"description": "Email Address", "placeholder": "john@example.com", "required": True},
    "phone": {"description": "Phone Number", "placeholder": "(555) 123-4567", "required": True},
    "service_type": {"description": "Service Type", "placeholder": "Select service type...", "required": True},
    "source": {"description": "How did they reach us?", "placeholder": "Select source...", "required": True},
    "referred_by": {"description": "Referred By", "placeholder": "Client name or partner name", "required": False},
    "notes": {
        "description": "Internal Notes",
        "placeholder": "Urgent request, special circumstances, follow-up needed...",
        "required": False,
    },
    "assigned_to": {"description": "Assign To", "placeholder": "", "required": False},
}

# -------------------------------------------------
# 💾 LOCAL STORE KEYS
# -------------------------------------------------
RECENT_CLIENTS_KEY = "recentClients"
PENDING_SUBMISSIONS_KEY = "pendingSubmissions"
