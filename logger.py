import os
from datetime import datetime

import pandas as pd

LOG_FILE = "intake_log.csv"
LOG_COLUMNS = ["Timestamp", "Client", "Service", "Status"]


def log_submission(client_name, service_type, status, log_file=None):
    """
    Saves a new entry to the activity log.
    """
    log_file = log_file or LOG_FILE
    new_entry = {
        "Timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "Client": client_name,
        "Service": service_type,
        "Status": status,
    }

    # Headers only on the first write
    file_exists = os.path.isfile(log_file)

    df = pd.DataFrame([new_entry], columns=LOG_COLUMNS)
    df.to_csv(log_file, mode="a", header=not file_exists, index=False)


def load_logs(log_file=None):
    """
    Reads the activity log for the dashboard, newest first.
    """
    log_file = log_file or LOG_FILE
    if not os.path.exists(log_file):
        return pd.DataFrame(columns=LOG_COLUMNS)
    try:
        df = pd.read_csv(log_file)
    except (pd.errors.EmptyDataError, pd.errors.ParserError):
        # Corrupt or truncated file: show an empty log rather than crash
        return pd.DataFrame(columns=LOG_COLUMNS)
    return df.iloc[::-1].reset_index(drop=True)
