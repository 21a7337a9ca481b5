import json


def focus_script(label: str) -> str:
    selector = json.dumps(f'[aria-label="{label}"]')
    return f"""
        <script>
        const el = window.parent.document.querySelector({selector});
        if (el) {{
            el.focus();
        }}
        </script>
        """


def submit_shortcut_script(button_key: str) -> str:
    """
    Cmd/Ctrl+Enter clicks the keyed submit button, so the shortcut goes
    through the same callback and in-flight guard as a mouse click.

    Each render swaps out the listener the previous render registered;
    the page never holds more than one.
    """
    selector = json.dumps(f".st-key-{button_key} button")
    return f"""
        <script>
        const host = window.parent;
        const doc = host.document;
        if (host.__intakeSubmitShortcut) {{
            doc.removeEventListener("keydown", host.__intakeSubmitShortcut);
        }}
        host.__intakeSubmitShortcut = function (e) {{
            if ((e.metaKey || e.ctrlKey) && e.key === "Enter") {{
                const button = doc.querySelector({selector});
                if (button && !button.disabled) {{
                    e.preventDefault();
                    // Commit the field being edited before the click reruns the app
                    if (doc.activeElement) {{
                        doc.activeElement.blur();
                    }}
                    host.setTimeout(() => button.click(), 100);
                }}
            }}
        }};
        doc.addEventListener("keydown", host.__intakeSubmitShortcut);
        </script>
        """
