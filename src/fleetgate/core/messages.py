"""User-facing message catalog.

Every user-visible failure carries a machine-readable key from this catalog plus the
rendered human-readable message.
"""

from typing import Any

MESSAGES: dict[str, str] = {
    "upgrade_ongoing": "An upgrade of the admin server is already in progress.",
    "upgrade_script_path": "Upgrade script not found at {path}.",
    "upgrade_started": "",
    "zypper_locked": "Zypper is locked and cannot be used: {zypper_locked_message}",
    "zypper_prompt": "Zypper is waiting for user input: {zypper_prompt_text}",
    "zypper_failed": "Listing products on the admin node failed: {details}",
    "zypper_parse_error": "Could not parse zypper output: {details}",
    "admin_failed_help": (
        "The admin server upgrade has failed. Check the fleetgate log for details."
    ),
    "zypper_locked_help": "Make sure zypper is not running and try again.",
    "zypper_prompt_help": "Make sure you complete the required action and try again.",
}


def render(key: str, **params: Any) -> str:
    """Render a catalog message.

    Args:
        key: Message key
        **params: Template parameters

    Returns:
        Rendered message, or the key itself if unknown
    """
    template = MESSAGES.get(key)
    if template is None:
        return key
    return template.format(**params)
