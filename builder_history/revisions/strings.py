"""User-facing strings for the revision history panel and its endpoints."""

MISSING_REVISION_ID = "You must set the revision ID"
INVALID_REVISION = "Invalid Revision"
MISSING_ID = "You must set the id"
CANNOT_DELETE_REVISION = "Cannot delete this Revision"

DATE_TEMPLATE = "{human_time} ago ({date})"


def editor_i18n(help_url: str) -> dict[str, str]:
    return {
        "revision_history": "Revision History",
        "no_revisions_1": (
            "Revision history lets you save your previous versions of your work, "
            "and restore them any time."
        ),
        "no_revisions_2": (
            "Start designing your page and you'll be able to see the entire revision history here."
        ),
        "revisions_disabled_1": "It looks like the post revision feature is unavailable in your website.",
        "revisions_disabled_2": f'Learn more about <a target="_blank" href="{help_url}">revisions</a>',
        "revision": "Revision",
    }
