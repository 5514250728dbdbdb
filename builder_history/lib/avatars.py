"""Author avatar markup."""

import hashlib
from html import escape

from markupsafe import Markup

GRAVATAR_URL = "https://secure.gravatar.com/avatar/{hash}?s={size}&d=mm&r=g"


def gravatar_url(email: str | None, size: int) -> str:
    digest = hashlib.md5((email or "").strip().lower().encode()).hexdigest()
    return GRAVATAR_URL.format(hash=digest, size=size)


def get_avatar(email: str | None, size: int = 22, picture_url: str | None = None, alt: str = "") -> Markup:
    """Return an ``<img>`` tag for an author.

    An uploaded profile picture wins over the Gravatar derived from the email.
    """
    src = picture_url or gravatar_url(email, size)
    return Markup(
        f'<img alt="{escape(alt)}" src="{escape(src)}" class="avatar avatar-{size} photo" '
        f'height="{size}" width="{size}" loading="lazy">'
    )
