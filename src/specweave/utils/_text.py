"""Name and content helpers shared by the resolver and fixers."""

import hashlib
import re

_CAMEL_HUMP = re.compile(r"([a-z])([A-Z])")


def to_kebab_case(name: str) -> str:
    """Convert a spec key to kebab case.

    Dots become hyphens and camel-case humps are split, so
    ``billing.createInvoice`` becomes ``billing-create-invoice``.

    Args:
        name: Spec key or identifier.

    Returns:
        The lower-case, hyphen-separated form.
    """
    return _CAMEL_HUMP.sub(r"\1-\2", name.replace(".", "-")).lower()


def to_pascal_case(name: str) -> str:
    """Join the dotted parts of a key in PascalCase.

    ``billing.charge`` becomes ``BillingCharge``. Capitals inside a part are
    kept.
    """
    return "".join(part[:1].upper() + part[1:] for part in name.split("."))


def content_hash(content: str) -> str:
    """Return the hex SHA-256 digest of UTF-8 encoded text."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
