"""
Helpers for keeping personal data out of logs.

Usage:
    from toolkit.helpers import mask_email

    logger.info(f"Email sent to {mask_email(address)}")
"""


def mask_email(email: str) -> str:
    """
    Mask an email address for logging.

    The first character of the local part and the whole domain stay
    visible: "john.doe@example.com" becomes "j***@example.com".
    Anything without an "@" collapses to "***".
    """
    if not email or "@" not in email:
        return "***"

    local, domain = email.rsplit("@", 1)
    masked_local = local[0] + "***" if len(local) > 1 else "***"
    return f"{masked_local}@{domain}"
