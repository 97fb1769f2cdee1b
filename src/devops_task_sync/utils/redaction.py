"""Masking helpers so secrets never reach the logs in full."""

SENSITIVE_HEADERS = {"authorization", "x-api-key", "x-access-token", "cookie"}


def mask_secret(text: str | None) -> str:
    """Mask a secret, keeping only the first and last four characters.

    Args:
        text: Secret value (PAT, header value, ...).

    Returns:
        Masked preview, or ``"****"`` for short values and ``"empty"`` for none.
    """
    if not text:
        return "empty"
    if len(text) <= 8:
        return "****"

    return f"{text[:4]}...{text[-4:]}"


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers like Authorization.

    Args:
        headers: Original headers dictionary.

    Returns:
        Dictionary with sensitive values masked.
    """
    redacted = {}

    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            redacted[key] = mask_secret(value)
        else:
            redacted[key] = value

    return redacted
