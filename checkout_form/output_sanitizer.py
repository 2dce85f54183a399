"""Output sanitization: redact card data, emails, and credentials before returning to the client."""
import re

_CREDENTIAL_PATTERNS = [
    re.compile(r"(?i)(api[_-]?key|secret|password|token)\"?\s*[=:]\s*\S+"),
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),      # Stripe keys
    re.compile(r"AKIA[A-Z0-9]{16}"),          # AWS keys
]

# Credit card number patterns (13-19 digits, optionally separated)
_CARD_NUMBER_PATTERN = re.compile(
    r"\b(?:\d{4}[-\s]?){2,4}\d{1,4}\b"
)

# JSON-quoted CVC values ("cvc": "123")
_CVC_FIELD_PATTERN = re.compile(r'("cvc"\s*:\s*")\d{3,4}(")')


def redact_card_number(number: str | None) -> str:
    """Mask a card number to show only last 4 digits."""
    digits = re.sub(r"\D", "", number or "")
    if len(digits) < 4:
        return "****"
    return f"****-****-****-{digits[-4:]}"


def redact_email(email: str) -> str:
    """Partially redact an email address."""
    if "@" not in email:
        return email
    local, domain = email.split("@", 1)
    if not local:
        return f"***@{domain}"
    return f"{local[0]}***@{domain}"


def sanitize_output(text: str, max_chars: int = 50000) -> str:
    """
    Sanitize text before returning it to the client.

    - Redacts credential patterns
    - Redacts credit card numbers
    - Redacts raw CVC values in JSON payloads
    - Truncates to max_chars
    """
    for pattern in _CREDENTIAL_PATTERNS:
        text = pattern.sub("[REDACTED]", text)

    text = _CARD_NUMBER_PATTERN.sub("[CARD REDACTED]", text)
    text = _CVC_FIELD_PATTERN.sub(r"\1***\2", text)

    if len(text) > max_chars:
        text = text[:max_chars] + f"\n\n[... truncated at {max_chars} chars]"

    return text
