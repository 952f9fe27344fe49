"""
Logging filter for PII redaction
Redacts e-mail addresses, phone numbers, bearer tokens and passwords from log records
"""
import hashlib
import logging
import re


class PIIRedactionFilter(logging.Filter):
    """
    Logging filter that redacts PII and credentials from log messages

    Redacts:
    - Email addresses (first two characters and domain are kept)
    - Phone numbers
    - JWTs, bearer tokens and secret keys
    - Passwords
    """

    EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
    PHONE_PATTERN = re.compile(r'(?<!\d)\+?\d{2,3}[-. ]?\d{3,4}[-. ]?\d{3,4}(?!\d)')

    TOKEN_PATTERNS = [
        re.compile(r'(bearer\s+)([A-Za-z0-9_\-\.]{20,})', re.IGNORECASE),
        re.compile(r'((?:access[_-]?)?token["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-\.]{20,})', re.IGNORECASE),
        re.compile(r'(secret[_-]?key["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-]{16,})', re.IGNORECASE),
    ]

    PASSWORD_PATTERNS = [
        re.compile(r'("password"\s*:\s*")([^"]+)', re.IGNORECASE),
        re.compile(r'((?:password|passwd|pwd)\s*[:=]\s*)([^\s"\',]+)', re.IGNORECASE),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact the message and string args in place; never drops a record"""
        if isinstance(record.msg, str):
            record.msg = self.redact_pii(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: self.redact_pii(v) if isinstance(v, str) else v
                    for k, v in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self.redact_pii(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return True

    def redact_pii(self, text: str) -> str:
        if not text:
            return text

        redacted = text
        for pattern in self.TOKEN_PATTERNS:
            redacted = pattern.sub(r'\1***REDACTED***', redacted)
        for pattern in self.PASSWORD_PATTERNS:
            redacted = pattern.sub(r'\1***REDACTED***', redacted)

        redacted = self.EMAIL_PATTERN.sub(self._redact_email, redacted)
        redacted = self.PHONE_PATTERN.sub('XXX-XXX-XXXX', redacted)
        return redacted

    def _redact_email(self, match: re.Match) -> str:
        """Keep the first two characters and domain, plus a short hash to correlate log lines"""
        email = match.group(0)
        local, domain = email.split('@', 1)
        if len(local) <= 2:
            return f'**@{domain}'

        email_hash = hashlib.sha256(email.encode()).hexdigest()[:6]
        return f'{local[:2]}***{email_hash}@{domain}'
