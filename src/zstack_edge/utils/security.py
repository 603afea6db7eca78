"""Log sanitization and secure logging setup.

Request signatures, access-key secrets and node passwords must never be
written to logs. This module provides:
- Header, URL and payload sanitizers used by debug request logging
- A logging formatter that redacts sensitive values from every record
- One-time logging setup for the provider
"""

import copy
import logging
import re
import sys
from typing import Any, Dict, List, Optional

SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "set-cookie",
    "x-access-key-secret",
}

SENSITIVE_PATTERNS = {
    "zstack_signature": re.compile(r"Zstack\s+[^\s:]+:[A-Za-z0-9+/=]+"),
    "bearer_token": re.compile(r"Bearer\s+[A-Za-z0-9\-._~+/]+=*"),
    "secret_assignment": re.compile(
        r"(secret|password|sshPassword)[\"']?\s*[:=]\s*[\"']?[^\s\"',}]+",
        re.IGNORECASE,
    ),
}

SENSITIVE_KEYS = {"password", "secret", "token", "sshpassword", "license"}


def sanitize_string(text: str) -> str:
    """Replace signatures, bearer tokens and password assignments in free text.

    :param text: Log message or header value
    :type text: str
    :return: Text with each match replaced by ``<kind:REDACTED>``
    :rtype: str
    """
    if not text:
        return text
    for kind, pattern in SENSITIVE_PATTERNS.items():
        text = pattern.sub(f"<{kind}:REDACTED>", text)
    return text


def sanitize_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """Mask credential headers, keeping only their length.

    The ``Authorization`` header carries the access key ID and request
    signature; other header values still pass through :func:`sanitize_string`.

    :param headers: Request or response headers
    :return: Copy safe to log
    """
    masked: Dict[str, Any] = {}
    for name, raw in (headers or {}).items():
        if name.lower() in SENSITIVE_HEADERS:
            masked[name] = f"<REDACTED:length={len(raw)}>" if raw else "<REDACTED>"
        else:
            masked[name] = sanitize_string(raw) if isinstance(raw, str) else raw
    return masked


def sanitize_url(url: str) -> str:
    """Redact credential-like query parameters from a URL.

    ``get_node_disk`` sends an (encrypted) SSH password as a query
    parameter, so URLs are sanitized before they are logged.

    :param url: URL to sanitize
    :type url: str
    :return: Sanitized URL
    :rtype: str
    """
    if not url:
        return url
    for param in ("sshPassword", "password", "secret", "token"):
        url = re.sub(rf"({param}=)[^&\s]+", r"\1<REDACTED>", url, flags=re.IGNORECASE)
    return url


def safe_log_dict(
    data: Any, sanitize_keys: Optional[List[str]] = None
) -> Any:
    """Create a copy of a payload that is safe to log.

    :param data: Payload (dict, list or scalar)
    :type data: Any
    :param sanitize_keys: Additional keys to redact beyond the defaults
    :type sanitize_keys: Optional[List[str]]
    :return: Sanitized copy
    :rtype: Any
    """
    if not data:
        return data
    keys = set(SENSITIVE_KEYS)
    if sanitize_keys:
        keys.update(k.lower() for k in sanitize_keys)

    def _sanitize(obj: Any) -> Any:
        if isinstance(obj, dict):
            return {
                k: "<REDACTED>"
                if isinstance(k, str) and k.lower() in keys
                else _sanitize(v)
                for k, v in obj.items()
            }
        if isinstance(obj, list):
            return [_sanitize(item) for item in obj]
        if isinstance(obj, str):
            return sanitize_string(obj)
        return obj

    return _sanitize(copy.deepcopy(data))


class SanitizingFormatter(logging.Formatter):
    """Formatter that renders the message first, then redacts it."""

    def format(self, record: logging.LogRecord) -> str:
        record.msg = sanitize_string(record.getMessage())
        record.args = None
        return super().format(record)


_LOGGING_CONFIGURED = False


def setup_secure_logging(level: str = "INFO") -> None:
    """Route all provider logging through a redacting stdout handler.

    Only the first call configures the root logger; later calls are no-ops.

    :param level: Root log level name, e.g. ``"DEBUG"``
    :type level: str
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping duplicate setup"
        )
        return

    formatter = SanitizingFormatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )

    # httpx logs every request at INFO; keep it at WARNING unless debugging
    if level.upper() != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    _LOGGING_CONFIGURED = True
