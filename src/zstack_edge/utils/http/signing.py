"""Access-key request signing for the ZStack Edge API.

Each request is authenticated with an HMAC-SHA1 signature over the
method, the request date, and the request path with the API context path
removed::

    signature = base64(HMAC-SHA1(secret, "METHOD\\nDATE\\nURI"))
    Authorization: Zstack <accessKeyId>:<signature>
    Date: <RFC 1123 date with numeric zone>

The date is taken fresh for every request, so a signature is never reused.
"""

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Callable, Dict, Optional

AUTH_SCHEME = "Zstack"


def format_date(moment: datetime) -> str:
    """Format a timestamp as RFC 1123 with a numeric zone offset.

    :param moment: Timezone-aware timestamp (naive values are taken as UTC)
    :type moment: datetime
    :return: Date such as ``Mon, 02 Jan 2006 15:04:05 +0000``
    :rtype: str
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment)


def strip_context_path(path: str, context_path: str) -> str:
    """Remove the first occurrence of the context path from a URL path.

    :param path: URL path of the request
    :param context_path: API context path such as ``/ze``
    :return: Path used in the string to sign
    """
    if not context_path:
        return path
    return path.replace(context_path, "", 1)


def compute_signature(secret: str, method: str, date: str, uri: str) -> str:
    """Compute the base64 HMAC-SHA1 signature of a request.

    :param secret: Access key secret
    :param method: HTTP method, upper case
    :param date: Value of the Date header
    :param uri: Request path without the context path
    :return: Base64-encoded signature
    """
    message = f"{method}\n{date}\n{uri}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), message, hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


class RequestSigner:
    """Produces authentication headers for outgoing requests.

    :param access_key_id: Access key ID placed in the Authorization header
    :type access_key_id: str
    :param access_key_secret: Secret used as the HMAC key
    :type access_key_secret: str
    :param context_path: API context path stripped before signing
    :type context_path: str
    :param clock: Optional callable returning the current time
    :type clock: Optional[Callable[[], datetime]]
    """

    def __init__(
        self,
        access_key_id: str,
        access_key_secret: str,
        context_path: str = "",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.access_key_id = access_key_id
        self._secret = access_key_secret
        self.context_path = context_path
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def headers_for(self, method: str, path: str) -> Dict[str, str]:
        """Build the Authorization and Date headers for one request.

        :param method: HTTP method
        :type method: str
        :param path: URL path of the request (query string excluded)
        :type path: str
        :return: Headers to set on the request
        :rtype: Dict[str, str]
        """
        date = format_date(self._clock())
        uri = strip_context_path(path, self.context_path)
        signature = compute_signature(self._secret, method.upper(), date, uri)
        return {
            "Authorization": f"{AUTH_SCHEME} {self.access_key_id}:{signature}",
            "Date": date,
        }

    def __repr__(self) -> str:
        return f"RequestSigner(access_key_id={self.access_key_id!r})"
