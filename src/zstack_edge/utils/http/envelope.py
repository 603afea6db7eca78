"""Response envelope parsing.

The Edge API wraps results in a JSON envelope::

    {"content": {...}}                                   # single object
    {"content": {"actionId": "..."}}                     # deferred job
    {"content": {"totalCount": 42, "result": [...]}}     # page with count

:class:`Envelope` navigates nested keys, binds the selected subtree to a
caller-supplied type through pydantic, and exposes the action ID and the
pagination total.
"""

import json
import logging
from typing import Any, Optional, Type, TypeVar, Union

from pydantic import TypeAdapter

from ...exceptions import KeyNotFoundError, ParameterError

logger = logging.getLogger(__name__)

T = TypeVar("T")

KEY_CONTENT = "content"
KEY_TOTAL = "totalCount"
KEY_RESULT = "result"
KEY_ACTION_ID = "actionId"

_MISSING = object()


def parse_body(body: Union[bytes, str, None]) -> Any:
    """Parse a response body if it looks like JSON.

    Bodies that are empty or do not start with ``{`` or ``[`` are treated as
    absent, as are bodies that fail to parse.

    :param body: Raw response body
    :return: Parsed JSON value or None
    """
    if body is None:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    body = body.strip()
    if not body or body[0] not in "{[":
        return None
    try:
        return json.loads(body)
    except ValueError as e:
        logger.debug(f"Ignoring unparsable JSON body: {e}")
        return None


class Envelope:
    """Parsed response envelope.

    :param data: Parsed JSON value, or None for an absent body
    :type data: Any
    """

    def __init__(self, data: Any = None):
        self.data = data

    @classmethod
    def parse(cls, body: Union[bytes, str, None]) -> "Envelope":
        """Parse raw body bytes into an envelope.

        :param body: Raw response body
        :return: Envelope (possibly empty)
        :rtype: Envelope
        """
        return cls(parse_body(body))

    @property
    def is_empty(self) -> bool:
        return self.data is None

    def _lookup(self, keys) -> Any:
        node = self.data
        for key in keys:
            if not isinstance(node, dict) or key not in node:
                return _MISSING, key
            node = node[key]
        return node, None

    def get(self, *keys: str) -> Any:
        """Return the value at a nested key path.

        Empty keys are skipped, so ``get("")`` returns the whole document.

        :param keys: Key path, outermost first
        :return: Value at the path
        :raises KeyNotFoundError: If any key on the path is absent
        """
        keys = tuple(k for k in keys if k)
        if self.data is None:
            raise KeyNotFoundError(keys, keys[0] if keys else "<body>")
        value, missing = self._lookup(keys)
        if value is _MISSING:
            raise KeyNotFoundError(keys, missing)
        return value

    def contains(self, *keys: str) -> bool:
        value, _ = self._lookup(tuple(k for k in keys if k))
        return self.data is not None and value is not _MISSING

    def bind(self, target: Type[T], *keys: str) -> T:
        """Deserialize the value at a key path into ``target``.

        ``target`` may be any type pydantic can validate: a model,
        ``List[Model]``, ``Dict[str, Any]``, ``str``, ``bool``...

        :param target: Result type
        :param keys: Key path, outermost first
        :return: Validated value
        :raises KeyNotFoundError: If the key path is absent
        :raises pydantic.ValidationError: If the value does not fit ``target``
        """
        return TypeAdapter(target).validate_python(self.get(*keys))

    @property
    def action_id(self) -> Optional[str]:
        """Action ID of a deferred job, read from ``content.actionId``.

        :return: The action ID, or None when the call completed inline
        :rtype: Optional[str]
        """
        content = self.data.get(KEY_CONTENT) if isinstance(self.data, dict) else None
        if not isinstance(content, dict):
            return None
        action_id = content.get(KEY_ACTION_ID)
        if action_id is None or action_id == "":
            return None
        return str(action_id)

    def total_count(self, key: str = KEY_CONTENT) -> int:
        """Pagination total found next to the result list under ``key``.

        :param key: Response key holding ``totalCount`` and ``result``
        :return: Total number of matching records
        :raises KeyNotFoundError: If the total is absent
        :raises ParameterError: If the total is not an integer
        """
        total = self.get(key, KEY_TOTAL)
        try:
            return int(total)
        except (TypeError, ValueError) as e:
            raise ParameterError(
                f"{key}.{KEY_TOTAL} is not an integer: {total!r}", field=KEY_TOTAL
            ) from e

    def __repr__(self) -> str:
        return f"Envelope({self.data!r})"
