"""ZStack Edge provider package.

This package provides an asynchronous client for the ZStack Edge open API
(cluster, node and external-network lifecycle) together with plain-Python
resource handlers that expose create/read/update/delete semantics on top
of it. Mutating calls on the backend are deferred jobs; the client turns
them into synchronous calls by polling the action result endpoint.

:var __version__: Current package version
:type __version__: str
"""

__version__ = "0.1.0"
