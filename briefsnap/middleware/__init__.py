"""HTTP middleware: request timeout and request ID.

Applied in main app; order matters (last added = outermost).
"""

from briefsnap.middleware.request_id import RequestIDMiddleware
from briefsnap.middleware.timeout import TimeoutMiddleware

__all__ = ["RequestIDMiddleware", "TimeoutMiddleware"]
