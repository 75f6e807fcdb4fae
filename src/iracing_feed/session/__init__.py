"""Session-info parsing.

Public API
----------
parse_session_info  - session-info text → nested dict/list/scalar tree
SessionInfoParser   - stateless parser object (``parse(text)``)
classify            - raw token → None/str/bool/int/float
"""

from iracing_feed.session.parser import SessionInfoParser, SessionNode, parse_session_info
from iracing_feed.session.scalar import classify

__all__ = [
    "SessionInfoParser",
    "SessionNode",
    "classify",
    "parse_session_info",
]
