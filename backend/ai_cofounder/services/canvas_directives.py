"""ai_cofounder/services/canvas_directives.py

Inline canvas directives embedded by the assistant in its chat replies::

    Here is your layout [CANVAS_CREATE:rectangle:{"x": 10, "y": 20, "width": 80}]

A token is the literal ``[CANVAS_CREATE:``, a type identifier (anything but
``:``), a colon, a JSON object running from ``{`` to the *first* ``}``, and a
closing ``]``. Payloads therefore have to be flat JSON objects: a nested
object ends the payload early, the closing ``]`` is not where the pattern
expects it, and the token simply does not match (it is neither extracted nor
stripped from the display text).
"""

import json
import logging
import re
from typing import List

from ai_cofounder.core_models import Directive
from ai_cofounder.metrics import CANVAS_DIRECTIVES_TOTAL

log = logging.getLogger(__name__)

DIRECTIVE_PREFIX = "[CANVAS_CREATE:"

DIRECTIVE_PATTERN = re.compile(r"\[CANVAS_CREATE:([^:]+):(\{[^}]*\})\]")


def extract_directives(text: str) -> List[Directive]:
    """Return every well-formed directive in *text*, left to right.

    A payload that is not a decodable JSON object is logged and dropped; the
    scan carries on with the next token.
    """
    if not text or DIRECTIVE_PREFIX not in text:
        return []

    directives: List[Directive] = []
    for match in DIRECTIVE_PATTERN.finditer(text):
        type_identifier, payload = match.group(1), match.group(2)
        try:
            parameters = json.loads(payload)
        except json.JSONDecodeError as exc:
            log.warning("Skipping malformed canvas directive %r: %s", match.group(0), exc)
            CANVAS_DIRECTIVES_TOTAL.labels(outcome="malformed").inc()
            continue
        if not isinstance(parameters, dict):
            log.warning("Skipping canvas directive %r: payload is not a JSON object", match.group(0))
            CANVAS_DIRECTIVES_TOTAL.labels(outcome="malformed").inc()
            continue

        CANVAS_DIRECTIVES_TOTAL.labels(outcome="parsed").inc()
        directives.append(Directive(type_identifier.strip(), parameters))

    log.debug("Extracted %d canvas directive(s)", len(directives))
    return directives


def sanitize_reply(text: str) -> str:
    """Strip all directive tokens from *text* and trim surrounding whitespace."""
    if not text:
        return ""
    # Removing one token can splice its neighbours into a new one, so repeat
    # until nothing matches; that keeps sanitize_reply idempotent.
    cleaned, count = DIRECTIVE_PATTERN.subn("", text)
    while count:
        cleaned, count = DIRECTIVE_PATTERN.subn("", cleaned)
    return cleaned.strip()
