"""Canvas directive protocol: assistant reply in, display text + stored shapes out.

    raw reply ─► extract_directives ─► (none? synthesize_fallback_shapes)
              │                      └► materialize_shape ─► store.save
              └► sanitize_reply ─► display text

Nothing in here raises because of what the model wrote. Malformed directives,
unknown shape types and failed saves each cost one shape and a log line; the
rest of the reply is still processed.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

import structlog

from ai_cofounder.core_models import Directive, ProcessedReply, ShapeRecord, StoredShapeRecord
from ai_cofounder.exceptions import StorageError
from ai_cofounder.metrics import CANVAS_FALLBACK_TOTAL, CANVAS_SHAPE_PERSIST_FAILURES, CANVAS_SHAPES_CREATED
from ai_cofounder.services.canvas_directives import extract_directives, sanitize_reply
from ai_cofounder.services.shape_fallback import synthesize_fallback_shapes
from ai_cofounder.services.shape_materializer import materialize_shape

log = structlog.get_logger(__name__)


class ShapeStore(Protocol):
    """Persistence collaborator for shape records."""

    def save(self, record: ShapeRecord) -> StoredShapeRecord: ...

    def list_by_owner(self, owner_id: str) -> Sequence[StoredShapeRecord]: ...


def process_assistant_reply(
    raw_text: str,
    owner_id: str,
    store: ShapeStore,
    *,
    user_request: Optional[str] = None,
) -> ProcessedReply:
    """Extract, materialize and persist the shapes requested in *raw_text*.

    *user_request* is the user's message that produced the reply; it is only
    consulted for the keyword fallback when the reply carries no directive.
    """
    owner_id = str(owner_id)
    directives: List[Directive] = extract_directives(raw_text)
    source = "directive"
    if not directives:
        directives = synthesize_fallback_shapes(user_request)
        if directives:
            source = "fallback"
            CANVAS_FALLBACK_TOTAL.inc()

    created: List[StoredShapeRecord] = []
    for directive in directives:
        record = materialize_shape(directive.type_identifier, directive.parameters, owner_id)
        if record is None:
            continue
        try:
            stored = store.save(record)
        except StorageError as e:
            log.error(
                "Failed to persist canvas shape",
                owner_id=owner_id,
                shape_type=record.type.value,
                error=str(e),
            )
            CANVAS_SHAPE_PERSIST_FAILURES.labels(shape_type=record.type.value).inc()
            continue
        CANVAS_SHAPES_CREATED.labels(shape_type=record.type.value, source=source).inc()
        created.append(stored)

    log.info(
        "Processed assistant reply",
        owner_id=owner_id,
        source=source,
        requested=len(directives),
        created=len(created),
    )
    return ProcessedReply(display_text=sanitize_reply(raw_text), created_shapes=created)
