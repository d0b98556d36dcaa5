from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Request, Response

TOKENS_TOTAL = Counter(
    "ai_cofounder_tokens_total",
    "Count of prompt + completion tokens sent to the OpenAI API",
    ["model", "phase"],
)

CHAT_COMPLETIONS_TOTAL = Counter(
    "ai_cofounder_chat_completions_total",
    "Chat completion calls by outcome",
    ["outcome"],  # ok | error | unconfigured
)

CANVAS_DIRECTIVES_TOTAL = Counter(
    "ai_cofounder_canvas_directives_total",
    "Canvas directives seen in assistant replies",
    ["outcome"],  # parsed | malformed | unknown_type | invalid
)

CANVAS_SHAPES_CREATED = Counter(
    "ai_cofounder_canvas_shapes_created_total",
    "Shape records persisted from assistant replies",
    ["shape_type", "source"],  # source: directive | fallback
)

CANVAS_SHAPE_PERSIST_FAILURES = Counter(
    "ai_cofounder_canvas_shape_persist_failures_total",
    "Shape records that could not be stored",
    ["shape_type"],
)

CANVAS_FALLBACK_TOTAL = Counter(
    "ai_cofounder_canvas_fallback_total",
    "Replies where heuristic fallback shapes were synthesized",
)


def metrics_endpoint(request: Request):
    """FastAPI route handler for /metrics (scraped by Prometheus)."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
