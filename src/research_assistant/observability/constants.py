"""Constants for observability layer."""

# HTTP header for correlation ID propagation
CORRELATION_ID_HEADER = "X-Correlation-ID"

# Service identifier for logs
SERVICE_NAME = "research-assistant"


# Log event names following the pattern: {domain}.{action}.{result}
class LogEvents:
    """Standardized log event names."""

    # Chat events
    CHAT_REQUEST_STARTED = "chat.request.started"
    CHAT_CONFIG_MISSING = "chat.config.missing"

    # Retrieval events
    CHAT_RETRIEVAL_STARTED = "chat.retrieval.started"
    CHAT_RETRIEVAL_COMPLETED = "chat.retrieval.completed"
    CHAT_RETRIEVAL_FAILED = "chat.retrieval.failed"

    # Adapter events
    ADAPTER_SEARCH_COMPLETED = "adapter.search.completed"
    ADAPTER_SEARCH_FAILED = "adapter.search.failed"
    ADAPTER_SEARCH_TIMEOUT = "adapter.search.timeout"
    ADAPTER_SEARCH_FALLBACK = "adapter.search.fallback"
    ADAPTER_SEARCH_SKIPPED = "adapter.search.skipped"

    # Generation events
    CHAT_GENERATION_STARTED = "chat.generation.started"
    CHAT_GENERATION_COMPLETED = "chat.generation.completed"
    CHAT_GENERATION_FAILED = "chat.generation.failed"

    # SSE streaming events
    SSE_STREAM_STARTED = "sse.stream.started"
    SSE_STREAM_COMPLETED = "sse.stream.completed"
    SSE_STREAM_FAILED = "sse.stream.failed"
    SSE_STREAM_CANCELLED = "sse.stream.cancelled"

    # Model events
    MODEL_QUERY_STARTED = "model.query.started"
    MODEL_QUERY_COMPLETED = "model.query.completed"
    MODEL_QUERY_FAILED = "model.query.failed"
    MODEL_STREAM_FRAMES_SKIPPED = "model.stream.frames_skipped"

    # Summary events
    SUMMARY_COMPLETED = "summary.generate.completed"
    SUMMARY_FAILED = "summary.generate.failed"

    # Session store events
    SESSION_SAVED = "session.save.completed"
    SESSION_LOAD_FAILED = "session.load.failed"
    SESSION_APPEND_FAILED = "session.append.failed"

    # Request lifecycle events
    REQUEST_STARTED = "request.started"
    REQUEST_COMPLETED = "request.completed"
    REQUEST_FAILED = "request.failed"


# Fields that should be redacted in logs
SENSITIVE_FIELDS = frozenset({
    # Authentication
    "password",
    "secret",
    "secret_key",
    "private_key",
    # Tokens
    "token",
    "access_token",
    "api_key",
    "apikey",
    "api_secret",
    "bearer",
    "authorization",
    "auth",
    # Provider credentials
    "fireworks_api_key",
    "tavily_api_key",
    "github_token",
})

# Fields to redact (case-insensitive patterns)
SENSITIVE_FIELD_PATTERNS = frozenset({
    "password",
    "secret",
    "token",
    "key",
    "credential",
    "auth",
})

# Request headers that carry credentials (client auth or forwarded provider keys)
SENSITIVE_HEADERS = frozenset({
    "authorization",
    "proxy-authorization",
    "cookie",
    "x-api-key",
    "x-auth-token",
})

# Redaction placeholder
REDACTED_VALUE = "[REDACTED]"
