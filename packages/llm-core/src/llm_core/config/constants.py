"""Default values for provider clients."""

# Cloud (Gemini) defaults
DEFAULT_CLOUD_MODEL = "gemini-2.5-flash"
CLOUD_REQUEST_TIMEOUT = 120.0  # seconds
CLOUD_MAX_RETRIES = 3

# Local (Ollama) defaults
DEFAULT_LOCAL_HOST = "http://127.0.0.1:11434"
DEFAULT_LOCAL_MODEL = "gemma"
# Local models can take minutes to produce a full chapter.
LOCAL_REQUEST_TIMEOUT = 600.0  # seconds
LOCAL_CONNECT_TIMEOUT = 10.0
LOCAL_MAX_RETRIES = 2

# Backoff between retry attempts
RETRY_WAIT_MIN = 1.0
RETRY_WAIT_MAX = 60.0

# Prompt logging
PROMPT_PREVIEW_MAX_LENGTH = 500
