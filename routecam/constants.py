"""All magic values live here — no inline literals anywhere else."""

# Telegram typing indicator re-send interval (seconds).
# The TYPING action expires after ~5 s, so we refresh every 4 s.
TELEGRAM_TYPING_INTERVAL: float = 4.0

# Image normalization
DEFAULT_TARGET_WIDTH = 512
DEFAULT_JPEG_QUALITY = 80
MIN_JPEG_QUALITY = 1
MAX_JPEG_QUALITY = 95
JPEG_FORMAT = "JPEG"
JPEG_MEDIA_TYPE = "image/jpeg"
DATA_URI_PREFIX = f"data:{JPEG_MEDIA_TYPE};base64,"
IMAGE_DETAIL = "low"

# Analysis backends
OPENAI_ANALYSIS_MODEL = "gpt-4o-mini"
CLAUDE_ANALYSIS_MODEL = "claude-sonnet-4-5-20250929"
CLAUDE_MAX_TOKENS = 1024
DEFAULT_REQUEST_TIMEOUT = 60
MSG_NO_DESCRIPTION = "No description available."

# Prompt
DEFAULT_ROUTE_COLOR = "blue"
SYSTEM_PROMPT = (
    "I will give a photo from bouldering and the color of the grips of the target route. "
    "Provide a short evaluation of the route, containing main challenge, secondary challenge "
    "and an international bouldering grade.\n"
    "\n"
    "Evaluate bouldering route by strength, grip, stamina, legs, balance, psychology. "
    "Based on this evaluation provide a main and secondary challenge for the route.\n"
    "\n"
    "For the route grades use The Bouldering V Scale (a.k.a the Vermin Scale). "
    "The V Scale spans from Beginner (V0-V3) to Elite (V17)."
)
USER_DIRECTIVE = "Analyze the {color} route from the picture below."

# Log / user-facing messages
MSG_BOT_STARTING = "Starting route analyzer bot…"
MSG_BLOCKED_CHAT = "Blocked update from chat_id: %s"
MSG_CAPTURE_FAILED = "Error capturing photo: %s"
MSG_IMAGE_FAILED = "Error processing photo: %s"
MSG_ANALYSIS_FAILED = "Analysis error: %s"
MSG_ANALYSIS_TIMEOUT = "Analysis timed out after %ss — try again"
MSG_ANALYSIS_CANCELLED = "Analysis cancelled."
MSG_BUSY = "Still analyzing the previous photo — wait for the result or send /cancel."
MSG_NOTHING_TO_CANCEL = "Nothing to cancel."
MSG_CANCELLING = "Cancelling…"
MSG_CYCLE_DONE = "✓ Capture cycle finished (%.1fs)"
MSG_CYCLE_FAILED = "✗ Capture cycle failed (%.1fs): %s"
MSG_SEND_FAIL = "Telegram send_message failed: %s"

CMD_START = "start"
CMD_HELP = "help"
CMD_CANCEL = "cancel"
CMD_STATUS = "status"

MSG_STATUS = (
    "Status\n"
    "  State        : %s\n"
    "  Model        : %s\n"
    "  Target width : %dpx\n"
    "  JPEG quality : %d\n"
    "  Route colour : %s\n"
)

MSG_HELP = (
    "routecam — bouldering route analyzer\n"
    "\n"
    "Send a photo of the wall and get back the main and secondary challenge\n"
    "of the route plus a V Scale grade.\n"
    "\n"
    "Media:\n"
    "  Photo                    — analyze the default-colour route\n"
    "  Photo + caption          — caption names the route colour (e.g. \"yellow\")\n"
    "\n"
    "Commands:\n"
    "  /help                    — show this message\n"
    "  /status                  — current state and config at a glance\n"
    "  /cancel                  — abort the analysis in progress\n"
)
