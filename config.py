# ============================================================================
# CONFIGURATION
# ============================================================================

MAGIC_BYTE_1 = 0xAD
MAGIC_BYTE_2 = 0xDA

# Device settings
DEFAULT_LED_COUNT = 60
DEFAULT_BAUD_RATE = 115200
DEFAULT_WEBSOCKET_PORT = 81
DEFAULT_IP = "192.168.4.1"
DEFAULT_BRIGHTNESS = 255

# Sampling settings
DEFAULT_SAMPLE_COUNT = 40
MAX_SAMPLE_COUNT = 500  # Slider range only, not a hard limit

# Smoothing settings
DEFAULT_SMOOTHING = 20
MAX_SMOOTHING = 50  # Slider range only
DEFAULT_THRESHOLD = 150
MAX_COLOR_DIFFERENCE = 1020  # 255 per RGBA channel

# Capture settings
DEFAULT_FPS = 30
CAPTURE_WIDTH = 160

# Print a status line every N frames
LOG_EVERY_FRAMES = 30

# Settings file path
SETTINGS_FILE = "screen_glow_config.json"
