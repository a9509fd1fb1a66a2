"""
Configuration constants for the target-seeking rover.

Fixed values only. Anything worth tuning on the arena lives in params.py.
"""

# =============================================================================
# HARDWARE PORTS
# =============================================================================

# ESP32 (motor + steering servo controller)
ESP32_PORT = "/dev/ttyUSB0"
ESP32_BAUDRATE = 115200

# Overhead camera (USB)
CAMERA_INDEX = 0
CAMERA_WIDTH = 640
CAMERA_HEIGHT = 480

# =============================================================================
# ACTUATORS
# =============================================================================

SPEED_MIN = -100
SPEED_MAX = 100

STEERING_MIN = 0
STEERING_MAX = 180
STEERING_CENTER = 90  # Servo center position (0-180)

# ESP32 stops the motor if no command arrives within its watchdog window
KEEPALIVE_INTERVAL = 0.02  # s

# =============================================================================
# NAVIGATION
# =============================================================================

CAR_COLOR = "red"
TARGET_COLOR = "green"

TURN_TOLERANCE_DEG = 10.0
TURN_PULSE_S = 0.5

# =============================================================================
# CAMERA / COLOR DETECTION (HSV ranges for OpenCV)
# =============================================================================

MARKER_COLORS = ("red", "green")

# Minimum contour area to detect (pixels)
MIN_CONTOUR_AREA = 300

# =============================================================================
# WEB INTERFACE
# =============================================================================

WEB_HOST = "0.0.0.0"
WEB_PORT = 8080
