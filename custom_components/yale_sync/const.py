"""Constants for yale_sync."""

from typing import Final

DOMAIN = "yale_sync"
PLATFORM_NAME = "YaleSync"

CONF_REFRESH_INTERVAL = "refresh_interval"

DEFAULT_NAME = "Yale Alarm"
DEFAULT_REFRESH_INTERVAL = 10

DATA_COORDINATOR = "coordinator"
DATA_HUB = "hub"

MANUFACTURER = "Yale"
PANEL_MODEL = "Yale IA-320"
MOTION_SENSOR_MODEL = "PIR Motion Sensor"
CONTACT_SENSOR_MODEL = "Door Contact"

API_BASE: Final = "https://mob.yalehomesystem.co.uk/yapi"
TOKEN_PATH: Final = "/o/token/"
PANEL_MODE_PATH: Final = "/api/panel/mode/"
PANEL_CYCLE_PATH: Final = "/api/panel/cycle/"
DEVICE_STATUS_PATH: Final = "/api/panel/device_status/"
BASIC_AUTH_B64: Final = (
    "VnVWWDZYVjlXSUNzVHJhcUVpdVNCUHBwZ3ZPakxUeXNsRU1LUHBjdTpkd3RPbE15WEtENUJ5ZW1GWH"
    "V0am55eGhrc0U3V0ZFY2p0dFcyOXRaSWNuWHlSWHFsWVBEZ1BSZE1xczF4R3VwVTlxa1o4UE5ubGlQ"
    "anY5Z2hBZFFtMHpsM0h4V3dlS0ZBcGZzakpMcW1GMm1HR1lXRlpad01MRkw3MGR0bmNndQ=="
)
PANEL_AREA = 1
REQUEST_TIMEOUT = 25

DEVICE_TYPE_MOTION = "device_type.pir"
DEVICE_TYPE_CONTACT = "device_type.door_contact"
DEVICE_STATUS_CONTACT_OPEN = "device_status.dc_open"
DEVICE_STATUS_CONTACT_CLOSED = "device_status.dc_close"
DEVICE_STATUS_MOTION_TRIGGERED = "device_status.pir_triggered"
