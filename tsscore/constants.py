"""Protocol constants shared by the sensor API."""

MAX_CMD_LEN = 4096
MAX_SETTINGS_KEY_LEN = 50

NUM_STREAM_SLOTS = 16

BINARY_START_BYTE = 0xF7
BINARY_HEADER_START_BYTE = 0xF9

BINARY_READ_SETTINGS_START_BYTE = 0xFA
BINARY_WRITE_SETTINGS_START_BYTE = 0xFB
BINARY_READ_SETTINGS_HEADER_START_BYTE = 0xFC
BINARY_WRITE_SETTINGS_HEADER_START_BYTE = 0xFD

BINARY_SETTINGS_ID_SIZE = 4
BINARY_READ_SETTINGS_ID = 0xC695B5E1
BINARY_WRITE_SETTINGS_ID = 0x822AAE18

BINARY_WRITE_SETTING_RESPONSE_LEN = 3
BINARY_WRITE_SETTING_WITH_HEADER_RESPONSE_LEN = (
    BINARY_SETTINGS_ID_SIZE + BINARY_WRITE_SETTING_RESPONSE_LEN
)

SETTING_SEPARATOR = ";"
SETTING_KEY_ERR_STRING = "<KEY_ERROR>"
SETTING_KEY_ERR_STRING_LEN = len(SETTING_KEY_ERR_STRING)

FILE_STREAMING_MAX_PACKET_SIZE = 512
LOG_STREAMING_MAX_PACKET_SIZE = 2048

# Header, the message itself and the trailing "\r\n".
DEBUG_MESSAGE_MAX_SIZE = 65 + 255 + 2

DEBUG_LEVEL_ERROR = 0x01
DEBUG_LEVEL_WARNING = 0x02
DEBUG_LEVEL_INFO = 0x04

OUTPUT_MODE_ASCII = 1
OUTPUT_MODE_BINARY = 2

LOG_START_EVENT_BUTTON = 0
LOG_START_EVENT_ACCEL = 1
LOG_START_EVENT_COMMAND_ONLY = 2
LOG_START_EVENT_GPS_FIX = 3
LOG_START_EVENT_ON_POWER = 4

LOG_STOP_EVENT_BUTTON = 0
LOG_STOP_EVENT_ACCEL = 1
LOG_STOP_EVENT_COMMAND_ONLY = 2
LOG_STOP_EVENT_DURATION = 3
LOG_STOP_EVENT_CAPTURE_COUNT = 4
LOG_STOP_EVENT_PERIOD = 5

LOG_STYLE_CONTINUOUS = 0
LOG_STYLE_PERIODIC = 1

LOG_FOLDER_MODE_SESSION = 0
LOG_FOLDER_MODE_DATETIME = 1

LOG_FILE_MODE_APPEND = 0
LOG_FILE_MODE_NEW = 1

LOG_DATA_MODE_ASCII = OUTPUT_MODE_ASCII
LOG_DATA_MODE_BINARY = OUTPUT_MODE_BINARY

LOG_IMMEDIATE_OUTPUT_HEADER_MODE_MATCH = 0
LOG_IMMEDIATE_OUTPUT_HEADER_MODE_ASCII = OUTPUT_MODE_ASCII
LOG_IMMEDIATE_OUTPUT_HEADER_MODE_BINARY = OUTPUT_MODE_BINARY

STREAMING_DATA_BATCH_COMMAND_NUM = 84
STREAMING_FILE_READ_BYTES_COMMAND_NUM = 177