APP_NAME = "JSON Lens"
APP_VERSION = "0.4.0"

RUNTIME_DIR_NAME = "JsonLens"
SETTINGS_FILENAME = "json_lens_settings.json"
LOG_FILENAME = "json_lens.log"
LOG_MAX_BYTES = 512 * 1024
LOG_BACKUP_COUNT = 2
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

FONT_SIZE_DEFAULT = 11
FONT_SIZE_MIN = 6
FONT_SIZE_MAX = 32
APP_THEME_DEFAULT = "DARK"
APP_THEMES = ("DARK", "LIGHT")

JSON_FILE_TYPES = (("JSON", "*.json"), ("All files", "*.*"))
OPEN_DIALOG_TITLE = "Open JSON document"
FILE_SELECTION_CANCELED = "File selection was canceled."

DEFAULT_SCHEMA_PLACEHOLDER = (
    "CREATE TABLE items (\n"
    "    id INT,\n"
    "    name VARCHAR(64),\n"
    "    price NUMERIC(10, 2)\n"
    ");"
)

# Substrings of a declared column type that mark the column as numeric.
NUMERIC_TYPE_MARKERS = ("int", "numeric", "decimal", "float", "double")

PRETTY_INDENT = 2
HIGHLIGHT_TAG = "finding_match"

STATUS_READY = "Open a JSON document to begin."
STATUS_DOCUMENT_READY = "Document loaded. Choose an analysis."
STATUS_OPENING = "Opening document..."
STATUS_SCANNING_EMPTY = "Scanning for empty values..."
STATUS_SCANNING_NUMERIC = "Validating numeric fields..."
