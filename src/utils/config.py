# runtime settings, each overridable through an environment variable
import os

# JSON list of {"username": ..., "password": ...}, read once at startup
USERS_PATH = os.getenv("POS_USERS_PATH", "data/users.json")

# number the order summary is sent to through https://wa.me/
WHATSAPP_PHONE = os.getenv("POS_WHATSAPP_PHONE", "+584129997266")

BUYERS = [
    b.strip()
    for b in os.getenv("POS_BUYERS", "John Doe,Jane Smith,Peter Jones").split(",")
    if b.strip()
]

# directory the import file picker opens in
IMPORT_DIR = os.getenv("POS_IMPORT_DIR", ".")

# when set, log records go to this file instead of the textual devtools console
LOG_FILE = os.getenv("POS_LOG_FILE", "")

DEBUG = bool(os.getenv("DEBUG"))
