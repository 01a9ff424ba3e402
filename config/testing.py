import os

SECRET_KEY = "test-secret"

# None keeps the document in memory
STORE_PATH = os.getenv("STORE_PATH") or None

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

BOOTSTRAP_ADMIN_USERNAME = "admin"
BOOTSTRAP_ADMIN_PASSWORD = "admin"
BOOTSTRAP_TENANT_NAME = "Main Mess"

SESSION_DAYS = 1
