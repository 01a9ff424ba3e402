import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORE_PATH = os.getenv("STORE_PATH", "/var/lib/mess-system/store.json")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

BOOTSTRAP_ADMIN_USERNAME = os.getenv("BOOTSTRAP_ADMIN_USERNAME", "admin")
BOOTSTRAP_ADMIN_PASSWORD = os.getenv("BOOTSTRAP_ADMIN_PASSWORD", "please-set-BOOTSTRAP_ADMIN_PASSWORD")
BOOTSTRAP_TENANT_NAME = os.getenv("BOOTSTRAP_TENANT_NAME", "Main Mess")

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
