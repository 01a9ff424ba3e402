import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# JSON document holding every tenant's state
STORE_PATH = os.getenv("STORE_PATH", "data/mess_store.json")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Seed account written when the store file does not exist yet
BOOTSTRAP_ADMIN_USERNAME = os.getenv("BOOTSTRAP_ADMIN_USERNAME", "admin")
BOOTSTRAP_ADMIN_PASSWORD = os.getenv("BOOTSTRAP_ADMIN_PASSWORD", "admin")
BOOTSTRAP_TENANT_NAME = os.getenv("BOOTSTRAP_TENANT_NAME", "Main Mess")

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
