import os

# Cheap hashes for the test run; must be set before smartrooms.config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
