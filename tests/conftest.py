import os

os.environ.setdefault("ENV", "test")

pytest_plugins = [
    "tests.fixtures.connection_fixtures",
    "tests.fixtures.message_fixtures",
]
