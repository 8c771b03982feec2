"""Root pytest configuration for all tests."""

import logging

# notion-client and httpx log every request at DEBUG/INFO; keep test output
# limited to warnings from third-party libraries.
logging.getLogger("notion_client").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("PIL").setLevel(logging.WARNING)
