# configuration: constants, overridable through the environment (or a .env file)

import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

# connection
DB_HOST = os.getenv("CAFE_DB_HOST", "localhost").strip()
DB_DRIVER = os.getenv("CAFE_DB_DRIVER", "postgresql+psycopg2").strip()
# full url override, e.g. sqlite:///cafe.db
DATABASE_URL = os.getenv("CAFE_DATABASE_URL")

# logging
LOG_DIR = os.getenv("CAFE_LOG_DIR", os.path.expanduser("~/.cafe/logs"))
LOG_LEVEL = os.getenv("CAFE_LOG_LEVEL", "INFO").upper()

# ordering
FIRST_ORDER_ID = 90002
ORDER_SENTINEL = "0"
NEW_ITEM_STATUS = "Hasn't Started"
UNPAID_WINDOW = timedelta(days=1)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
