"""
Vercel Serverless Function Entry Point

Every request under /api is routed here and handed to the FastAPI app
through Mangum. Lifespan events are disabled because each invocation is
short lived.
"""

import os
import sys
from pathlib import Path

# The function bundle is not pip-installed, so import from the checkout
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# A configured DATABASE_URL means the hosted PostgreSQL database
if os.environ.get("DATABASE_URL"):
    os.environ.setdefault("USE_SQLITE", "0")

from mangum import Mangum  # noqa: E402

from backend.main import app  # noqa: E402

handler = Mangum(app, lifespan="off")
