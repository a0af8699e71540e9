#!/usr/bin/env python3
"""
Convenience script to run the FastAPI server.
"""

import uvicorn
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from app.config import settings  # noqa: E402

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
