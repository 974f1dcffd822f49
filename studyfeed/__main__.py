"""
Run the API server: python -m studyfeed
"""

import uvicorn

from .config import config

if __name__ == "__main__":
    uvicorn.run("studyfeed.server:app", port=config.PORT, log_level=config.LOG_LEVEL.lower())
