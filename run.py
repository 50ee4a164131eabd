#!/usr/bin/env python3
"""
Run script for the MyVoice Studio API
"""
import uvicorn

from myvoice.config.settings import settings
from myvoice.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
