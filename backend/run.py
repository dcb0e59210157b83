#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.
For local development only - reloads on code changes.
"""
import os
import sys
from pathlib import Path

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Starting studio booking API at http://localhost:{port}")
    print(f"API Docs: http://localhost:{port}/docs")

    uvicorn.run("app.main:app", host="0.0.0.0", port=port, reload=True, log_level="info")
