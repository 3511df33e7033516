#!/usr/bin/env python3
"""Run script for usersvc."""

import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "usersvc.api.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
