#!/usr/bin/env python3
"""
Startup script for the Gemify Personalization API.
"""

import logging

import uvicorn

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("Starting Gemify Personalization API...")
    print("API Documentation: http://localhost:8000/docs")
    print("Health Check: http://localhost:8000/health")
    print("\nPress CTRL+C to stop\n")

    uvicorn.run(
        "gemify.api.gemify_api:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
