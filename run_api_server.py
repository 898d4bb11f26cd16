"""
FastAPI Server Startup Script
Run this to start the Invoice Tracker server
"""

import uvicorn

from invoice_tracker.config import get_settings


def main():
    """Start the FastAPI server"""
    settings = get_settings()
    host, port = settings.api_host, settings.api_port

    print("Starting Invoice Tracker server...")
    print(f"Server will run on: http://{host}:{port}")
    print(f"API Documentation: http://{host}:{port}/docs")
    print(f"Health Check: http://{host}:{port}/api/health")

    uvicorn.run(
        "invoice_tracker.main:app",
        host=host,
        port=port,
        reload=True,
        log_level="info",
        access_log=True
    )


if __name__ == "__main__":
    main()
