"""
Run the MediGuard API server

This script starts the FastAPI server for the MediGuard backend.
"""

import uvicorn

from mediguard.api.app import app
from mediguard.logging_config import configure_logging

if __name__ == "__main__":
    configure_logging()

    print("=" * 60)
    print("Starting MediGuard API Server")
    print("=" * 60)
    print("\nEndpoints:")
    print("  - Docs: http://localhost:8000/docs")
    print("  - Health: http://localhost:8000/health")
    print("\nProvider endpoints:")
    print("  - POST /api/provider/request")
    print("  - POST /api/provider/request/catalog")
    print("  - GET /api/provider/request/{request_id}/status")
    print("  - GET /api/provider/request/{request_id}/qrcode")
    print("  - POST /api/provider/verify")
    print("  - GET /api/provider/{provider_id}/audit")
    print("\nHospital endpoints:")
    print("  - POST /api/hospital/init")
    print("  - GET /api/hospital/{hospital_id}/public-key")
    print("  - POST /api/hospital/issue")
    print("\n" + "=" * 60)

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_config=None,
        access_log=True,
    )
