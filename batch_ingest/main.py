"""Main entry point for the batch ingest service.

Initializes the FastAPI app and makes it runnable standalone.

Usage:
    Development: uvicorn batch_ingest.main:app --reload --port 3000
    Production: uvicorn batch_ingest.main:app --host 0.0.0.0 --port 3000

Progress lives in process memory, so run a single worker per deployment.
"""

from batch_ingest.api import create_app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "batch_ingest.main:app",
        host="0.0.0.0",
        port=3000,
        reload=True,
        log_level="info",
    )
