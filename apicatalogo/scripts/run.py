"""Main entry point for API Catálogo."""

import os

import uvicorn


def main() -> None:
    """Run the API with uvicorn."""
    port = int(os.getenv("BIND_PORT", "5000"))
    host = os.getenv("BIND_HOST", "127.0.0.1")

    uvicorn.run(
        "apicatalogo.main:app",
        host=host,
        port=port,
        reload=False,
    )


if __name__ == "__main__":
    main()
