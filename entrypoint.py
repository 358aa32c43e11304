"""Server entrypoint. Starts uvicorn with host and port from env."""
import os
import uvicorn

# Import app directly so uvicorn does not need the package on its import path.
from fincore.main import app


def main() -> None:
    host = os.environ.get("FINCORE_HOST", "127.0.0.1")
    port = int(os.environ.get("FINCORE_PORT", "8080"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
