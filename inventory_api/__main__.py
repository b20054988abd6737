# inventory_api/__main__.py

"""
Runs the Inventory API under uvicorn.
A failed startup (lifespan) makes uvicorn exit with a non-zero status.
uvicorn stops accepting connections on SIGINT/SIGTERM and lets in-flight
requests finish before the lifespan shutdown closes the pool.
"""
import os

import uvicorn

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))


def main():
    uvicorn.run("inventory_api.main:app", host=HOST, port=PORT, lifespan="on")


if __name__ == "__main__":
    main()
