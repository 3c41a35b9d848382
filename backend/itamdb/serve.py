# backend/itamdb/serve.py
"""
Process entrypoint: `python -m itamdb.serve` or the `itamdb-serve` script.

Runs a single uvicorn process; every request gets its own session from the
shared pool in `itamdb.database`.
"""

import os

import uvicorn

_TRUTHY = {"1", "true", "yes", "on"}


def main() -> None:
    uvicorn.run(
        "itamdb.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() in _TRUTHY,
        log_level=os.getenv("LOG_LEVEL", "info"),
        proxy_headers=True,
        forwarded_allow_ips=os.getenv("FORWARDED_ALLOW_IPS", "*"),
        # Let in-flight requests finish their transactions on shutdown.
        timeout_graceful_shutdown=int(os.getenv("GRACEFUL_SHUTDOWN_SEC", "30")),
    )


if __name__ == "__main__":
    main()
