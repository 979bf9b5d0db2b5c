"""Run the API server: python -m tripnote"""

import os


def main():
    import uvicorn

    uvicorn.run(
        app="tripnote.api.app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
