import os

import uvicorn


def main():
    uvicorn.run(
        "card_api.app:app",
        host=os.getenv("CARDS_HOST", "127.0.0.1"),
        port=int(os.getenv("CARDS_PORT", "8000")),
        log_config=None,  # keep the handlers set up by logger_config
    )


if __name__ == "__main__":
    main()
