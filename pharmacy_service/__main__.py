# pharmacy_service/__main__.py
import uvicorn

from pharmacy_service.config import Settings


def main():
    settings = Settings.from_env()
    uvicorn.run(
        "pharmacy_service.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
