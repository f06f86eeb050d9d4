"""Console entry point serving the API with uvicorn."""
import uvicorn

from naver_rank.config import settings


def main() -> None:
    uvicorn.run(
        "naver_rank.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
