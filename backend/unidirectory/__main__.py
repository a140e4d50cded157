"""Run the API server: ``python -m unidirectory`` or ``unidirectory``"""
import uvicorn

from unidirectory.core.config import settings


def main() -> None:
    uvicorn.run(
        "unidirectory.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG
    )


if __name__ == "__main__":
    main()
