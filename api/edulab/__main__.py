import uvicorn

from edulab.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "edulab.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
