import uvicorn

from codedpad.core.config import settings


def main():
    uvicorn.run("codedpad.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
