import uvicorn

from .config import HOST, PORT


def main():
    uvicorn.run("booking_api.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()
