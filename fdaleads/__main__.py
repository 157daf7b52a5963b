"""
Run the lead generation server: python -m fdaleads
"""
import uvicorn

from .config import HOST, PORT, LOG_LEVEL


def main():
    uvicorn.run("fdaleads.main:app", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
