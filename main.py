import uvicorn

from league.main import app


if __name__ == "__main__":
    uvicorn.run("league.main:app", host="0.0.0.0", port=8000, reload=True)
