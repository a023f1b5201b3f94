import uvicorn

from planner.app_factory import create_app

# python -m uvicorn planner.main:app --reload --host 0.0.0.0 --port 8000

app, service = create_app()


if __name__ == "__main__":
    uvicorn.run("planner.main:app", port=8080, host="0.0.0.0", reload=True)
