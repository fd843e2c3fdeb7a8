"""
Entry point for running the API with `python -m backend`.
"""
import uvicorn

if __name__ == "__main__":
    uvicorn.run("backend.main:create_app", factory=True, host="0.0.0.0", port=8001)
