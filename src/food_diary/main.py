"""Command-line entrypoint that serves the API with uvicorn."""

import os

import uvicorn


def main() -> None:
    """Run the ASGI app; PORT and HOST come from the environment."""
    uvicorn.run(
        "food_diary.api.asgi:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3001")),
    )


if __name__ == "__main__":
    main()
