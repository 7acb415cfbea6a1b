"""Run the Flask development server."""
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (directory containing run.py)
_env = Path(__file__).resolve().parent / ".env"
load_dotenv(_env)

from survey_api import create_app

app = create_app()

if __name__ == "__main__":
    app.run(
        host="0.0.0.0",
        port=app.config["PORT"],
        debug=app.config["DEBUG"],
    )
