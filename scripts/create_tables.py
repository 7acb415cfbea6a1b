"""Create database tables. Run from project root: python3 scripts/create_tables.py"""
import sys
from pathlib import Path

from dotenv import load_dotenv

_root = Path(__file__).resolve().parent.parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

# Load .env from project root first so DB_* / DATABASE_URL are set before app imports
load_dotenv(_root / ".env")

from survey_api import create_app
from survey_api.models import db

app = create_app()
with app.app_context():
    db.create_all()
    print("Tables created:", ", ".join(sorted(db.metadata.tables)))
