# streamlit_app.py
"""Launcher: `streamlit run streamlit_app.py`."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from src.ui import app  # noqa: E402

if __name__ == "__main__":
    app  # Import triggers Streamlit execution
