"""Streamlit entry point for RetailIntel.

Run from the repository root: ``streamlit run streamlit_app.py``.
"""

from frontend.dashboard import main

main()
