"""
asgi.py -- Production app assembly for RoleGate.

The ONLY place the app is built from the process environment. Importing
api.main has no side effects; tests build their own app with create_app().

Run with:  uvicorn asgi:app --reload
           python main.py serve
"""

from api.main import create_app

app = create_app()
