# backend/wsgi.py
from harierp import create_app

app = create_app()
