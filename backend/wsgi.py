# backend/wsgi.py
from tirepos import create_app

app = create_app()
