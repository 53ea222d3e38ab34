# funcbind/__main__.py
"""
Entry point for funcbind.
"""
from funcbind.cli import app

if __name__ == "__main__":
    app()
