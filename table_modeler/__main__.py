"""
Entry point for running the table modeler as a module.

Usage: python -m table_modeler <command> [options]
"""

from table_modeler.cli import app

if __name__ == "__main__":
    app()
