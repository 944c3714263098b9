#!/usr/bin/env python3
"""
Run script for the upload gate API
"""

from upload_gate.app import create_app
from upload_gate.config.settings import settings


def main():
    app = create_app()
    print("Starting upload gate API...")
    app.run(
        host=settings.host,
        port=settings.port,
        debug=False
    )


if __name__ == '__main__':
    main()
