#!/usr/bin/env python3
"""
Development startup script for the Tunei API
"""
import os
import subprocess


def main():
    os.chdir(os.path.dirname(os.path.abspath(__file__)))

    # Set development environment
    os.environ.setdefault('ENVIRONMENT', 'development')
    port = os.environ.setdefault('PORT', '8000')

    # Start FastAPI with hot reload
    subprocess.run([
        'uvicorn',
        'tunei.main:app',
        '--host', '0.0.0.0',
        '--port', port,
        '--reload'
    ])

if __name__ == "__main__":
    main()
