"""
Vercel Serverless Entry Point

Vercel routes every request under /api/* to this file; the commission
blueprint and /api/health are served by the Flask app created here.
"""

from compensation import create_app

# @vercel/python detects the WSGI app by the name 'app'
app = create_app()
