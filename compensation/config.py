# compensation/config.py

import os
from dotenv import load_dotenv

# Get the base directory of the application
basedir = os.path.abspath(os.path.dirname(__file__))

# Loads the .env file from the project root, if present.
load_dotenv(os.path.join(basedir, '..', '.env'))


def _split_origins(raw):
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


class Config:
    """
    Configuration for the commission service: database, auth and logging.
    """
    # --- Database Settings ---
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'compensation.db')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- Secrets ---
    SECRET_KEY = os.environ.get('SECRET_KEY')
    # HS256 secret used to verify bearer tokens issued by Supabase Auth
    SUPABASE_JWT_SECRET = os.environ.get('SUPABASE_JWT_SECRET')

    # --- HTTP ---
    CORS_ORIGINS = _split_origins(
        os.environ.get('CORS_ORIGINS') or 'http://localhost:3000,http://127.0.0.1:3000'
    )

    # --- Logging ---
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # --- Commission Settings ---
    # Role whose members are included in the monthly earnings summary.
    REP_ROLE = os.environ.get('REP_ROLE') or 'REP'
    # Roles allowed to read commissions of other users.
    COMMISSION_READ_ALL_ROLES = ('FINANCE', 'ADMIN')


class TestConfig(Config):
    """Configuration used by the test-suite: in-memory database, fixed secret."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test-secret-key'
    SUPABASE_JWT_SECRET = 'test-jwt-secret'
    LOG_LEVEL = 'DEBUG'
