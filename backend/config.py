# backend/config.py
import os
from dotenv import load_dotenv

# Tentukan path absolut dari direktori root proyek
basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))

class Config:
    """Set Flask configuration from environment variables."""

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL', 'sqlite:///' + os.path.join(basedir, 'lembar_kerja.db')
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Frontend yang boleh mengakses /api/*
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', 'http://localhost:3000').split(',') if o.strip()]

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
