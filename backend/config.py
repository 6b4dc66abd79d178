import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///civrelay.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # New passwords shorter than this are rejected
    MIN_PASSWORD_LENGTH = int(os.environ.get('MIN_PASSWORD_LENGTH', '6'))
    # Socket.IO namespace carrying the chat protocol
    CHAT_NAMESPACE = os.environ.get('CHAT_NAMESPACE', '/chat')
    # Comma separated list of origins allowed for CORS and Socket.IO
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
