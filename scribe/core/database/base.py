# File: scribe/core/database/base.py

from sqlalchemy.orm import declarative_base

# The shared registry. Jobs and transcription records inherit from this.
Base = declarative_base()
