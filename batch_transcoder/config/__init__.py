"""
Configuration Package for the Batch Transcoder.

This package centralizes the static configuration settings for the application.
Keeping them apart from the encoding logic makes it possible to adjust extension
lists, engine names and quality tables without touching the drivers.

This package includes settings for:
- Video, audio and image file identification (extension allow-lists).
- Engine-level parameters such as the null sink and engine environment.
- Common application settings like the logging format.
- User-overridable settings loaded from `config.user.yaml`.
"""
