"""
Services Package

Contains:
- storage: SQLite persistence gateway
- notifications: cleaning reminder scheduling
- photos: item photo files
- importer: plain-text item import
"""
