"""Secure Storage Meta information.
   Secure Storage keeps application secrets encrypted at rest
   on the local filesystem.
"""
__title__ = 'secure_storage'
__description__ = (
   'Secure Storage keeps desktop application secrets (tokens, API keys) '
   'encrypted at rest on the local filesystem.'
)
__version__ = '0.3.0'
__copyright__ = 'Copyright (c) 2025'
__author__ = 'Secure Storage Developers'
__license__ = 'Apache-2.0'
