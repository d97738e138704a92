# backend/canvas_notion_sync/auth/__init__.py

"""
認証情報の読み出しモジュール。

- credentials: Credential モデルと CredentialAccessor
"""

from .credentials import Credential, CredentialAccessor  # noqa: F401
