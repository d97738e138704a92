# backend/canvas_notion_sync/storage/store.py

"""
非同期キーバリューストアのインターフェースと、開発・テスト用のインメモリ実装。

本番のストレージ実装（ブラウザ拡張の storage 等）はこのパッケージの外側にあり、
KeyValueStore プロトコルを満たすものであれば差し替え可能。
"""

from typing import Any, Dict, Mapping, Optional, Protocol, Sequence


class KeyValueStore(Protocol):
    """
    キーバリューストアのインターフェース。

    get / set の 2 操作だけを要求する。
    """

    async def get(self, keys: Sequence[str]) -> Dict[str, Any]:
        """指定したキーのうち存在するものだけを辞書で返す。"""

    async def set(self, entries: Mapping[str, Any]) -> None:
        """entries の内容をまとめて書き込む。"""


class InMemoryKeyValueStore:
    """
    プロセス内の dict をバックエンドにしたストア。

    - 永続化は行わない（プロセス再起動で消える）
    - 単一スレッドの asyncio 前提なのでロックは持たない
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    async def get(self, keys: Sequence[str]) -> Dict[str, Any]:
        return {key: self._data[key] for key in keys if key in self._data}

    async def set(self, entries: Mapping[str, Any]) -> None:
        self._data.update(entries)
