"""管理画面向けCORSミドルウェア"""

from typing import Any, Sequence

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send


class AdminCORSMiddleware(CORSMiddleware):
    """
    指定したパス以外にCORSMiddlewareを適用する

    日次バックアップのトリガーは任意のオリジンからのプリフライトに
    自前のCORSヘッダーで応答するため、許可オリジンの判定から外す。

    Args:
        app: ASGIアプリケーション
        exclude_paths: CORS処理を行わないパスのプレフィックス
        **options: CORSMiddlewareのオプション
    """

    def __init__(
        self, app: ASGIApp, exclude_paths: Sequence[str] = (), **options: Any
    ) -> None:
        super().__init__(app, **options)
        self.exclude_paths = tuple(exclude_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].startswith(self.exclude_paths):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)
