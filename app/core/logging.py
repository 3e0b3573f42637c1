"""アプリケーション用のロギングユーティリティ。"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def is_fastapi_context() -> bool:
    """
    FastAPI/uvicornコンテキストで実行中かどうかを判定する。

    Returns:
        bool: uvicornがロードされている場合True
    """
    return "uvicorn" in sys.modules


def get_logger(name: str) -> logging.Logger:
    """
    ロガーインスタンスを取得する。

    uvicorn上（APIサーバー・スケジューラー）では"uvicorn"ロガーを使い、
    サーバーのログと同じ出力先・フォーマットにそろえる。
    CLIなどそれ以外ではモジュール名のロガーを返す。

    Args:
        name: ロガー名（通常は__name__）

    Returns:
        logging.Logger: ロガー
    """
    if is_fastapi_context():
        return logging.getLogger("uvicorn")
    return logging.getLogger(name)


def configure_cli_logging(verbose: bool = False) -> None:
    """
    CLI実行時のログ出力を設定する。

    uvicornのハンドラーがない環境では、モジュールロガーの出力先を標準エラーにする。

    Args:
        verbose: TrueならDEBUG、FalseならINFO以上を出力
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    # HTTPクライアントのリクエストログは抑制する
    logging.getLogger("httpx").setLevel(logging.WARNING)
