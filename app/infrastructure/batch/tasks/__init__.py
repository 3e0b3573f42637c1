"""バッチタスク（インポート時にレジストリへ登録される）"""

from . import backup  # noqa: F401
