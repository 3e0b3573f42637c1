"""アプリケーションエントリーポイント"""

from app.core.app_factory import create_app
from app.core.monitoring import init_monitoring

# 監視ツールはアプリ生成前に初期化する
init_monitoring()

app = create_app()
