"""
tracer.py - AWS X-Ray トレーシング

init_tracer() を呼び出すと、X-Ray SDK がパッチ対象とするライブラリのうち
関数側でインストールされているもの（AWS SDK、HTTP クライアント等）の呼び出しが
自動的に X-Ray トレースの対象になる。本パッケージ自体はそれらに依存しない。

テスト時は環境変数 AWS_XRAY_SDK_ENABLED=false を設定することで無効化できる。
"""
from aws_xray_sdk.core import patch_all


def init_tracer():
    """
    X-Ray を初期化する。

    HandlerWrapper.wrap() からラップ時に1回だけ呼び出される。
    """
    patch_all()
