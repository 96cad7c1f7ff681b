"""
errors.py - ラッパー共通の例外クラス

セットアップ時（HandlerWrapper 生成・wrap() 呼び出し時）の引数エラーと、
呼び出し時にハンドラから送出された未処理例外を表す例外を定義する。
"""
from typing import Optional


class LambdaWrapperError(Exception):
    """本パッケージが送出する例外の基底クラス。"""


class InvalidArgumentError(LambdaWrapperError, ValueError):
    """
    不正な引数が指定された場合に送出される。

    メッセージは "Invalid <name> specified (arg #<position>)" 形式。
    """

    def __init__(self, name: str, position: int, message: Optional[str] = None):
        self.name = name
        self.position = position
        super().__init__(message or f"Invalid {name} specified (arg #{position})")


class InvalidInvocationArgumentError(InvalidArgumentError):
    """ロガー生成・設定ロードの引数規約に違反した場合に送出される。"""


class UnhandledHandlerError(LambdaWrapperError):
    """ラップ対象のハンドラが同期的に例外を送出した場合に生成される。"""

    PREFIX = "[Error] Unhandled error executing lambda. Details: "

    def __init__(self, details: str):
        self.details = details
        super().__init__(f"{self.PREFIX}{details}")

    @property
    def message(self) -> str:
        return str(self)
