"""
decorator.py - Lambda ハンドララッパー

HandlerWrapper.wrap() / @lambda_bootstrap を提供する。
ハンドラをラップすることで、呼び出しごとに以下が自動的に行われる。

  1. invoked_function_arn からエイリアスを解決
  2. エイリアスに対応する設定をロード
  3. エイリアス・実行ID 付きのロガーを生成
  4. キープウォーム呼び出し（__LAMBDA_KEEP_WARM）ならハンドラを呼ばずに完了
  5. ハンドラを呼び出し、同期的な例外は callback 経由のエラーに変換

使い方:
    wrapper = HandlerWrapper("my-app")

    def handler(event, context, callback, ext):
        ext.logger.info({"alias": ext.alias}, "start")
        callback(None, {"statusCode": 200})

    lambda_handler = wrapper.wrap(handler, "my-function")

ハンドラには (event, context, callback, execution_context) が渡される。
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Optional

from lambda_wrapper.alias import resolve_alias
from lambda_wrapper.config import LambdaConfig, load_config
from lambda_wrapper.errors import InvalidArgumentError, UnhandledHandlerError
from lambda_wrapper.logger import LambdaLogger, LambdaLogHandle, LoggerProvider, now_ms
from lambda_wrapper.tracer import init_tracer

logger = logging.getLogger(__name__)

KEEP_WARM_FLAG = "__LAMBDA_KEEP_WARM"
EXECUTION_TIME_METRIC = "EXECUTION_TIME"
DEFAULT_LOG_LEVEL = "info"


@dataclass(frozen=True, eq=False)
class ExecutionContext:
    """ハンドラの第4引数として渡される呼び出し単位の情報。"""

    logger: LambdaLogHandle
    alias: str
    config: LambdaConfig

    @property
    def env(self) -> str:
        """alias と同じ値（後方互換のため残している）。"""
        return self.alias


@dataclass(frozen=True)
class HandlerFailure:
    """ハンドラ呼び出し境界で捕捉した失敗の内容。"""

    cause: BaseException
    message: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "HandlerFailure":
        # message 属性を持つ例外はそれを優先し、無ければ文字列化する
        message = getattr(exc, "message", None)
        if not isinstance(message, str):
            message = str(exc)
        return cls(cause=exc, message=message)


def _log_level(config: LambdaConfig) -> str:
    log_config = config.get("log")
    if isinstance(log_config, Mapping):
        level = log_config.get("level")
        if isinstance(level, str) and level:
            return level
    return DEFAULT_LOG_LEVEL


class HandlerWrapper:
    """
    Lambda ハンドラをラップし、設定・ロガーの初期化と例外処理を行う。

    Args:
        app_name: ハンドラを含むアプリケーション名（設定・ログの名前空間）
        logger_provider: ログバックエンド（省略時はプロセス共通のもの）
        config_loader: アプリ名から設定辞書を返す関数（省略時は load_config）
    """

    def __init__(self, app_name: str,
                 logger_provider: Optional[LoggerProvider] = None,
                 config_loader: Callable[[str], Mapping] = load_config):
        if not isinstance(app_name, str) or len(app_name) <= 0:
            raise InvalidArgumentError("app name", 1)

        self._app_name = app_name
        self._logger_provider = logger_provider
        self._config_loader = config_loader

    @property
    def app_name(self) -> str:
        return self._app_name

    def _init_config(self, alias: str) -> LambdaConfig:
        started = now_ms()
        config = LambdaConfig(self._app_name, alias, loader=self._config_loader)
        logger.debug("Configuration initialized (%s): [%d ms]", alias, now_ms() - started)
        return config

    def _init_logger(self, log_level: str, lambda_name: str, alias: str,
                     start_time: int) -> LambdaLogHandle:
        started = now_ms()
        lambda_logger = LambdaLogger(self._app_name, log_level, provider=self._logger_provider)
        handle = lambda_logger.get_logger(lambda_name, alias, start_time)
        logger.debug("Logger initialized (%s): [%d ms]", log_level, now_ms() - started)
        return handle

    def wrap(self, handler: Callable, lambda_name: str) -> Callable:
        """
        handler をラップした Lambda ハンドラを返す。

        Raises:
            InvalidArgumentError: handler が呼び出し可能でない、
                または lambda_name が空でない文字列でない場合
        """
        if not callable(handler):
            raise InvalidArgumentError("handler", 1)
        if not isinstance(lambda_name, str) or len(lambda_name) <= 0:
            raise InvalidArgumentError("lambda function name", 2)

        # ラップ時（コールドスタート時）に1回だけ実行
        init_tracer()

        @wraps(handler)
        def wrapper(event, context, callback=None) -> Any:
            start_time = now_ms()
            alias = resolve_alias(getattr(context, "invoked_function_arn", None))
            config = self._init_config(alias)
            log = self._init_logger(_log_level(config), lambda_name, alias, start_time)

            if isinstance(event, Mapping) and event.get(KEEP_WARM_FLAG):
                log.timespan(EXECUTION_TIME_METRIC)
                log.info("Keep warm invocation. Handler execution skipped.")
                if callback is not None:
                    callback(None)
                return None

            execution_context = ExecutionContext(logger=log, alias=alias, config=config)
            try:
                return handler(event, context, callback, execution_context)
            except Exception as exc:
                failure = HandlerFailure.from_exception(exc)
                log.error(failure.cause, "Unhandled error executing lambda")
                log.timespan(EXECUTION_TIME_METRIC)
                error = UnhandledHandlerError(failure.message)
                error.__cause__ = exc
                if callback is None:
                    # callback なしで呼ばれた場合（Python ランタイム）は例外として送出する
                    raise error
                callback(error)
                return None
        return wrapper


def lambda_bootstrap(app_name: str, lambda_name: Optional[str] = None):
    """
    HandlerWrapper(app_name).wrap() のデコレータ版。

    lambda_name 省略時は関数名を使用する。

    使い方:
        @lambda_bootstrap(app_name="my-app")
        def lambda_handler(event, context, callback, ext):
            ...
    """
    def decorator(func):
        return HandlerWrapper(app_name).wrap(func, lambda_name or func.__name__)
    return decorator
