"""
logger.py - 構造化ログ出力

Lambda 共通の構造化ログ（JSON形式、1レコード1行）を提供する。
CloudWatch Logs Insights での横断検索を容易にするため、
全 Lambda で統一されたフォーマットでログを出力する。

構成:
  - LoggerProvider: アプリ名・ログレベルでバックエンド（logging）を設定し、
    メタデータ付きロガーを払い出す。プロセスで1つ（logger_provider）を共有する。
  - StructuredLogger: メタデータを保持する LoggerAdapter。
  - LambdaLogHandle: 呼び出し単位のロガー。metrics / timespan を追加で提供する。
  - LambdaLogger: 引数チェックを行い LambdaLogHandle を生成するファクトリ。

出力例:
  {"timestamp": "...", "level": "INFO", "app": "my-app", "name": "my-app.fn",
   "env": "dev", "alias": "dev", "executionId": "...", "metric": "EXECUTION_TIME",
   "value": 12, "msg": ""}
"""
import json
import logging
import sys
import time
import traceback
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from lambda_wrapper.errors import InvalidInvocationArgumentError

# logging に存在しない trace レベル
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_LEVELS = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}


def now_ms() -> int:
    """現在時刻をエポックミリ秒で返す。"""
    return int(time.time() * 1000)


def parse_level(log_level: str) -> int:
    """ログレベル名を logging のレベル値に変換する。"""
    try:
        return LOG_LEVELS[log_level.lower()]
    except (AttributeError, KeyError):
        raise InvalidInvocationArgumentError("logLevel", 2) from None


class JsonFormatter(logging.Formatter):
    """
    ログレコードを1行の JSON に整形する。

    app はレコード自身が持つアプリ名を使う（ハンドラは複数アプリで共有される）。
    """

    def format(self, record: logging.LogRecord) -> str:
        app = getattr(record, "app", None) or record.name.split(".", 1)[0]
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "app": app,
            "name": record.name,
        }
        payload.update(getattr(record, "structured", {}))
        payload["msg"] = record.getMessage()
        return json.dumps(payload, ensure_ascii=False, default=str)


class StructuredLogger(logging.LoggerAdapter):
    """
    メタデータ（self.extra）を全レコードに付与するロガー。

    各レベルのメソッドは (obj, msg=None) を受け取る。
      - obj が dict: フィールドとしてマージ
      - obj が例外: error_type / error_message / stacktrace を付与
      - それ以外: msg が無ければメッセージ、あれば detail フィールド
    """

    def __init__(self, logger: logging.Logger, extra: dict, app_name: str):
        super().__init__(logger, extra)
        self.app_name = app_name

    def _emit(self, level: int, obj: Any, msg: Optional[str] = None) -> None:
        if not self.logger.isEnabledFor(level):
            return
        fields = dict(self.extra)
        if isinstance(obj, Mapping):
            fields.update(obj)
        elif isinstance(obj, BaseException):
            fields["error_type"] = type(obj).__name__
            fields["error_message"] = str(obj)
            fields["stacktrace"] = "".join(
                traceback.format_exception(type(obj), obj, obj.__traceback__))
        elif obj is not None:
            if msg is None:
                msg = str(obj)
            else:
                fields["detail"] = str(obj)
        self.logger.log(level, msg or "", extra={"structured": fields, "app": self.app_name})

    def trace(self, obj, msg=None):
        self._emit(TRACE, obj, msg)

    def debug(self, obj, msg=None):
        self._emit(logging.DEBUG, obj, msg)

    def info(self, obj, msg=None):
        self._emit(logging.INFO, obj, msg)

    def warning(self, obj, msg=None):
        self._emit(logging.WARNING, obj, msg)

    warn = warning

    def error(self, obj, msg=None):
        self._emit(logging.ERROR, obj, msg)

    def critical(self, obj, msg=None):
        self._emit(logging.CRITICAL, obj, msg)

    fatal = critical


class LoggerProvider:
    """
    ログバックエンドの設定とロガーの払い出しを行う。

    ハンドラは1つだけ生成し、ウォームスタート時に重複登録しない。
    stream を指定しない場合は標準出力（CloudWatch Logs に転送される）に出力する。
    """

    def __init__(self, stream=None):
        self._stream = stream
        self._handler: Optional[logging.Handler] = None
        self._app_name: Optional[str] = None

    @property
    def app_name(self) -> Optional[str]:
        return self._app_name

    def configure(self, app_name: str, log_level: str) -> None:
        level = parse_level(log_level)
        if self._handler is None:
            self._handler = logging.StreamHandler(self._stream or sys.stdout)
            self._handler.setFormatter(JsonFormatter())

        base = logging.getLogger(app_name)
        base.setLevel(level)
        if self._handler not in base.handlers:
            base.addHandler(self._handler)
        # ルートロガーへの伝播による二重出力を防ぐ
        base.propagate = False
        self._app_name = app_name

    def get_logger(self, name: str, props: Optional[dict] = None,
                   app_name: Optional[str] = None) -> StructuredLogger:
        """app_name 省略時は最後に configure したアプリのロガーを返す。"""
        app_name = app_name or self._app_name
        if app_name is None:
            raise RuntimeError("Logger provider has not been configured")
        return StructuredLogger(logging.getLogger(f"{app_name}.{name}"), dict(props or {}), app_name)


# プロセス共通のデフォルトプロバイダ
logger_provider = LoggerProvider()


class LambdaLogHandle:
    """
    呼び出し単位のロガー。

    ベースロガーと呼び出し開始時刻を保持し、metrics / timespan を提供する。
    それ以外の属性（info, error 等）はベースロガーに委譲する。
    """

    def __init__(self, logger, start_time: int):
        self.logger = logger
        self.start_time = start_time

    def __getattr__(self, name):
        return getattr(self.logger, name)

    def metrics(self, metric: str, value: Any, props: Optional[dict] = None) -> None:
        """メトリクスレコード {metric, value} を info で出力する。"""
        record = dict(props or {})
        record.update(metric=metric, value=value)
        self.logger.info(record)

    def timespan(self, metric: str, metric_start_time: Optional[int] = None,
                 props: Optional[dict] = None) -> None:
        """
        経過時間（ミリ秒）をメトリクスとして出力する。

        metric_start_time 省略時は呼び出し開始時刻からの経過時間。
        """
        start = metric_start_time or self.start_time
        self.metrics(metric, now_ms() - start, props)


def _is_non_empty_str(value) -> bool:
    return isinstance(value, str) and len(value) > 0


class LambdaLogger:
    """アプリ名・ログレベルでプロバイダを設定し、Lambda 用ロガーを生成する。"""

    def __init__(self, app_name: str, log_level: str,
                 provider: Optional[LoggerProvider] = None):
        if not _is_non_empty_str(app_name):
            raise InvalidInvocationArgumentError("appName", 1)
        if not _is_non_empty_str(log_level):
            raise InvalidInvocationArgumentError("logLevel", 2)

        self._app_name = app_name
        self._provider = provider if provider is not None else logger_provider
        self._provider.configure(app_name, log_level)

    def get_logger(self, lambda_name: str, alias: str, start_time: int) -> LambdaLogHandle:
        """エイリアス・実行ID をメタデータに持つロガーを返す。"""
        if not _is_non_empty_str(lambda_name):
            raise InvalidInvocationArgumentError("lambdaName", 1)
        if not isinstance(alias, str):
            raise InvalidInvocationArgumentError("alias", 2)
        if (isinstance(start_time, bool) or not isinstance(start_time, (int, float))
                or start_time <= 0):
            raise InvalidInvocationArgumentError("startTime", 3)

        logger = self._provider.get_logger(lambda_name, {
            "env": alias,
            "alias": alias,
            "executionId": str(uuid.uuid4()),
        }, app_name=self._app_name)
        return LambdaLogHandle(logger, start_time)


def create_logger(app_name: str, log_level: str, lambda_name: str, alias: str,
                  start_time: int, provider: Optional[LoggerProvider] = None) -> LambdaLogHandle:
    """LambdaLogger の生成と get_logger をまとめて行う。"""
    return LambdaLogger(app_name, log_level, provider).get_logger(lambda_name, alias, start_time)
