"""
lambda_wrapper - Lambda ハンドラ共通ラッパー

Lambda レイヤーとして配布し、各関数から import して使用する。
"""
from lambda_wrapper.alias import resolve_alias
from lambda_wrapper.config import LambdaConfig
from lambda_wrapper.decorator import ExecutionContext, HandlerWrapper, lambda_bootstrap
from lambda_wrapper.environment import Environment
from lambda_wrapper.errors import (
    InvalidArgumentError,
    InvalidInvocationArgumentError,
    LambdaWrapperError,
    UnhandledHandlerError,
)
from lambda_wrapper.logger import LambdaLogger, create_logger

__all__ = [
    "Environment",
    "ExecutionContext",
    "HandlerWrapper",
    "InvalidArgumentError",
    "InvalidInvocationArgumentError",
    "LambdaConfig",
    "LambdaLogger",
    "LambdaWrapperError",
    "UnhandledHandlerError",
    "create_logger",
    "lambda_bootstrap",
    "resolve_alias",
]
