"""
environment.py - 環境判定と環境別文字列の生成

環境名（dev / qa / prod 等）に対応するトークンを環境マップから引き、
リソース名などに環境別のサフィックスを付与する。

使い方:
    env = Environment("dev")
    env.get_suffix_string("orders-table")   # => "orders-table-dev"
    Environment("prod").get_suffix_string("orders-table")  # => "orders-table"
"""
import copy
from collections.abc import Mapping
from typing import Optional

from lambda_wrapper.errors import InvalidArgumentError

DEFAULT_ENV_MAP = {
    "dev": "dev",
    "qa": "qa",
    "prod": "",
}


class Environment:
    """環境名と環境マップを保持し、環境別の文字列を生成する。"""

    def __init__(self, env: Optional[str], env_map: Optional[Mapping] = None,
                 separator: str = "-"):
        if not isinstance(env, str) or len(env) <= 0:
            env = None
        if not isinstance(env_map, Mapping):
            env_map = DEFAULT_ENV_MAP
        if not isinstance(separator, str):
            separator = "-"

        self._env = env
        self._separator = separator
        self._env_map = copy.deepcopy(dict(env_map))
        self._env_token = self._env_map.get(env) if env is not None else None

    @property
    def env(self) -> Optional[str]:
        return self._env

    @property
    def separator(self) -> str:
        return self._separator

    @property
    def is_valid(self) -> bool:
        """環境名が環境マップに存在する（トークンが文字列である）か。"""
        return isinstance(self._env_token, str)

    def get_suffix_string(self, value: str) -> Optional[str]:
        """
        value に環境トークンを付与した文字列を返す。

        トークンが空文字列の場合は value をそのまま返す。
        環境が不正な場合は None。
        """
        if not isinstance(value, str):
            raise InvalidArgumentError("value", 1)
        if not self.is_valid:
            return None
        separator = self._separator if len(self._env_token) > 0 else ""
        return f"{value}{separator}{self._env_token}"
