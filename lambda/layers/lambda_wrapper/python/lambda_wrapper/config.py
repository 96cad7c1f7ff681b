"""
config.py - 設定ロード

アプリ名ごとの設定ファイル（YAML / JSON）を rc 形式の探索パスから読み込み、
エイリアスをキーの名前空間としてアクセスする。

探索パス（後勝ちでマージ）:
  - /etc/<app>rc
  - ~/.<app>rc
  - ~/.<app>/config
  - ~/.config/<app>
  - ./.<app>rc
  - 環境変数 <APP>_CONFIG で指定したファイル

さらに環境変数 <app>_<a>__<b>=value でネストしたキー a.b を上書きできる。

設定ファイルの例（~/.my-apprc）:
    dev:
      log:
        level: debug
    prod:
      log:
        level: info
"""
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

from lambda_wrapper.errors import InvalidInvocationArgumentError

logger = logging.getLogger(__name__)

# プロセス内キャッシュ（コンテナ再利用時はファイルを読み直さない）
_config_cache: Dict[str, Dict[str, Any]] = {}


def _config_paths(app_name: str) -> list:
    home = Path.home()
    paths = [
        Path("/etc") / f"{app_name}rc",
        home / f".{app_name}rc",
        home / f".{app_name}" / "config",
        home / ".config" / app_name,
        Path.cwd() / f".{app_name}rc",
    ]
    env_file = os.environ.get(f"{_env_prefix(app_name).upper()}CONFIG")
    if env_file:
        paths.append(Path(env_file))
    return paths


def _env_prefix(app_name: str) -> str:
    return f"{app_name.replace('-', '_')}_"


def _deep_merge(base: dict, override: Mapping) -> dict:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        elif isinstance(value, Mapping):
            base[key] = _deep_merge({}, value)
        else:
            base[key] = value
    return base


def _read_file(path: Path) -> Optional[Mapping]:
    if not path.is_file():
        return None
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, Mapping):
        logger.warning("Ignoring non-mapping configuration file: %s", path)
        return None
    logger.debug("Loaded configuration file: %s", path)
    return data


def _env_overrides(app_name: str) -> dict:
    """<app>_a__b=value 形式の環境変数をネストした辞書に変換する。"""
    prefix = _env_prefix(app_name)
    overrides: dict = {}
    for name, value in os.environ.items():
        if not name.startswith(prefix) or name == f"{prefix.upper()}CONFIG":
            continue
        keys = [k for k in name[len(prefix):].split("__") if k]
        if not keys:
            continue
        node = overrides
        for key in keys[:-1]:
            node = node.setdefault(key, {})
            if not isinstance(node, dict):
                break
        else:
            node[keys[-1]] = value
    return overrides


def load_config(app_name: str) -> Dict[str, Any]:
    """
    アプリ名に対応する設定を読み込み、マージ済みの辞書を返す。

    結果はアプリ名ごとにキャッシュされる。

    Raises:
        yaml.YAMLError: 設定ファイルのパースに失敗した場合
    """
    if app_name in _config_cache:
        return _config_cache[app_name]

    config: Dict[str, Any] = {}
    for path in _config_paths(app_name):
        data = _read_file(path)
        if data is not None:
            _deep_merge(config, data)
    _deep_merge(config, _env_overrides(app_name))

    _config_cache[app_name] = config
    return config


def clear_config_cache() -> None:
    """キャッシュを破棄し、次回アクセス時に設定を読み直させる。"""
    _config_cache.clear()


def get_path(data: Any, key: str) -> Any:
    """ドット区切りのキーで辞書をたどる。存在しない場合は None。"""
    node = data
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


class LambdaConfig:
    """
    エイリアスを名前空間とする設定の読み取りビュー。

    get("log") は "<alias>.log" を参照する。エイリアスが空文字列の場合は
    名前空間なしで "log" を参照する。
    """

    def __init__(self, app_name: str, alias: str,
                 loader: Callable[[str], Mapping] = load_config):
        if not isinstance(app_name, str) or len(app_name) <= 0:
            raise InvalidInvocationArgumentError("appName", 1)
        if not isinstance(alias, str):
            raise InvalidInvocationArgumentError("alias", 2)

        self._config = loader(app_name)
        self._alias = alias

    @property
    def alias(self) -> str:
        return self._alias

    def get(self, key: str) -> Any:
        """設定値を返す。キーが不正・存在しない場合は None。"""
        if not isinstance(key, str) or len(key) <= 0:
            return None
        if self._alias:
            key = f"{self._alias}.{key}"
        return get_path(self._config, key)
