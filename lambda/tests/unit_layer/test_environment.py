import pytest

CUSTOM_MAP = {"local": "loc", "stage": "stg", "live": ""}


class TestEnvironmentInit:
    def test_defaults(self):
        """マップ・区切り文字省略時はデフォルト値"""
        from lambda_wrapper.environment import Environment
        env = Environment("dev")
        assert env.env == "dev"
        assert env.separator == "-"
        assert env.is_valid

    @pytest.mark.parametrize("value", [None, "", 1, True, [], {}])
    def test_invalid_env(self, value):
        from lambda_wrapper.environment import Environment
        env = Environment(value)
        assert env.env is None
        assert not env.is_valid

    @pytest.mark.parametrize("separator", [None, 1, True, [], {}])
    def test_invalid_separator(self, separator):
        from lambda_wrapper.environment import Environment
        assert Environment("dev", separator=separator).separator == "-"

    def test_custom_separator(self):
        from lambda_wrapper.environment import Environment
        assert Environment("dev", separator="_").separator == "_"

    @pytest.mark.parametrize("env_map", [None, 1, "map", ["dev"]])
    def test_invalid_map_uses_default(self, env_map):
        from lambda_wrapper.environment import Environment
        assert Environment("qa", env_map).is_valid
        assert not Environment("local", env_map).is_valid

    def test_map_is_copied(self):
        """コンストラクタ後にマップを変更しても影響しないこと"""
        from lambda_wrapper.environment import Environment
        env_map = dict(CUSTOM_MAP)
        env = Environment("stage", env_map)
        env_map["stage"] = "changed"
        assert env.get_suffix_string("name") == "name-stg"


class TestIsValid:
    @pytest.mark.parametrize("name", ["dev", "qa", "prod"])
    def test_default_envs(self, name):
        from lambda_wrapper.environment import Environment
        assert Environment(name).is_valid

    def test_not_in_default_map(self):
        from lambda_wrapper.environment import Environment
        assert not Environment("stage").is_valid

    def test_custom_map(self):
        from lambda_wrapper.environment import Environment
        assert Environment("local", CUSTOM_MAP).is_valid
        assert not Environment("dev", CUSTOM_MAP).is_valid


class TestGetSuffixString:
    @pytest.mark.parametrize("value", [None, 1, True, [], {}])
    def test_invalid_value(self, value):
        from lambda_wrapper.environment import Environment
        from lambda_wrapper.errors import InvalidArgumentError
        with pytest.raises(InvalidArgumentError, match=r"Invalid value specified \(arg #1\)"):
            Environment("dev").get_suffix_string(value)

    @pytest.mark.parametrize("name,expected", [("dev", "orders-dev"), ("qa", "orders-qa")])
    def test_suffixed(self, name, expected):
        from lambda_wrapper.environment import Environment
        assert Environment(name).get_suffix_string("orders") == expected

    def test_empty_token(self):
        """トークンが空文字列なら入力をそのまま返すこと"""
        from lambda_wrapper.environment import Environment
        assert Environment("prod").get_suffix_string("orders") == "orders"
        assert Environment("live", CUSTOM_MAP).get_suffix_string("orders") == "orders"

    def test_custom_separator(self):
        from lambda_wrapper.environment import Environment
        env = Environment("stage", CUSTOM_MAP, "_")
        assert env.get_suffix_string("orders") == "orders_stg"

    def test_invalid_env(self):
        from lambda_wrapper.environment import Environment
        assert Environment("unknown").get_suffix_string("orders") is None
