import os
import pytest

# テスト時はX-Rayを無効化
os.environ["AWS_XRAY_SDK_ENABLED"] = "false"
os.environ["AWS_DEFAULT_REGION"] = "ap-northeast-1"
os.environ["AWS_REGION"] = "ap-northeast-1"

FUNCTION_ARN = "arn:aws:lambda:ap-northeast-1:123456789012:function:test-function"


def make_context(alias=None):
    """Lambdaのcontextオブジェクトモック（alias 指定時は修飾付きARN）"""
    class Context:
        aws_request_id = "test-request-id-12345"
        function_name = "test-function"
        memory_limit_in_mb = 256
        invoked_function_arn = FUNCTION_ARN if alias is None else f"{FUNCTION_ARN}:{alias}"
    return Context()


@pytest.fixture(autouse=True)
def _reset_config_cache():
    from lambda_wrapper.config import clear_config_cache
    clear_config_cache()
    yield
    clear_config_cache()
