"""
alias.py - 呼び出しエイリアスの解決

Lambda の invoked_function_arn からエイリアス（またはバージョン）を取り出す。

  arn:aws:lambda:<region>:<account>:function:<name>:<alias>
   0   1     2       3        4        5       6       7

8番目（index 7）のセグメントがエイリアス。非修飾呼び出しや
$LATEST 指定の場合は空文字列を返す。
"""

# 非修飾（最新版）呼び出しを表す修飾子
LATEST_QUALIFIER = "$LATEST"

ALIAS_SEGMENT_INDEX = 7


def resolve_alias(invocation_ref) -> str:
    """ARN からエイリアスを返す。取り出せない場合は空文字列。"""
    if not isinstance(invocation_ref, str):
        return ""
    segments = invocation_ref.split(":")
    if len(segments) <= ALIAS_SEGMENT_INDEX:
        return ""
    alias = segments[ALIAS_SEGMENT_INDEX]
    if alias == LATEST_QUALIFIER:
        return ""
    return alias
