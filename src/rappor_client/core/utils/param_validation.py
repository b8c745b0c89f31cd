"""
Reusable validation helpers.
"""
# 说明：参数验证相关的辅助函数，用于在库内部统一进行轻量级参数检查。
# 职责：
# - ParamValidationError：专门用于参数校验失败的异常类型
# - ensure：基于布尔条件触发参数校验错误的轻量断言工具
# - ensure_type：检查参数是否属于指定类型集合，并在失败时给出带 label 的错误提示
# - ensure_int：拒绝 bool 与非整数输入，统一结构参数（位数、哈希数、cohort）的类型检查

from __future__ import annotations

from typing import Any, Tuple, Type


class ParamValidationError(ValueError):
    """Raised when parameter validation fails."""


def ensure(condition: bool, message: str, *, error: Type[Exception] = ParamValidationError) -> None:
    # 条件不满足时抛出指定的异常类型（默认使用 ParamValidationError）
    if not condition:
        raise error(message)


def ensure_type(
    value: Any,
    expected: Tuple[type, ...],
    *,
    label: str = "value",
    error: Type[Exception] = ParamValidationError,
) -> None:
    # 检查 value 是否为 expected 集合中的任意类型，否则抛出带字段标签的异常
    if not isinstance(value, expected):
        names = ", ".join(t.__name__ for t in expected)
        raise error(f"{label} must be instance of {names}")


def ensure_int(value: Any, *, label: str = "value", error: Type[Exception] = ParamValidationError) -> int:
    # bool 是 int 的子类，但作为位数或 cohort 传入几乎总是调用方笔误，这里显式拒绝
    if isinstance(value, bool) or not isinstance(value, int):
        raise error(f"{label} must be an integer (got {value!r})")
    return int(value)
