"""
Serialization helpers for parameters, metadata and encoded reports.

Provides JSON helpers with optional masking and a basic versioned wrapper.
"""
# 说明：序列化辅助工具，统一 JSON 编解码行为并内置简单的版本封装。
# 职责：
# - mask_sensitive_data：对给定字典中的敏感字段进行掩码处理，避免直接暴露客户端密钥等信息
# - serialize_to_json / deserialize_from_json：提供带可选敏感字段掩码与版本包装的 JSON 序列化/反序列化接口
# - 内部 _prepare：支持 dataclass、bytes 与自定义对象（实现 to_dict）的统一前处理

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Optional, Sequence

SensitiveFields = Sequence[str]


def mask_sensitive_data(payload: Dict[str, Any], sensitive_fields: SensitiveFields, mask: str = "***") -> Dict[str, Any]:
    # 对 payload 中指定字段进行掩码，返回浅拷贝后的新字典
    masked = dict(payload)
    for field in sensitive_fields:
        if field in masked:
            masked[field] = mask
    return masked


def _prepare(obj: Any) -> Any:
    # 将 dataclass、bytes 或实现了 to_dict 的对象转换为可 JSON 序列化的基础结构
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, (bytes, bytearray)):
        return obj.hex()
    return obj


def serialize_to_json(
    obj: Any,
    *,
    sensitive_fields: Optional[SensitiveFields] = None,
    version: Optional[str] = None,
    sort_keys: bool = False,
) -> str:
    # 将对象序列化为 JSON 字符串，支持敏感字段掩码与可选 version 包装
    payload = _prepare(obj)
    if isinstance(payload, dict) and sensitive_fields:
        payload = mask_sensitive_data(payload, sensitive_fields)
    if version is not None:
        payload = {"version": version, "payload": payload}
    return json.dumps(payload, default=_prepare, ensure_ascii=False, sort_keys=sort_keys)


def deserialize_from_json(text: str) -> Any:
    # 简单 JSON 反序列化包装，返回原始 Python 结构
    return json.loads(text)
