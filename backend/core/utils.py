# backend/core/utils.py

from typing import Any, Dict, List, Union

from backend.core.errors import ValidationError

JsonValue = Union[Dict[str, Any], List[Any], str, int, float, bool, None]


def split_key_path(path: str) -> List[str]:
    """'a.b.0.c' -> ['a', 'b', '0', 'c']。空路径或空段视为非法。"""
    if not isinstance(path, str) or not path.strip():
        raise ValidationError("Key path cannot be empty.")
    parts = path.split(".")
    if any(not p for p in parts):
        raise ValidationError(f"Key path '{path}' contains an empty segment.")
    return parts


def _list_index(container: list, part: str, path: str) -> int:
    try:
        index = int(part)
    except ValueError:
        raise ValidationError(f"Segment '{part}' of '{path}' must be a list index.")
    if index < 0 or index >= len(container):
        raise ValidationError(f"Index {index} of '{path}' is out of range (length {len(container)}).")
    return index


def get_in_path(root_obj: JsonValue, path: str) -> JsonValue:
    """按点分路径读取嵌套值；数字段用于列表下标。"""
    current = root_obj
    for part in split_key_path(path):
        if isinstance(current, dict):
            if part not in current:
                raise ValidationError(f"Key '{part}' of '{path}' does not exist.")
            current = current[part]
        elif isinstance(current, list):
            current = current[_list_index(current, part, path)]
        else:
            raise ValidationError(f"Cannot descend into a scalar at segment '{part}' of '{path}'.")
    return current


def set_in_path(root_obj: JsonValue, path: str, value: Any) -> JsonValue:
    """
    写时复制地设置嵌套值，返回新的根对象，原对象不被修改。
    只有路径上的容器被浅拷贝，其余兄弟节点与旧版本共享。

    - 中间段必须存在，且必须是 dict 或 list；
    - 最后一段在 dict 上可以是新键，在 list 上必须是已有下标。
    """
    parts = split_key_path(path)

    def _assign(node: JsonValue, depth: int) -> JsonValue:
        part = parts[depth]
        last = depth == len(parts) - 1
        if isinstance(node, dict):
            if not last and part not in node:
                raise ValidationError(f"Key '{part}' of '{path}' does not exist.")
            copy = dict(node)
            copy[part] = value if last else _assign(node[part], depth + 1)
            return copy
        if isinstance(node, list):
            index = _list_index(node, part, path)
            copy = list(node)
            copy[index] = value if last else _assign(node[index], depth + 1)
            return copy
        raise ValidationError(f"Cannot descend into a scalar at segment '{part}' of '{path}'.")

    return _assign(root_obj, 0)


def ensure_literal_compatible(value: Any, path: str = "value") -> None:
    """值只能由 dict(str 键)/list/str/int/float/bool/None 组成，且浮点数必须有限。"""
    if value is None or isinstance(value, (str, bool, int)):
        return
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise ValidationError(f"{path} must be a finite number.")
        return
    if isinstance(value, list):
        for i, item in enumerate(value):
            ensure_literal_compatible(item, f"{path}[{i}]")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise ValidationError(f"{path} has a non-string key {key!r}.")
            ensure_literal_compatible(item, f"{path}.{key}")
        return
    raise ValidationError(f"{path} has unsupported type '{type(value).__name__}'.")
