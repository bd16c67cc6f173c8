# backend/core/jstext.py

"""
JavaScript 源码文本的轻量扫描工具（不是解析器）。
只认识字符串、注释和括号配对，供依赖分析与配置提取共用。
"""

import re
from typing import List, Optional

QUOTES = "\"'`"
OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = ")]}"

_STRING_OR_COMMENT = re.compile(
    r"""("(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`)"""
    r"""|(/\*[\s\S]*?\*/|//[^\n]*)"""
)


def blank_comments(text: str) -> str:
    """
    把注释替换为等长空白（保留换行），字符串字面量原样保留。
    结果与原文长度相同，因此偏移量可以直接映射回原文。
    """
    def _sub(match: re.Match) -> str:
        if match.group(2) is None:
            return match.group(0)
        return re.sub(r"[^\n]", " ", match.group(2))
    return _STRING_OR_COMMENT.sub(_sub, text)


def skip_string(text: str, start: int) -> int:
    """返回 start 处字符串字面量结束后的下标；未闭合时返回文本长度。"""
    quote = text[start]
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return len(text)


def matching_bracket(text: str, open_index: int) -> Optional[int]:
    """open_index 处括号的配对位置；括号不平衡时返回 None。调用方应先去掉注释。"""
    stack = []
    i = open_index
    while i < len(text):
        ch = text[i]
        if ch in QUOTES:
            i = skip_string(text, i)
            continue
        if ch in OPENERS:
            stack.append(OPENERS[ch])
        elif ch in CLOSERS:
            if not stack or stack.pop() != ch:
                return None
            if not stack:
                return i
        i += 1
    return None


def split_top_level(arguments: str) -> List[str]:
    """按不在括号或字符串内的逗号切分参数列表。"""
    parts, depth, start, i = [], 0, 0, 0
    while i < len(arguments):
        ch = arguments[i]
        if ch in QUOTES:
            i = skip_string(arguments, i)
            continue
        if ch in OPENERS:
            depth += 1
        elif ch in CLOSERS:
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(arguments[start:i].strip())
            start = i + 1
        i += 1
    tail = arguments[start:].strip()
    if tail:
        parts.append(tail)
    return parts
