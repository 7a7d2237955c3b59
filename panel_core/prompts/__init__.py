"""系统策略提示词。

基础策略（base policy）由服务端持有，默认从 prompts/base_policy.md 读取，
也可以通过配置 `base_policy` 覆盖。调用方只能通过 extraSystemPrompt
在基础策略之后追加内容，无法删除、替换或前置基础策略。
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional


PROMPTS_DIR = Path(__file__).resolve().parent

ADDENDUM_SEPARATOR = "\n\n"
ADDENDUM_LABEL = "Additional instructions:"


@lru_cache(maxsize=1)
def load_base_policy() -> str:
    """读取随包发布的基础策略文本。"""

    return (PROMPTS_DIR / "base_policy.md").read_text(encoding="utf-8").strip()


def build_policy(addendum: Optional[str] = None, base: Optional[str] = None) -> str:
    """构造发送给每个 Provider 的策略文本。

    - addendum 去除首尾空白后为空：返回基础策略本身。
    - 否则：基础策略 + 分隔符 + 带标签的附加段落（addendum 原样保留）。

    base 为空或仅含空白时回退到内置策略，保证输出永不为空。
    """

    policy = (base or "").strip() or load_base_policy()
    extra = (addendum or "").strip()
    if not extra:
        return policy
    return f"{policy}{ADDENDUM_SEPARATOR}{ADDENDUM_LABEL}\n{extra}"
