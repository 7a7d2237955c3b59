"""Minimal demonstration of the multi-provider dispatch."""

import asyncio
import sys

from panel_core import dispatch_all

if __name__ == "__main__":
    question = " ".join(sys.argv[1:]) or "用三句话解释什么是 HTTP 缓存"
    envelope = asyncio.run(dispatch_all([{"role": "user", "content": question}]))
    print("User:", question)
    for name, result in envelope.items():
        print(f"{name}:", result.text if result.ok else f"[error] {result.error}")
