#!/usr/bin/env python3
"""
Quick script to check that the configured model is reachable
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import Config
from src.ai_agent.llm_client import LLMClient, LLMGatewayError
from src.ai_agent.tool_schemas import TOOLS


def check_model_availability(model_name: str = None) -> bool:
    """Send a tiny request with the tool schemas attached"""

    model_name = model_name or Config.DEFAULT_MODEL
    print(f"🔍 Checking {model_name} availability...")

    if not Config.OPENAI_API_KEY:
        print("❌ OPENAI_API_KEY is not set")
        return False

    try:
        client = LLMClient(model_name)
        response = client.complete(
            instructions="Reply with the single word: ready",
            context=[{"role": "user", "content": "ping"}],
            tools=TOOLS,
        )
    except LLMGatewayError as e:
        print(f"❌ Model request failed: {e}")
        return False

    print(f"  ✅ Reply: {response.text!r}")
    if response.tool_calls:
        print(f"  ⚠️  Model requested {len(response.tool_calls)} tool call(s) for a ping")
    return True


def main():
    print("LockIn Model Checker")
    print("=" * 30)

    model_name = sys.argv[1] if len(sys.argv) > 1 else None
    if check_model_availability(model_name):
        print("\n✅ Ready to run the scheduling assistant!")
    else:
        print("\n❌ Please check the model configuration before continuing")
        sys.exit(1)


if __name__ == "__main__":
    main()
