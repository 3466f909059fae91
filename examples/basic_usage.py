"""
Example: Basic Python API Usage

This example drives an AdversarialSession directly, without the web UI or
the CLI. Start the generation service on http://localhost:8000 first (or set
ADV_CLIENT_BACKEND).

    python examples/basic_usage.py digit_7.png
"""

import asyncio
import logging
import sys

from adv_client import AdversarialSession, AdversarialClientError

logging.basicConfig(level=logging.INFO)


async def example_single_attack(image_path: str):
    """Attack one image at the default strength."""
    print("=== Single Attack ===\n")

    session = AdversarialSession()
    status = await session.initialize()
    print(f"Backend: {status.display}")

    session.ingestor.ingest(image_path)
    result = await session.generate()

    print(f"✓ Original: {result.original_label}  Adversarial: {result.adversarial_label}\n")


async def example_epsilon_sweep(image_path: str):
    """Find the smallest epsilon that flips the prediction."""
    print("=== Epsilon Sweep ===\n")

    session = AdversarialSession()
    session.ingestor.ingest(image_path)

    for epsilon in (0.0, 0.05, 0.1, 0.2, 0.3, 0.5):
        session.parameters.set_strength(epsilon)
        result = await session.generate()
        marker = "✗ fooled" if result.label_changed else "✓ robust"
        print(f"  epsilon={session.parameters.strength:.2f}: "
              f"{result.original_label} -> {result.adversarial_label}  {marker}")
        if result.label_changed:
            break
    print()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python examples/basic_usage.py IMAGE")
        sys.exit(2)

    try:
        asyncio.run(example_single_attack(sys.argv[1]))
        asyncio.run(example_epsilon_sweep(sys.argv[1]))
    except AdversarialClientError as e:
        print(f"✗ Error: {e}")
        sys.exit(1)
