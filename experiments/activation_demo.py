"""
Activation memory demonstration and command runner.

Teaches the network a few elemental concepts and asks questions that must be
answered through activation cascades, or runs a single learn/think/status
command against a saved network.

Requires a running LM Studio server with the configured models loaded.

Usage:
    python experiments/activation_demo.py demo
    python experiments/activation_demo.py learn "Ice is frozen water"
    python experiments/activation_demo.py think "What happens when ice melts?"
    python experiments/activation_demo.py status
"""

import asyncio
import logging
from pathlib import Path

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from dotenv import load_dotenv
load_dotenv(Path(__file__).parent.parent / '.env')

from activagraph import ActivationNetwork, NetworkConfig


DEMO_CONCEPTS = [
    "Water is liquid, wet, and essential for life",
    "Ice is solid, cold, frozen water",
    "Steam is hot, gaseous water vapor",
    "Heat transforms ice to water to steam",
]

DEMO_QUESTIONS = [
    "What is ice?",
    "What happens when ice gets warm?",
    "Can steam become ice?",
]


def print_status(network: ActivationNetwork):
    metrics = network.get_metrics()
    print(f"   Nodes:       {network.size}")
    print(f"   Connections: {network.store.connection_count()}")
    print(f"   Coherence:   {metrics.coherence:.3f}")
    print(f"   Resonance:   {metrics.resonance:.3f}")
    print(f"   Stability:   {metrics.stability:.3f}")


async def run_demo(network: ActivationNetwork):
    """Teach the elemental concepts, then ask the demo questions."""
    print("\n" + "=" * 50)
    print("Activation Network Demonstration")
    print("=" * 50)

    print("\nPhase 1: Teaching basic concepts")
    print("-" * 40)
    for concept in DEMO_CONCEPTS:
        await network.learn(concept)
        print(f"   Learned: \"{concept}\"")

    print("\nPhase 2: Testing activation cascades")
    print("-" * 40)
    for question in DEMO_QUESTIONS:
        thought = await network.think_detailed(question)
        system = "System 1" if thought.system == "fast" else "System 2"
        print(f"\nQuery: '{question}'")
        print(f"   {system} (coherence={thought.broad.coherence:.3f})")
        print(f"   Pathway: {thought.pattern.narrative}")
        print(f"   Response: {thought.response}")

    print("\nSaving network state...")
    await network.persist()
    print_status(network)


async def run_command(network: ActivationNetwork, command: str, argument: str = None):
    """Run a single command and save the network afterwards."""
    if command == 'learn':
        await network.learn(argument)
        print(f"Learned: \"{argument}\"")
    elif command == 'think':
        response = await network.think(argument)
        print(response)
    elif command == 'status':
        print_status(network)

    await network.persist()


async def main_async(args):
    config = NetworkConfig.from_env(
        **({'network_path': args.network} if args.network else {})
    )
    network = ActivationNetwork.open(config)

    try:
        if args.command == 'demo':
            await run_demo(network)
        else:
            await run_command(network, args.command, args.text)
    finally:
        await network.close()


def main():
    """Main entry point for the demonstration."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Activation network demo and command runner'
    )
    parser.add_argument('command', choices=['demo', 'learn', 'think', 'status'],
                      help='What to run')
    parser.add_argument('text', nargs='?', default=None,
                      help='Text to learn or query to think about')
    parser.add_argument('--network', '-n', type=str, default=None,
                      help='Network file (default: $ACTIVAGRAPH_NETWORK_PATH or network.json)')
    parser.add_argument('--verbose', '-v', action='store_true',
                      help='Log engine activity')

    args = parser.parse_args()

    if args.command in ('learn', 'think') and not args.text:
        parser.error(f"'{args.command}' requires text")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s %(message)s'
    )

    asyncio.run(main_async(args))


if __name__ == '__main__':
    main()
